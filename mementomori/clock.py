"""
アプリ内時計サービス。

目的:
    - 実時間と、検証用に固定/前進できる論理時間（domain）を分離する。
    - 「今日」や残り日数の計算を、実際の日付に依存せずに検証できるようにする。
"""

from __future__ import annotations

import threading
import time
from typing import Optional


class ClockService:
    """
    日付計算に使う時計。

    方針:
        - domain時刻: OSの現在時刻（固定時は固定値）+ offset秒。
        - 固定/前進はテストやCLIの検証用途。
    """

    def __init__(self, *, pinned_utc_ts: Optional[float] = None) -> None:
        # --- 可変状態（固定時刻とオフセット秒） ---
        self._lock = threading.Lock()
        self._pinned_utc_ts = pinned_utc_ts
        self._domain_offset_seconds = 0

    def now_domain_utc_ts(self) -> float:
        """domain時刻（UTC epoch seconds）を返す。"""

        with self._lock:
            base = self._pinned_utc_ts
            offset = int(self._domain_offset_seconds)
        if base is None:
            base = time.time()
        return float(base) + offset

    def pin_domain_utc_ts(self, ts: float) -> None:
        """domain時刻を固定する（offset はそのまま加算される）。"""

        with self._lock:
            self._pinned_utc_ts = float(ts)

    def advance_domain_seconds(self, *, seconds: int) -> int:
        """
        domain時刻を前進させる。

        Returns:
            変更後のoffset秒。
        """

        delta = int(seconds)
        if delta <= 0:
            raise ValueError("seconds must be >= 1")

        with self._lock:
            self._domain_offset_seconds = int(self._domain_offset_seconds) + delta
            return int(self._domain_offset_seconds)

    def reset_domain_offset(self) -> None:
        """domain時刻オフセットを0へ戻す。"""

        with self._lock:
            self._domain_offset_seconds = 0
