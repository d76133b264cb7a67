"""
ストレージアダプタのインターフェース

設定と日次記録の読み書き、エクスポート/インポート、全削除を定める。
呼び出し側（JournalService）はこのインターフェースだけに依存し、
実装（ローカル/将来のリモート）は起動時に差し替える。
"""

from __future__ import annotations

import abc
from typing import Any, List, Optional

from mementomori.schemas import AppData, DayRecord, Settings


class StorageAdapter(abc.ABC):
    """
    ストレージアダプタ。

    方針:
        - 「まだ無い」は None（例外にしない）。呼び出し側が「未保存」とエラーを区別できるようにする。
        - 書き込みは検証に失敗したら何も保存しない（ValidationError を送出）。
        - 操作はすべてコルーチン（単一ユーザー・同時書き込みなしを前提にする）。
    """

    # --- 設定の読み書き ---

    @abc.abstractmethod
    async def get_settings(self) -> Optional[Settings]:
        """保存済みの設定。未保存、または保存値が壊れていれば None。"""

    @abc.abstractmethod
    async def set_settings(self, settings: Settings | dict[str, Any]) -> None:
        """設定を検証して保存する。"""

    # --- 日次記録の読み書き ---

    @abc.abstractmethod
    async def get_day_record(self, date: str) -> Optional[DayRecord]:
        """指定日の記録。無ければ None。"""

    @abc.abstractmethod
    async def set_day_record(self, record: DayRecord | dict[str, Any]) -> None:
        """記録を検証し、同じ日付の記録を置き換えて（無ければ追加して）保存する。"""

    @abc.abstractmethod
    async def get_all_day_records(self) -> List[DayRecord]:
        """全記録（日付昇順）。"""

    # --- 全データのエクスポート/インポート ---

    @abc.abstractmethod
    async def export_data(self) -> AppData:
        """全データを検証済みの AppData として返す。"""

    @abc.abstractmethod
    async def import_data(self, data: AppData | dict[str, Any]) -> None:
        """全データを検証してから上書きする。"""

    @abc.abstractmethod
    async def clear_data(self) -> None:
        """設定と記録をすべて削除する（元に戻せない）。"""

    def close(self) -> None:
        """保持しているリソースを解放する（既定では何もしない）。"""
