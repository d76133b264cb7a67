"""
共通ユーティリティ（JSONの最小セット）。

目的:
    - ストア保存とバックアップファイルで、JSON の形式（日本語保持など）を揃える。

方針:
    - 例外を投げる/投げないは用途が違うため、APIを分ける（loads / loads_or_none）。
"""

from __future__ import annotations

import json
from typing import Any


def json_dumps(payload: Any) -> str:
    """ストア保存向けにJSONを安定した形式でダンプする（日本語保持）。"""
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))


def json_dumps_pretty(payload: Any) -> str:
    """バックアップファイル向けに、人が読める形でダンプする（インデント2）。"""
    return json.dumps(payload, ensure_ascii=False, indent=2)


def json_loads_or_none(text_in: str | None) -> Any:
    """JSON文字列を読む（空文字や不正なJSONは None）。"""
    s = str(text_in or "").strip()
    if not s:
        return None
    try:
        return json.loads(s)
    except json.JSONDecodeError:
        return None
