"""
バックアップファイルの書き出し/読み込み

エクスポートした AppData を JSON ファイルとして保存し、同じ形のファイルから復元する。
ファイル名は mementomori-backup-YYYY-MM-DD.json（日付は JST の今日）。
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from mementomori.clock import ClockService
from mementomori.common_utils import json_dumps_pretty
from mementomori.date_utils import today
from mementomori.journal import JournalService
from mementomori.schemas import AppData, dump_model, validate_app_data

logger = logging.getLogger(__name__)


class BackupFileError(RuntimeError):
    """バックアップファイルが読めない/JSONとして解釈できない。"""


def backup_filename(clock: Optional[ClockService] = None) -> str:
    """既定のバックアップファイル名を返す。"""
    return f"mementomori-backup-{today(clock)}.json"


async def export_to_file(service: JournalService, destination: str | Path) -> Path:
    """
    全データをJSONファイルへ書き出す。

    Args:
        destination: ファイルパス、または既存ディレクトリ（既定のファイル名で保存）。

    Returns:
        書き出したファイルのパス。
    """
    data = await service.export_data()

    path = Path(destination)
    if path.is_dir():
        path = path / backup_filename(service.clock)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json_dumps_pretty(dump_model(data)) + "\n", encoding="utf-8")
    logger.info("バックアップを書き出しました: %s (records=%d)", path, len(data.records))
    return path


def load_backup_file(path: str | Path) -> AppData:
    """
    バックアップファイルを読み込み、AppData として検証する。

    Raises:
        BackupFileError: 読めない、またはJSONではない。
        ValidationError: JSONの形が AppData ではない。
    """
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise BackupFileError(f"バックアップファイルを読めません: {p}") from exc
    try:
        obj = json.loads(text)
    except json.JSONDecodeError as exc:
        raise BackupFileError(f"バックアップファイルがJSONではありません: {p}") from exc
    return validate_app_data(obj)


async def import_from_file(service: JournalService, path: str | Path) -> AppData:
    """バックアップファイルから全データを復元する（既存データは上書き）。"""
    data = load_backup_file(path)
    await service.import_data(data)
    return data
