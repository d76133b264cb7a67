"""
ログ設定

起動時に一度だけ呼び、ルートロガーへコンソール/ファイルのハンドラを取り付ける。
各モジュールは `logging.getLogger(__name__)` でロガーを取得するだけにする。
"""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path
from typing import Optional

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# setup_logging が取り付けたハンドラ（再設定時に外す）
_installed_handlers: list[logging.Handler] = []


def setup_logging(
    level: str = "INFO",
    *,
    log_file_enabled: bool = False,
    log_file_path: Optional[str] = None,
    log_file_max_bytes: int = 200_000,
) -> None:
    """
    ルートロガーを設定する。

    Args:
        level: ログレベル（DEBUG/INFO/WARNING/ERROR/CRITICAL）。
        log_file_enabled: ファイルログを出すか。
        log_file_path: ファイルログの保存先。
        log_file_max_bytes: ローテーションサイズ（bytes）。バックアップは3世代。
    """

    root = logging.getLogger()
    root.setLevel(str(level).upper())

    # --- 二重登録を防ぐ（テストやCLIから複数回呼ばれ得る） ---
    for handler in _installed_handlers:
        root.removeHandler(handler)
        handler.close()
    _installed_handlers.clear()

    formatter = logging.Formatter(_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    root.addHandler(console)
    _installed_handlers.append(console)

    if log_file_enabled and log_file_path:
        path = Path(log_file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            path,
            maxBytes=int(log_file_max_bytes),
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
        _installed_handlers.append(file_handler)
