"""
起動時の設定・ストア初期化。

目的:
    - 初期化の順序（設定 -> ログ -> ストア -> アダプタ -> サービス）を1箇所で固定する。
    - テストでは config / clock を差し込んで同じ配線を使えるようにする。
"""

from __future__ import annotations

import logging
import pathlib
from dataclasses import dataclass
from typing import Optional

from mementomori.clock import ClockService
from mementomori.config import Config, load_config
from mementomori.journal import JournalService
from mementomori.runtime.logging import setup_logging
from mementomori.storage.adapter import StorageAdapter
from mementomori.storage.factory import create_storage_adapter

logger = logging.getLogger(__name__)


@dataclass
class AppRuntime:
    """起動済みの部品一式。使い終わったら close() する。"""

    config: Config
    adapter: StorageAdapter
    service: JournalService

    def close(self) -> None:
        """ストアの接続を閉じる。"""
        self.adapter.close()


def bootstrap_app_runtime(
    config_path: str | pathlib.Path | None = None,
    *,
    config: Optional[Config] = None,
    clock: Optional[ClockService] = None,
    configure_logging: bool = True,
) -> AppRuntime:
    """
    起動時の初期化を実行し、AppRuntime を返す。

    Args:
        config_path: 設定ファイル。省略時は既定パス（無ければ既定値）。
        config: 読み込み済みの設定（指定時は config_path を無視する）。
        clock: 日付計算に使う時計。省略時は実時間。
        configure_logging: ルートロガーを設定するか。

    Raises:
        NotImplementedError: リモートストレージが選ばれた場合。
    """

    # --- 1. 設定を読み込み、ログ設定を先に確定する ---
    cfg = config if config is not None else load_config(config_path)
    if configure_logging:
        setup_logging(
            cfg.log_level,
            log_file_enabled=cfg.log_file_enabled,
            log_file_path=cfg.log_file_path,
            log_file_max_bytes=cfg.log_file_max_bytes,
        )

    # --- 2. アダプタ（とストア）を組み立て、サービスへ渡す ---
    adapter = create_storage_adapter(cfg)
    service = JournalService(adapter, clock=clock)
    logger.debug("app runtime bootstrapped: db=%s", cfg.db_path)
    return AppRuntime(config=cfg, adapter=adapter, service=service)
