"""
ストレージアダプタの選択

Config の use_remote_storage に従ってアダプタを組み立てる。
作ったアダプタは呼び出し側（app_bootstrap）が保持し、JournalService へ渡す。
"""

from __future__ import annotations

from typing import Optional

from mementomori.config import Config
from mementomori.storage.adapter import StorageAdapter
from mementomori.storage.kv_store import KeyValueStore, SqliteKeyValueStore


def create_key_value_store(config: Config) -> KeyValueStore:
    """設定に従ってローカルのキーバリューストアを開く。"""

    return SqliteKeyValueStore(config.db_path)


def create_storage_adapter(config: Config, store: Optional[KeyValueStore] = None) -> StorageAdapter:
    """
    ストレージアダプタを作る。

    Args:
        config: 起動設定。use_remote_storage が True ならリモート（未実装）。
        store: ローカル用のストア。省略時は config.db_path を開く。

    Raises:
        NotImplementedError: リモートストレージが選ばれた場合。
    """

    if config.use_remote_storage:
        raise NotImplementedError("リモートストレージアダプタはまだ実装されていません")

    from mementomori.storage.local_adapter import LocalStorageAdapter

    return LocalStorageAdapter(store if store is not None else create_key_value_store(config))
