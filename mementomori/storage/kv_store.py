"""
キーバリューストア（SQLite）

ブラウザの localStorage に相当する「文字列キー -> 文字列値」の永続ストア。
値の形（JSON の中身）には関与しない。検証はストレージアダプタ側で行う。

方針:
    - 1キー = 1行。書き込みは1回の呼び出しにつき1トランザクション。
    - 値は丸ごと置き換える（部分更新はしない）。
"""

from __future__ import annotations

import abc
import contextlib
import logging
import time
from pathlib import Path
from typing import Iterator, Optional

from sqlalchemy import Integer, Text, create_engine, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Mapped, Session, declarative_base, mapped_column, sessionmaker

logger = logging.getLogger(__name__)

# キーバリューストア用 Base
KvBase = declarative_base()


class KvEntry(KvBase):
    """キーバリューストアの1エントリ。"""

    __tablename__ = "kv_entries"

    key: Mapped[str] = mapped_column(Text, primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[int] = mapped_column(Integer, nullable=False)  # UTC epoch seconds


class KeyValueStore(abc.ABC):
    """文字列キー/文字列値のストア（localStorage 相当の最小インターフェース）。"""

    @abc.abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """値を返す。無ければ None。"""

    @abc.abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """値を丸ごと置き換える。"""

    @abc.abstractmethod
    def remove_item(self, key: str) -> None:
        """キーを削除する（無くてもエラーにしない）。"""

    def close(self) -> None:
        """保持しているリソースを解放する。"""


class SqliteKeyValueStore(KeyValueStore):
    """SQLAlchemy + SQLite によるキーバリューストア。"""

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)

        db_url = f"sqlite:///{self._db_path}"
        # SQLiteの場合はスレッドチェックを無効化し、ロック解消を待つ。
        connect_args = {"check_same_thread": False, "timeout": 10.0}
        self._engine = create_engine(db_url, future=True, connect_args=connect_args)
        self._session_factory = sessionmaker(bind=self._engine, autoflush=False, autocommit=False, future=True)

        try:
            KvBase.metadata.create_all(bind=self._engine)
        except Exception as exc:
            # 壊れたDBファイルなど。接続を残さない。
            logger.error("キーバリューストアの初期化に失敗: %s (%s)", self._db_path, exc)
            self._engine.dispose()
            raise
        logger.info("key-value store initialized: %s", db_url)

    @property
    def db_path(self) -> Path:
        return self._db_path

    @contextlib.contextmanager
    def _session_scope(self) -> Iterator[Session]:
        """
        セッションスコープ（with文用）。

        正常終了時はコミット、例外時はロールバックする。
        """
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def get_item(self, key: str) -> Optional[str]:
        with self._session_scope() as session:
            row = session.execute(select(KvEntry.value).where(KvEntry.key == key)).first()
        if row is None:
            return None
        return str(row[0])

    def set_item(self, key: str, value: str) -> None:
        stmt = sqlite_insert(KvEntry).values(key=key, value=value, updated_at=int(time.time()))
        stmt = stmt.on_conflict_do_update(
            index_elements=[KvEntry.key],
            set_={"value": stmt.excluded.value, "updated_at": stmt.excluded.updated_at},
        )
        with self._session_scope() as session:
            session.execute(stmt)

    def remove_item(self, key: str) -> None:
        with self._session_scope() as session:
            session.query(KvEntry).filter(KvEntry.key == key).delete()

    def close(self) -> None:
        # --- Windows で一時ディレクトリを消せるよう、接続プールを確実に閉じる ---
        self._engine.dispose()
