"""
ローカルストレージアダプタ

キーバリューストアの2エントリ（設定 / 記録一覧）に JSON で保存する。

方針:
    - 書き込みは毎回「コレクション全体」を1回で書き直す（差分保存はしない）。
      1日1件の記録なので、数千件でも問題にならない量に収まる。
    - 壊れた設定は「未設定」として扱う（起動不能にしない）。
    - 記録一覧の読み出しでは、壊れた1件だけを捨てて残りを返す。
    - ストアが無い環境（store=None）では、読み出しは空、書き込みは何もしない。
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from mementomori.common_utils import json_dumps, json_loads_or_none
from mementomori.schemas import (
    AppData,
    DayRecord,
    Settings,
    ValidationError,
    dump_model,
    dump_records,
    parse_day_records_lenient,
    validate_app_data,
    validate_day_record,
    validate_settings,
)
from mementomori.storage.adapter import StorageAdapter
from mementomori.storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

# ストアのキー
SETTINGS_KEY = "mementomori_settings"
RECORDS_KEY = "mementomori_records"

# エクスポート形式のバージョン
VERSION = "1.0.0"


class LocalStorageAdapter(StorageAdapter):
    """キーバリューストアに保存するアダプタ。"""

    def __init__(self, store: Optional[KeyValueStore]) -> None:
        self._store = store

    def _is_available(self) -> bool:
        """ストアが使える環境かどうか。"""
        return self._store is not None

    # --- 設定 ---

    async def get_settings(self) -> Optional[Settings]:
        if not self._is_available():
            return None

        try:
            data = self._store.get_item(SETTINGS_KEY)
        except Exception as exc:
            logger.error("設定の読み込みに失敗: %s", exc)
            raise
        if not data:
            return None

        # --- 壊れた保存値は未設定として扱う ---
        parsed = json_loads_or_none(data)
        if parsed is None:
            logger.warning("保存済みの設定がJSONとして読めないため、未設定として扱います")
            return None
        try:
            return validate_settings(parsed)
        except ValidationError as exc:
            logger.warning("保存済みの設定が不正なため、未設定として扱います: %s", exc)
            return None

    async def set_settings(self, settings: Settings | dict[str, Any]) -> None:
        if not self._is_available():
            return

        try:
            validated = validate_settings(settings)
            self._store.set_item(SETTINGS_KEY, json_dumps(dump_model(validated)))
        except Exception as exc:
            logger.error("設定の保存に失敗: %s", exc)
            raise

    # --- 日次記録 ---

    async def get_day_record(self, date: str) -> Optional[DayRecord]:
        if not self._is_available():
            return None

        for record in await self.get_all_day_records():
            if record.date == date:
                return record
        return None

    async def set_day_record(self, record: DayRecord | dict[str, Any]) -> None:
        if not self._is_available():
            return

        try:
            validated = validate_day_record(record)
            all_records = await self.get_all_day_records()

            # --- 既存の記録を更新または新規追加 ---
            for i, existing in enumerate(all_records):
                if existing.date == validated.date:
                    all_records[i] = validated
                    break
            else:
                all_records.append(validated)

            # --- 日付順にソートして、一覧全体を1回で書く ---
            all_records.sort(key=lambda r: r.date)
            self._store.set_item(RECORDS_KEY, json_dumps(dump_records(all_records)))
        except Exception as exc:
            logger.error("記録の保存に失敗: %s", exc)
            raise

    async def get_all_day_records(self) -> List[DayRecord]:
        if not self._is_available():
            return []

        try:
            data = self._store.get_item(RECORDS_KEY)
        except Exception as exc:
            logger.error("全記録の読み込みに失敗: %s", exc)
            raise
        if not data:
            return []

        parsed = json_loads_or_none(data)
        if not isinstance(parsed, list):
            logger.warning("保存済みの記録一覧が配列として読めないため、空として扱います")
            return []

        records = parse_day_records_lenient(parsed)
        dropped = len(parsed) - len(records)
        if dropped > 0:
            logger.warning("不正な記録を %d 件読み飛ばしました", dropped)
        return records

    # --- エクスポート/インポート ---

    async def export_data(self) -> AppData:
        try:
            settings = await self.get_settings()
            records = await self.get_all_day_records()

            # --- 未設定時は空の仮寿命日で組み立てる（検証で弾かれる） ---
            data = {
                "settings": dump_model(settings) if settings is not None else {"targetDate": ""},
                "records": dump_records(records),
                "version": VERSION,
            }
            return validate_app_data(data)
        except Exception as exc:
            logger.error("データのエクスポートに失敗: %s", exc)
            raise

    async def import_data(self, data: AppData | dict[str, Any]) -> None:
        if not self._is_available():
            return

        try:
            # --- 先に全体を検証する（失敗したら何も書かない） ---
            validated = validate_app_data(data)

            self._store.set_item(SETTINGS_KEY, json_dumps(dump_model(validated.settings)))

            # --- 記録は空でなければ丸ごと上書き（空なら既存を残す） ---
            if validated.records:
                by_date = {r.date: r for r in validated.records}
                records = sorted(by_date.values(), key=lambda r: r.date)
                self._store.set_item(RECORDS_KEY, json_dumps(dump_records(records)))
            logger.info("データをインポートしました: records=%d", len(validated.records))
        except Exception as exc:
            logger.error("データのインポートに失敗: %s", exc)
            raise

    async def clear_data(self) -> None:
        if not self._is_available():
            return

        try:
            self._store.remove_item(SETTINGS_KEY)
            self._store.remove_item(RECORDS_KEY)
            logger.info("全データを削除しました")
        except Exception as exc:
            logger.error("データの削除に失敗: %s", exc)
            raise

    def close(self) -> None:
        if self._store is not None:
            self._store.close()
