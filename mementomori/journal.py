"""
ジャーナルサービス（ストレージアダプタの薄いラッパ）

呼び出し側が None を扱わずに済むよう、既定値を補って返す。
- 設定が無い -> 仮寿命日が空の Settings
- 記録が無い -> 朝/夜どちらも無い DayRecord

あわせて、朝/夜の記録の部分更新、記録一覧の絞り込み、残り日数の表示用データを提供する。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Literal, Optional

from mementomori.clock import ClockService
from mementomori.date_utils import current_timestamp, is_valid_date_string, remaining_days, today
from mementomori.schemas import (
    AppData,
    DayRecord,
    EveningAnswers,
    MorningAnswers,
    Settings,
    validate_evening_record,
    validate_morning_record,
)
from mementomori.storage.adapter import StorageAdapter

logger = logging.getLogger(__name__)

RecordStatus = Literal["all", "complete", "incomplete"]


@dataclass(frozen=True)
class Countdown:
    """トップ表示用のまとめ。"""

    today: str
    target_date: Optional[str]  # 未設定なら None
    remaining_days: Optional[int]  # 未設定/不正な日付なら None
    has_morning: bool
    has_evening: bool

    @property
    def expired(self) -> bool:
        """仮寿命日を迎えた（残り0日以下）か。"""
        return self.remaining_days is not None and self.remaining_days <= 0


def _record_text(record: DayRecord) -> str:
    """検索対象のテキスト（全回答を連結）。"""
    parts: List[str] = []
    if record.morning is not None:
        a = record.morning.answers
        parts.extend([a.usage, a.regret, a.free_text or ""])
    if record.evening is not None:
        b = record.evening.answers
        parts.extend([b.most_vital, b.waste, b.tomorrow, b.free_text or ""])
    return " ".join(parts)


class JournalService:
    """
    アプリの操作窓口。

    アダプタは外から渡す（生成/寿命の管理は app_bootstrap が持つ）。
    """

    def __init__(self, adapter: StorageAdapter, clock: Optional[ClockService] = None) -> None:
        self._adapter = adapter
        self._clock = clock or ClockService()

    @property
    def adapter(self) -> StorageAdapter:
        return self._adapter

    @property
    def clock(self) -> ClockService:
        return self._clock

    def today(self) -> str:
        """このサービスの時計で見た今日（JST）。"""
        return today(self._clock)

    # --- 設定 ---

    async def get_settings(self) -> Settings:
        """設定を返す（未設定なら仮寿命日が空の既定値）。"""
        settings = await self._adapter.get_settings()
        if settings is None:
            # --- 既定値は検証を通らない値なので、検証せずに組み立てる ---
            return Settings.model_construct(target_date="", passcode=None)
        return settings

    async def save_settings(self, settings: Settings | dict[str, Any]) -> None:
        await self._adapter.set_settings(settings)

    # --- 日次記録 ---

    async def get_day_record(self, date: str) -> DayRecord:
        """指定日の記録を返す（無ければ朝/夜とも空の記録）。"""
        record = await self._adapter.get_day_record(date)
        if record is None:
            return DayRecord(date=date, morning=None, evening=None)
        return record

    async def save_day_record(self, record: DayRecord | dict[str, Any]) -> None:
        await self._adapter.set_day_record(record)

    async def get_all_day_records(self) -> List[DayRecord]:
        return await self._adapter.get_all_day_records()

    async def save_morning(
        self,
        answers: MorningAnswers | dict[str, Any],
        *,
        date: Optional[str] = None,
    ) -> DayRecord:
        """
        朝の記録を保存する。

        - createdAt は既存の朝の記録があれば引き継ぎ、updatedAt は毎回更新する。
        - 夜の記録はそのまま残す。

        Returns:
            保存後の DayRecord。
        """
        day = date or self.today()
        current = await self.get_day_record(day)
        now = current_timestamp(self._clock)
        morning = validate_morning_record(
            {
                "date": day,
                "answers": answers,
                "createdAt": current.morning.created_at if current.morning is not None else now,
                "updatedAt": now,
            }
        )
        updated = DayRecord(date=day, morning=morning, evening=current.evening)
        await self._adapter.set_day_record(updated)
        logger.info("朝の記録を保存しました: %s", day)
        return updated

    async def save_evening(
        self,
        answers: EveningAnswers | dict[str, Any],
        *,
        date: Optional[str] = None,
    ) -> DayRecord:
        """夜の記録を保存する（createdAt/updatedAt の扱いは save_morning と同じ）。"""
        day = date or self.today()
        current = await self.get_day_record(day)
        now = current_timestamp(self._clock)
        evening = validate_evening_record(
            {
                "date": day,
                "answers": answers,
                "createdAt": current.evening.created_at if current.evening is not None else now,
                "updatedAt": now,
            }
        )
        updated = DayRecord(date=day, morning=current.morning, evening=evening)
        await self._adapter.set_day_record(updated)
        logger.info("夜の記録を保存しました: %s", day)
        return updated

    async def search_day_records(self, term: str = "", status: RecordStatus = "all") -> List[DayRecord]:
        """
        記録一覧を絞り込んで新しい順に返す。

        Args:
            term: 回答本文の部分一致（大文字小文字を区別しない）。空なら絞り込まない。
            status: all / complete（朝夜とも記入済み）/ incomplete（未記入あり）。
        """
        if status not in ("all", "complete", "incomplete"):
            raise ValueError(f"unknown status: {status!r}")

        needle = term.strip().lower()
        out: List[DayRecord] = []
        for record in await self._adapter.get_all_day_records():
            if needle and needle not in _record_text(record).lower():
                continue
            if status == "complete" and not record.is_complete:
                continue
            if status == "incomplete" and record.is_complete:
                continue
            out.append(record)
        out.reverse()
        return out

    async def count_by_status(self) -> dict[str, int]:
        """all / complete / incomplete ごとの件数。"""
        records = await self._adapter.get_all_day_records()
        complete = sum(1 for r in records if r.is_complete)
        return {"all": len(records), "complete": complete, "incomplete": len(records) - complete}

    async def countdown(self) -> Countdown:
        """今日の残り日数と、今日の記入状況をまとめて返す。"""
        day = self.today()
        settings = await self.get_settings()
        record = await self.get_day_record(day)

        target = settings.target_date or None
        days: Optional[int] = None
        if target is not None and is_valid_date_string(target):
            days = remaining_days(target, self._clock)
        return Countdown(
            today=day,
            target_date=target,
            remaining_days=days,
            has_morning=record.morning is not None,
            has_evening=record.evening is not None,
        )

    # --- 全データ ---

    async def export_data(self) -> AppData:
        return await self._adapter.export_data()

    async def import_data(self, data: AppData | dict[str, Any]) -> None:
        await self._adapter.import_data(data)

    async def clear_all_data(self) -> None:
        await self._adapter.clear_data()
