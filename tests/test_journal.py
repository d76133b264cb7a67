from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from mementomori.journal import JournalService
from mementomori.schemas import ValidationError
from mementomori.storage.kv_store import SqliteKeyValueStore
from mementomori.storage.local_adapter import LocalStorageAdapter
from tests._fixtures import clock_at, day_dict


class JournalServiceTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        tmp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(tmp_dir.cleanup)
        store = SqliteKeyValueStore(Path(tmp_dir.name) / "mementomori.db")
        self.addCleanup(store.close)
        self.clock = clock_at(2024, 12, 31, hour=7)
        self.service = JournalService(LocalStorageAdapter(store), clock=self.clock)

    async def test_defaults_when_nothing_saved(self) -> None:
        settings = await self.service.get_settings()
        self.assertEqual(settings.target_date, "")
        self.assertIsNone(settings.passcode)

        record = await self.service.get_day_record("2024-12-31")
        self.assertEqual(record.date, "2024-12-31")
        self.assertIsNone(record.morning)
        self.assertIsNone(record.evening)

    async def test_saving_default_settings_is_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            await self.service.save_settings(await self.service.get_settings())

    async def test_save_morning_keeps_created_at_and_evening(self) -> None:
        first = await self.service.save_morning({"usage": "Read", "regret": "No"})
        self.assertEqual(first.date, "2024-12-31")
        self.assertEqual(first.morning.created_at, "2024-12-31T07:00:00+09:00")

        self.clock.advance_domain_seconds(seconds=14 * 3600)
        await self.service.save_evening({"mostVital": "Read", "waste": "TV", "tomorrow": "Run"})

        self.clock.advance_domain_seconds(seconds=60)
        updated = await self.service.save_morning({"usage": "Read more", "regret": "No", "freeText": "memo"})
        self.assertEqual(updated.morning.created_at, "2024-12-31T07:00:00+09:00")
        self.assertEqual(updated.morning.updated_at, "2024-12-31T21:01:00+09:00")
        self.assertIsNotNone(updated.evening)

        stored = await self.service.get_day_record("2024-12-31")
        self.assertEqual(stored, updated)
        self.assertEqual(stored.morning.answers.free_text, "memo")

    async def test_save_evening_for_explicit_date(self) -> None:
        record = await self.service.save_evening(
            {"mostVital": "Call", "waste": "None", "tomorrow": "Same"},
            date="2024-12-30",
        )
        self.assertEqual(record.evening.date, "2024-12-30")
        self.assertIsNone((await self.service.get_day_record("2024-12-31")).evening)

    async def test_empty_answers_are_not_saved(self) -> None:
        with self.assertRaises(ValidationError):
            await self.service.save_morning({"usage": "", "regret": "No"})
        self.assertEqual(await self.service.get_all_day_records(), [])

    async def test_search_and_counts(self) -> None:
        await self.service.save_day_record(day_dict("2024-12-01", morning=True, evening=True))
        await self.service.save_day_record(day_dict("2024-12-02", morning=True, evening=False))
        await self.service.save_morning({"usage": "Finish the NOVEL", "regret": "No"}, date="2024-12-03")

        all_records = await self.service.search_day_records()
        self.assertEqual([r.date for r in all_records], ["2024-12-03", "2024-12-02", "2024-12-01"])

        complete = await self.service.search_day_records(status="complete")
        self.assertEqual([r.date for r in complete], ["2024-12-01"])

        incomplete = await self.service.search_day_records(status="incomplete")
        self.assertEqual([r.date for r in incomplete], ["2024-12-03", "2024-12-02"])

        found = await self.service.search_day_records("novel")
        self.assertEqual([r.date for r in found], ["2024-12-03"])

        # --- 夜の回答も検索対象 ---
        found_evening = await self.service.search_day_records("sleep early")
        self.assertEqual([r.date for r in found_evening], ["2024-12-01"])

        self.assertEqual(await self.service.count_by_status(), {"all": 3, "complete": 1, "incomplete": 2})

        with self.assertRaises(ValueError):
            await self.service.search_day_records(status="done")  # type: ignore[arg-type]

    async def test_countdown(self) -> None:
        unset = await self.service.countdown()
        self.assertIsNone(unset.target_date)
        self.assertIsNone(unset.remaining_days)
        self.assertFalse(unset.expired)

        await self.service.save_settings({"targetDate": "2025-01-01"})
        await self.service.save_morning({"usage": "Plan", "regret": "No"})
        cd = await self.service.countdown()
        self.assertEqual(cd.today, "2024-12-31")
        self.assertEqual(cd.remaining_days, 1)
        self.assertFalse(cd.expired)
        self.assertTrue(cd.has_morning)
        self.assertFalse(cd.has_evening)

        self.clock.advance_domain_seconds(seconds=24 * 3600)
        self.assertTrue((await self.service.countdown()).expired)


if __name__ == "__main__":
    unittest.main()
