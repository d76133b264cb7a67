from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from mementomori.backup import BackupFileError, backup_filename, export_to_file, import_from_file, load_backup_file
from mementomori.journal import JournalService
from mementomori.schemas import ValidationError
from mementomori.storage.kv_store import SqliteKeyValueStore
from mementomori.storage.local_adapter import LocalStorageAdapter
from tests._fixtures import clock_at


class BackupTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        tmp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(tmp_dir.cleanup)
        self.tmp_path = Path(tmp_dir.name)
        store = SqliteKeyValueStore(self.tmp_path / "mementomori.db")
        self.addCleanup(store.close)
        self.clock = clock_at(2024, 12, 31)
        self.service = JournalService(LocalStorageAdapter(store), clock=self.clock)

    def test_backup_filename(self) -> None:
        self.assertEqual(backup_filename(self.clock), "mementomori-backup-2024-12-31.json")

    async def test_export_to_directory_and_restore(self) -> None:
        await self.service.save_settings({"targetDate": "2030-01-01"})
        await self.service.save_morning({"usage": "散歩", "regret": "しない"})

        path = await export_to_file(self.service, self.tmp_path)
        self.assertEqual(path.name, "mementomori-backup-2024-12-31.json")
        text = path.read_text(encoding="utf-8")
        self.assertIn("散歩", text)
        payload = json.loads(text)
        self.assertEqual(payload["version"], "1.0.0")
        self.assertEqual(payload["settings"], {"targetDate": "2030-01-01"})

        await self.service.clear_all_data()
        data = await import_from_file(self.service, path)
        self.assertEqual(len(data.records), 1)
        restored = await self.service.get_day_record("2024-12-31")
        self.assertEqual(restored.morning.answers.usage, "散歩")

    def test_load_rejects_unreadable_and_malformed_files(self) -> None:
        with self.assertRaises(BackupFileError):
            load_backup_file(self.tmp_path / "missing.json")

        broken = self.tmp_path / "broken.json"
        broken.write_text("{not json", encoding="utf-8")
        with self.assertRaises(BackupFileError):
            load_backup_file(broken)

        no_version = self.tmp_path / "no_version.json"
        no_version.write_text(json.dumps({"settings": {"targetDate": "2030-01-01"}, "records": []}), encoding="utf-8")
        with self.assertRaises(ValidationError):
            load_backup_file(no_version)


if __name__ == "__main__":
    unittest.main()
