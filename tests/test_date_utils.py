from __future__ import annotations

import unittest
from datetime import datetime, timezone

from mementomori.clock import ClockService
from mementomori.date_utils import (
    current_timestamp,
    elapsed_days,
    format_for_display,
    is_leap_year,
    is_valid_date_string,
    parse_civil_date,
    progress,
    remaining_days,
    today,
)
from tests._fixtures import clock_at


class DateUtilsTests(unittest.TestCase):
    def test_today_uses_tokyo_not_utc(self) -> None:
        # 2024-12-31 15:30 UTC = 2025-01-01 00:30 JST
        ts = datetime(2024, 12, 31, 15, 30, tzinfo=timezone.utc).timestamp()
        self.assertEqual(today(ClockService(pinned_utc_ts=ts)), "2025-01-01")

    def test_remaining_days(self) -> None:
        self.assertEqual(remaining_days("2025-01-01", clock_at(2024, 12, 31)), 1)
        self.assertEqual(remaining_days("2025-01-01", clock_at(2025, 1, 1)), 0)
        self.assertEqual(remaining_days("2025-01-01", clock_at(2025, 1, 4)), -3)
        # --- 時刻によらず暦日で数える ---
        self.assertEqual(remaining_days("2025-01-01", clock_at(2024, 12, 31, hour=23, minute=59)), 1)

    def test_elapsed_days_never_negative(self) -> None:
        clock = clock_at(2024, 12, 31)
        self.assertEqual(elapsed_days("2024-12-01", clock), 30)
        self.assertEqual(elapsed_days("2025-02-01", clock), 0)

    def test_progress(self) -> None:
        clock = clock_at(2024, 12, 31)
        self.assertAlmostEqual(progress("2024-12-21", "2025-01-10", clock), 50.0)
        self.assertEqual(progress("2025-02-01", "2024-12-31", clock), 0.0)
        self.assertEqual(progress("2024-12-01", "2024-12-20", clock), 100.0)

    def test_leap_years(self) -> None:
        self.assertTrue(is_leap_year(2024))
        self.assertTrue(is_leap_year(2000))
        self.assertFalse(is_leap_year(1900))
        self.assertFalse(is_leap_year(2023))

    def test_valid_date_string(self) -> None:
        self.assertFalse(is_valid_date_string("2024-02-30"))
        self.assertTrue(is_valid_date_string("2024-02-29"))
        self.assertFalse(is_valid_date_string("2023-02-29"))
        self.assertFalse(is_valid_date_string("2024-2-1"))
        self.assertFalse(is_valid_date_string("2024-13-01"))
        self.assertFalse(is_valid_date_string("0000-01-01"))
        self.assertFalse(is_valid_date_string(""))

    def test_parse_civil_date_rejects_invalid(self) -> None:
        self.assertEqual(parse_civil_date("2024-02-29").day, 29)
        with self.assertRaises(ValueError):
            parse_civil_date("2023-02-29")

    def test_format_for_display(self) -> None:
        self.assertEqual(format_for_display("2024-01-05"), "2024年1月5日（金）")
        self.assertEqual(format_for_display("2024-12-29"), "2024年12月29日（日）")

    def test_current_timestamp_is_jst(self) -> None:
        ts = datetime(2024, 12, 31, 12, 0, tzinfo=timezone.utc).timestamp()
        self.assertEqual(current_timestamp(ClockService(pinned_utc_ts=ts)), "2024-12-31T21:00:00+09:00")

    def test_clock_advance_moves_today(self) -> None:
        clock = clock_at(2024, 12, 31)
        clock.advance_domain_seconds(seconds=24 * 3600)
        self.assertEqual(today(clock), "2025-01-01")
        clock.reset_domain_offset()
        self.assertEqual(today(clock), "2024-12-31")
        with self.assertRaises(ValueError):
            clock.advance_domain_seconds(seconds=0)

    def test_repinning_keeps_offset(self) -> None:
        clock = clock_at(2024, 12, 31)
        clock.advance_domain_seconds(seconds=24 * 3600)
        clock.pin_domain_utc_ts(datetime(2025, 3, 1, 3, 0, tzinfo=timezone.utc).timestamp())
        self.assertEqual(today(clock), "2025-03-02")


if __name__ == "__main__":
    unittest.main()
