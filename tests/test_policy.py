# -*- coding: utf-8 -*-

from __future__ import annotations

import unittest
from datetime import date, datetime, timedelta, timezone

from pethealth.errors import ValidationError
from pethealth.policy import DueStatus, Frequency, advance, classify, days_until, iso, parse_iso, to_utc

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


class TestClassify(unittest.TestCase):
    def test_missing_due_date(self) -> None:
        self.assertEqual(classify(None, NOW), DueStatus.no_date)

    def test_overdue_iff_before_now(self) -> None:
        self.assertEqual(classify(NOW - timedelta(seconds=1), NOW), DueStatus.overdue)
        self.assertEqual(classify(NOW - timedelta(days=400), NOW), DueStatus.overdue)
        self.assertNotEqual(classify(NOW, NOW), DueStatus.overdue)

    def test_due_soon_window_is_inclusive(self) -> None:
        self.assertEqual(classify(NOW, NOW), DueStatus.due_soon)
        self.assertEqual(classify(NOW + timedelta(days=30), NOW), DueStatus.due_soon)
        self.assertEqual(classify(NOW + timedelta(days=30, seconds=1), NOW), DueStatus.up_to_date)

    def test_custom_window(self) -> None:
        self.assertEqual(classify(NOW + timedelta(days=10), NOW, window_days=7), DueStatus.up_to_date)

    def test_naive_and_date_values_are_utc(self) -> None:
        self.assertEqual(classify(datetime(2025, 5, 31, 23, 0), NOW), DueStatus.overdue)
        self.assertEqual(classify(date(2025, 6, 2), NOW), DueStatus.due_soon)
        # 2025-06-01T13:00+02:00 is 11:00 UTC, i.e. an hour before NOW.
        cest = timezone(timedelta(hours=2))
        self.assertEqual(classify(datetime(2025, 6, 1, 13, 0, tzinfo=cest), NOW), DueStatus.overdue)


class TestAdvance(unittest.TestCase):
    def test_daily_and_weekly(self) -> None:
        start = datetime(2025, 12, 31, 8, 30, tzinfo=timezone.utc)
        self.assertEqual(advance(start, Frequency.daily), datetime(2026, 1, 1, 8, 30, tzinfo=timezone.utc))
        self.assertEqual(advance(start, "weekly"), datetime(2026, 1, 7, 8, 30, tzinfo=timezone.utc))

    def test_monthly_clamps_to_month_length(self) -> None:
        self.assertEqual(advance(date(2024, 1, 31), Frequency.monthly), to_utc(date(2024, 2, 29)))
        self.assertEqual(advance(date(2023, 1, 31), Frequency.monthly), to_utc(date(2023, 2, 28)))
        self.assertEqual(advance(date(2025, 3, 31), Frequency.monthly), to_utc(date(2025, 4, 30)))
        self.assertEqual(advance(date(2025, 12, 15), Frequency.monthly), to_utc(date(2026, 1, 15)))

    def test_yearly_leap_day(self) -> None:
        self.assertEqual(advance(date(2024, 2, 29), Frequency.yearly), to_utc(date(2025, 2, 28)))
        self.assertEqual(advance(date(2025, 9, 1), Frequency.yearly), to_utc(date(2026, 9, 1)))

    def test_once_and_missing_frequency_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            advance(NOW, Frequency.once)
        with self.assertRaises(ValidationError):
            advance(NOW, None)

    def test_advance_is_monotonic(self) -> None:
        start = datetime(2023, 1, 1, tzinfo=timezone.utc)
        for offset in range(0, 800, 7):
            due = start + timedelta(days=offset)
            for freq in (Frequency.daily, Frequency.weekly, Frequency.monthly, Frequency.yearly):
                self.assertGreater(advance(due, freq), due, f"{freq.value} from {due}")


class TestHelpers(unittest.TestCase):
    def test_days_until(self) -> None:
        self.assertEqual(days_until(NOW + timedelta(days=3, hours=2), NOW), 3)
        self.assertEqual(days_until(NOW - timedelta(days=2), NOW), -2)

    def test_iso_round_trip_is_utc(self) -> None:
        value = iso(datetime(2025, 1, 1, 9, 0))
        self.assertEqual(value, "2025-01-01T09:00:00.000000+00:00")
        self.assertEqual(iso(datetime(2025, 1, 1, 9, 0, 0, 500000)), "2025-01-01T09:00:00.500000+00:00")
        self.assertEqual(parse_iso("2025-01-01T09:00:00Z"), datetime(2025, 1, 1, 9, 0, tzinfo=timezone.utc))
        self.assertIsNone(parse_iso(None))


if __name__ == "__main__":
    unittest.main()
