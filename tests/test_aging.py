import unittest
from datetime import date, datetime, timedelta

from validapro.core.aging import days_remaining


class DaysRemainingTest(unittest.TestCase):
    def test_same_day_is_zero(self):
        day = date(2025, 3, 10)
        self.assertEqual(days_remaining(day, day), 0)

    def test_expired_yesterday_is_negative_one(self):
        as_of = date(2025, 3, 10)
        self.assertEqual(days_remaining(as_of - timedelta(days=1), as_of), -1)

    def test_boundaries(self):
        as_of = date(2025, 1, 1)
        cases = [
            (date(2025, 1, 2), 1),
            (date(2025, 1, 31), 30),
            (date(2024, 12, 1), -31),
            (date(2025, 3, 1), 59),
        ]
        for expiration, expected in cases:
            with self.subTest(expiration=expiration):
                self.assertEqual(days_remaining(expiration, as_of), expected)

    def test_time_of_day_is_ignored(self):
        expiration = datetime(2025, 3, 11, 0, 5)
        as_of = datetime(2025, 3, 10, 23, 55)
        self.assertEqual(days_remaining(expiration, as_of), 1)
        self.assertEqual(days_remaining(datetime(2025, 3, 10, 1, 0), as_of), 0)

    def test_accepts_iso_strings(self):
        self.assertEqual(days_remaining("2025-02-01", "2025-01-01"), 31)

    def test_accepts_day_first_and_timestamps(self):
        self.assertEqual(days_remaining("01/02/2025", "2025-01-01"), 31)
        self.assertEqual(days_remaining("2025-01-02T23:30:00Z", date(2025, 1, 1)), 1)

    def test_defaults_to_today(self):
        self.assertEqual(days_remaining(date.today() + timedelta(days=7)), 7)

    def test_rejects_unparseable_date(self):
        with self.assertRaises(ValueError):
            days_remaining("not-a-date", date(2025, 1, 1))

    def test_rejects_trailing_text_after_the_date(self):
        self.assertEqual(days_remaining("2025-01-02 08:00", date(2025, 1, 1)), 1)
        for value in ("2025-01-01garbage", "2025-01-011", "2025-01-01T25:00"):
            with self.subTest(value=value):
                with self.assertRaises(ValueError):
                    days_remaining(value, date(2025, 1, 1))


if __name__ == "__main__":
    unittest.main()
