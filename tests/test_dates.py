import unittest
from datetime import date, datetime, timedelta, timezone

from tpfeed.dates import (
    day_portion,
    epoch_millis,
    format_ics_date,
    format_ics_datetime,
    next_day,
    parse_workout_date,
    utc_iso_millis,
)


class TestDates(unittest.TestCase):
    def test_day_portion_strips_time_suffix(self) -> None:
        self.assertEqual(day_portion("2024-03-05T00:00:00"), "2024-03-05")
        self.assertEqual(day_portion("2024-03-05"), "2024-03-05")
        self.assertIsNone(day_portion(None))
        self.assertIsNone(day_portion(""))

    def test_parse_workout_date_requires_plain_iso_date(self) -> None:
        self.assertEqual(parse_workout_date("2024-03-05"), date(2024, 3, 5))
        self.assertIsNone(parse_workout_date("2024-03-05T00:00:00"))
        self.assertIsNone(parse_workout_date("05/03/2024"))
        self.assertIsNone(parse_workout_date("2024-02-30"))
        self.assertIsNone(parse_workout_date(None))

    def test_next_day_crosses_month_and_year(self) -> None:
        self.assertEqual(next_day(date(2024, 2, 29)), date(2024, 3, 1))
        self.assertEqual(next_day(date(2024, 12, 31)), date(2025, 1, 1))

    def test_ics_formats(self) -> None:
        self.assertEqual(format_ics_date(date(2024, 3, 5)), "20240305")
        stamp = datetime(2024, 3, 5, 20, 15, 7, tzinfo=timezone(timedelta(hours=11)))
        self.assertEqual(format_ics_datetime(stamp), "20240305T091507Z")

    def test_epoch_millis_is_utc_midnight(self) -> None:
        self.assertEqual(epoch_millis(date(2024, 3, 5)), 1709596800000)

    def test_utc_iso_millis(self) -> None:
        value = datetime(2024, 3, 5, 6, 0, 0, 123456, tzinfo=timezone.utc)
        self.assertEqual(utc_iso_millis(value), "2024-03-05T06:00:00.123Z")


if __name__ == "__main__":
    unittest.main()
