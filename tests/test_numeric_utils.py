import unittest

from tpfeed.numeric_utils import as_float, format_number, hours_to_hms, meters_to_distance, tss_label


class TestDurationFormatting(unittest.TestCase):
    def test_hours_to_hms(self) -> None:
        self.assertEqual(hours_to_hms(1.5), "1:30:00")
        self.assertEqual(hours_to_hms(0.92), "0:55:12")
        self.assertEqual(hours_to_hms(10.25), "10:15:00")

    def test_rounds_to_whole_seconds(self) -> None:
        self.assertEqual(hours_to_hms(1.0001), "1:00:00")
        self.assertEqual(hours_to_hms(0.25), "0:15:00")

    def test_non_positive_or_non_numeric_is_absent(self) -> None:
        self.assertIsNone(hours_to_hms(0))
        self.assertIsNone(hours_to_hms(-1.0))
        self.assertIsNone(hours_to_hms("1.5"))
        self.assertIsNone(hours_to_hms(None))
        self.assertIsNone(hours_to_hms(True))


class TestDistanceFormatting(unittest.TestCase):
    def test_kilometers_from_one_thousand_meters(self) -> None:
        self.assertEqual(meters_to_distance(12000), "12.0 km")
        self.assertEqual(meters_to_distance(1000), "1.0 km")
        self.assertEqual(meters_to_distance(21097.5), "21.1 km")

    def test_kilometer_ties_round_up(self) -> None:
        self.assertEqual(meters_to_distance(1250), "1.3 km")
        self.assertEqual(meters_to_distance(2250), "2.3 km")
        self.assertEqual(meters_to_distance(10250), "10.3 km")
        self.assertEqual(meters_to_distance(1249), "1.2 km")

    def test_meters_below_one_thousand(self) -> None:
        self.assertEqual(meters_to_distance(500), "500 m")
        self.assertEqual(meters_to_distance(400.5), "401 m")
        self.assertEqual(meters_to_distance(0), "0 m")

    def test_non_numeric_is_absent(self) -> None:
        self.assertIsNone(meters_to_distance(None))
        self.assertIsNone(meters_to_distance("12000"))


class TestTssAndNumbers(unittest.TestCase):
    def test_tss_label_rounds_half_up(self) -> None:
        self.assertEqual(tss_label(54.5), "55 TSS")
        self.assertEqual(tss_label(60), "60 TSS")
        self.assertIsNone(tss_label(None))

    def test_as_float_rejects_bool_and_nan(self) -> None:
        self.assertIsNone(as_float(False))
        self.assertIsNone(as_float(float("nan")))
        self.assertEqual(as_float(3), 3.0)

    def test_format_number_drops_integral_fraction(self) -> None:
        self.assertEqual(format_number(400.0), "400")
        self.assertEqual(format_number(1.5), "1.5")
        self.assertEqual(format_number(5), "5")


if __name__ == "__main__":
    unittest.main()
