"""
Free-text duration heuristic used by the daily hours cap.
"""
import unittest

from wahotrip.modules.planning.duration import parse_duration_hours, total_hours


class ParseDurationHoursTests(unittest.TestCase):
    def test_hour_patterns(self):
        self.assertEqual(parse_duration_hours("2 hours"), 2.0)
        self.assertEqual(parse_duration_hours("1 hour"), 1.0)
        self.assertEqual(parse_duration_hours("1.5 hrs"), 1.5)
        self.assertEqual(parse_duration_hours("3h"), 3.0)

    def test_range_uses_the_upper_bound_next_to_the_unit(self):
        self.assertEqual(parse_duration_hours("2-3 hours"), 3.0)

    def test_hours_and_minutes_are_summed(self):
        self.assertEqual(parse_duration_hours("1 hour 30 minutes"), 1.5)

    def test_minutes_only(self):
        self.assertEqual(parse_duration_hours("90 min"), 1.5)
        self.assertEqual(parse_duration_hours("45 minutes"), 0.75)

    def test_bare_numbers(self):
        self.assertEqual(parse_duration_hours("45"), 0.75)
        self.assertEqual(parse_duration_hours("3"), 3.0)

    def test_keywords(self):
        self.assertEqual(parse_duration_hours("Full day"), 8.0)
        self.assertEqual(parse_duration_hours("whole day trip"), 8.0)
        self.assertEqual(parse_duration_hours("Half day"), 4.0)
        self.assertEqual(parse_duration_hours("Morning"), 3.0)
        self.assertEqual(parse_duration_hours("afternoon session"), 3.0)

    def test_unrecognised_text_defaults_to_two_hours(self):
        self.assertEqual(parse_duration_hours("flexible"), 2.0)

    def test_minimum_is_half_an_hour(self):
        self.assertEqual(parse_duration_hours("10 minutes"), 0.5)
        self.assertEqual(parse_duration_hours("0 hours"), 0.5)

    def test_empty_is_zero(self):
        self.assertEqual(parse_duration_hours(""), 0.0)
        self.assertEqual(parse_duration_hours(None), 0.0)


class TotalHoursTests(unittest.TestCase):
    def test_sums_entries_and_defaults_missing_ones(self):
        self.assertEqual(total_hours(["2 hours", "Half day"]), 6.0)
        self.assertEqual(total_hours(["", "1 hour"]), 3.0)

    def test_empty_day(self):
        self.assertEqual(total_hours([]), 0)


if __name__ == "__main__":
    unittest.main()
