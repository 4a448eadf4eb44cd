import unittest

from tripcast.domain import DaySummary
from tripcast.normalizer import (
    RAIN_CANDIDATES,
    TEMPERATURE_CANDIDATES,
    WIND_CANDIDATES,
    as_number,
    empty_day,
    normalize_day,
    probe,
    round1,
)


class TestProbe(unittest.TestCase):
    def test_first_present_candidate_wins(self):
        raw = {"temperature": {"day": 14.0, "average": 99.0}}
        self.assertEqual(probe(raw, TEMPERATURE_CANDIDATES), 14.0)

    def test_falls_through_to_average(self):
        raw = {"temperature": {"average": 11.0, "min": 0, "max": 4}}
        self.assertEqual(probe(raw, TEMPERATURE_CANDIDATES), 11.0)

    def test_midpoint_of_min_max(self):
        raw = {"temperature": {"min": 10, "max": 15}}
        self.assertEqual(probe(raw, TEMPERATURE_CANDIDATES), 12.5)

    def test_midpoint_needs_both_bounds(self):
        raw = {"temperature": {"min": 10}}
        self.assertIsNone(probe(raw, TEMPERATURE_CANDIDATES))

    def test_wind_nested_max_speed(self):
        self.assertEqual(probe({"wind": {"max": {"speed": 7.2, "direction": 120}}}, WIND_CANDIDATES), 7.2)
        self.assertEqual(probe({"wind": {"max_speed": 3.0}}, WIND_CANDIDATES), 3.0)
        self.assertEqual(probe({"wind_speed_max": 2.0, "wind_speed": 1.0}, WIND_CANDIDATES), 2.0)

    def test_non_numeric_candidate_is_skipped(self):
        # `rain` can be an object without `total`; probing moves on to rain_mm
        raw = {"rain": {"1h": 0.3}, "rain_mm": 2.5}
        self.assertEqual(probe(raw, RAIN_CANDIDATES), 2.5)

    def test_as_number(self):
        self.assertEqual(as_number("3.5"), 3.5)
        self.assertIsNone(as_number(True))
        self.assertIsNone(as_number("n/a"))
        self.assertIsNone(as_number(float("nan")))


class TestNormalizeDay(unittest.TestCase):
    def test_day_summary_payload(self):
        raw = {
            "temperature": {"min": 10.0, "max": 20.0, "afternoon": 18.0},
            "wind": {"max": {"speed": 5.55, "direction": 200}},
            "precipitation": {"total": 1.25},
        }
        day = normalize_day("2025-01-01", raw)
        self.assertEqual(day, DaySummary(day="2025-01-01", temp_avg_c=15.0, wind_max_ms=5.6, rain_mm=1.3))

    def test_missing_fields_default_asymmetrically(self):
        day = normalize_day("2025-01-02", {})
        self.assertIsNone(day.temp_avg_c)
        self.assertEqual(day.wind_max_ms, 0.0)
        self.assertEqual(day.rain_mm, 0.0)

    def test_none_payload(self):
        self.assertEqual(normalize_day("2025-01-02", None), empty_day("2025-01-02"))

    def test_idempotent_on_normalized_input(self):
        first = normalize_day("2025-01-01", {"temperature": {"day": 12.34}, "wind_speed": 4.44, "rain": 0.05})
        again = normalize_day(first.day, first)
        self.assertEqual(first, again)
        self.assertEqual(normalize_day(first.day, first.model_dump()), first)

    def test_round_half_up(self):
        self.assertEqual(round1(0.25), 0.3)
        self.assertEqual(round1(2.05), 2.1)
        self.assertEqual(round1(-1.25), -1.3)


if __name__ == "__main__":
    unittest.main()
