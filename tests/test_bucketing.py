import datetime as dt
import unittest
from dataclasses import dataclass

from tripcast.bucketing import bucket_by_day, next_n_dates_utc, utc_day

JAN_1 = 1735689600  # 2025-01-01T00:00:00Z
HOUR = 3600
DAY = 24 * HOUR


@dataclass
class _Sample:
    timestamp: int
    label: str = ""


class TestUtcDay(unittest.TestCase):
    def test_midnight_boundaries(self):
        self.assertEqual(utc_day(JAN_1), "2025-01-01")
        self.assertEqual(utc_day(JAN_1 - 1), "2024-12-31")
        self.assertEqual(utc_day(JAN_1 + DAY - 1), "2025-01-01")


class TestBucketByDay(unittest.TestCase):
    def test_keeps_earliest_days_in_order(self):
        samples = [
            _Sample(JAN_1 + 2 * DAY, "c"),
            _Sample(JAN_1, "a1"),
            _Sample(JAN_1 + 3 * DAY, "d"),
            _Sample(JAN_1 + DAY, "b"),
            _Sample(JAN_1 + 3 * HOUR, "a2"),
        ]
        buckets = bucket_by_day(samples, 3)
        self.assertEqual(list(buckets), ["2025-01-01", "2025-01-02", "2025-01-03"])
        self.assertEqual([s.label for s in buckets["2025-01-01"]], ["a1", "a2"])

    def test_fewer_days_than_requested(self):
        buckets = bucket_by_day([_Sample(JAN_1)], 5)
        self.assertEqual(list(buckets), ["2025-01-01"])

    def test_empty_and_zero(self):
        self.assertEqual(bucket_by_day([], 3), {})
        self.assertEqual(bucket_by_day([_Sample(JAN_1)], 0), {})


class TestNextDates(unittest.TestCase):
    def test_dates_start_today_utc(self):
        now = dt.datetime(2025, 12, 30, 23, 30, tzinfo=dt.timezone.utc)
        self.assertEqual(next_n_dates_utc(3, now=now), ["2025-12-30", "2025-12-31", "2026-01-01"])

    def test_non_utc_clock_is_converted(self):
        plus_two = dt.timezone(dt.timedelta(hours=2))
        now = dt.datetime(2025, 1, 2, 1, 0, tzinfo=plus_two)  # 2025-01-01T23:00Z
        self.assertEqual(next_n_dates_utc(1, now=now), ["2025-01-01"])

    def test_every_count_yields_distinct_ordered_dates(self):
        now = dt.datetime(2025, 2, 27, tzinfo=dt.timezone.utc)
        for n in range(1, 9):
            dates = next_n_dates_utc(n, now=now)
            self.assertEqual(len(dates), n)
            self.assertEqual(dates, sorted(set(dates)))
            self.assertEqual(dates[0], "2025-02-27")


if __name__ == "__main__":
    unittest.main()
