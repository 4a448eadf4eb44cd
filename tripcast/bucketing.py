"""Group time-stamped upstream samples into UTC calendar days."""
from __future__ import annotations

import datetime as dt
from typing import Dict, Iterable, List, Protocol, TypeVar


class Timestamped(Protocol):
    """Anything carrying a UNIX timestamp in seconds."""
    timestamp: int


S = TypeVar("S", bound=Timestamped)


def utc_day(timestamp: int | float) -> str:
    """Return the UTC calendar date (YYYY-MM-DD) of a UNIX timestamp."""
    return dt.datetime.fromtimestamp(timestamp, tz=dt.timezone.utc).date().isoformat()


def next_n_dates_utc(n: int, now: dt.datetime | None = None) -> List[str]:
    """Return the next ``n`` UTC calendar dates, starting with today."""
    now = now or dt.datetime.now(tz=dt.timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(dt.timezone.utc)
    start = now.date()
    return [(start + dt.timedelta(days=i)).isoformat() for i in range(n)]


def bucket_by_day(samples: Iterable[S], day_count: int) -> Dict[str, List[S]]:
    """Bucket samples by UTC date and keep only the earliest ``day_count`` days.

    The returned dict iterates in chronological order; samples keep their
    input order within a bucket.
    """
    buckets: Dict[str, List[S]] = {}
    for sample in samples:
        buckets.setdefault(utc_day(sample.timestamp), []).append(sample)
    kept = sorted(buckets)[:max(day_count, 0)]
    return {day: buckets[day] for day in kept}
