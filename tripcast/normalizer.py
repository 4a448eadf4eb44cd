"""Map inconsistent upstream payloads onto canonical per-day values.

Each semantic field has an ordered table of candidate locations in the raw
payload. Candidates are probed in order and the first one that yields a number
wins. A candidate is either a key path (tuple of keys) or a ``Midpoint`` of two
key paths.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Mapping, Sequence, Tuple, Union

from tripcast.domain import DaySummary

KeyPath = Tuple[str, ...]


@dataclass(frozen=True)
class Midpoint:
    """Candidate derived as the mean of two numeric key paths."""
    low: KeyPath
    high: KeyPath


Candidate = Union[KeyPath, Midpoint]

# One Call day_summary payloads (and already-normalized DaySummary dicts, via the
# trailing canonical keys).
TEMPERATURE_CANDIDATES: Sequence[Candidate] = (
    ("temperature", "day"),
    ("temperature", "average"),
    Midpoint(low=("temperature", "min"), high=("temperature", "max")),
    ("temp_avg_c",),
)
WIND_CANDIDATES: Sequence[Candidate] = (
    ("wind", "max", "speed"),
    ("wind", "max_speed"),
    ("wind_speed_max",),
    ("wind_speed",),
    ("wind_max_ms",),
)
RAIN_CANDIDATES: Sequence[Candidate] = (
    ("precipitation", "total"),
    ("rain", "total"),
    ("rain",),
    ("rain_mm",),
)

# 2.5 forecast list items (3-hour slots)
SLOT_TEMPERATURE_CANDIDATES: Sequence[Candidate] = (("main", "temp"),)
SLOT_WIND_CANDIDATES: Sequence[Candidate] = (("wind", "speed"),)
SLOT_RAIN_CANDIDATES: Sequence[Candidate] = (("rain", "3h"),)

# 2.5 air_pollution list items
AIR_AQI_CANDIDATES: Sequence[Candidate] = (("main", "aqi"),)


def round1(value: float) -> float:
    """Round half-up to one decimal place."""
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def round0(value: float) -> int:
    """Round half-up to an integer."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def as_number(value: Any) -> float | None:
    """Return value as a float, or None when it is absent or not numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(Decimal(value.strip()))
        except (InvalidOperation, ValueError):
            return None
    else:
        return None
    if number != number or number in (float("inf"), float("-inf")):
        return None
    return number


def _dig(raw: Any, path: KeyPath) -> Any:
    """Follow a key path through nested mappings; None when any hop is missing."""
    node = raw
    for key in path:
        if not isinstance(node, Mapping):
            return None
        node = node.get(key)
    return node


def _resolve(raw: Any, candidate: Candidate) -> float | None:
    if isinstance(candidate, Midpoint):
        low = as_number(_dig(raw, candidate.low))
        high = as_number(_dig(raw, candidate.high))
        if low is None or high is None:
            return None
        return (low + high) / 2
    return as_number(_dig(raw, candidate))


def probe(raw: Any, candidates: Sequence[Candidate]) -> float | None:
    """Return the first numeric value found among candidates, in priority order."""
    for candidate in candidates:
        value = _resolve(raw, candidate)
        if value is not None:
            return value
    return None


def normalize_day(day: str, raw: Mapping[str, Any] | DaySummary | None) -> DaySummary:
    """Normalize a pre-aggregated day payload into a DaySummary.

    Missing temperature stays None; missing wind and rain default to 0.
    """
    if isinstance(raw, DaySummary):
        raw = raw.model_dump()
    temp = probe(raw, TEMPERATURE_CANDIDATES)
    wind = probe(raw, WIND_CANDIDATES)
    rain = probe(raw, RAIN_CANDIDATES)
    return DaySummary(
        day=day,
        temp_avg_c=round1(temp) if temp is not None else None,
        wind_max_ms=round1(wind or 0.0),
        rain_mm=round1(rain or 0.0),
    )


def empty_day(day: str) -> DaySummary:
    """Placeholder for a day whose upstream data could not be fetched."""
    return DaySummary(day=day, temp_avg_c=None, wind_max_ms=0.0, rain_mm=0.0)
