"""Reduce bucketed upstream samples into one record per UTC day."""
from __future__ import annotations

from typing import Dict, List, Sequence

from tripcast.advice import GOOD_THRESHOLDS, air_alerts, canonical_pollutant
from tripcast.bucketing import bucket_by_day
from tripcast.data_sources.openweather_client import AirSample, ForecastSlot
from tripcast.domain import AirDaySummary, DayAirIndex, DaySummary
from tripcast.normalizer import as_number, empty_day, round1
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="aggregation")

KELVIN_OFFSET = 273.15


def kelvin_to_celsius(kelvin: float) -> float:
    return kelvin - KELVIN_OFFSET


def _slot_celsius(slot: ForecastSlot) -> float | None:
    if slot.temperature is None:
        return None
    if (slot.temperature_unit or "").upper() == "K":
        return kelvin_to_celsius(slot.temperature)
    return slot.temperature


def aggregate_slots(day: str, bucket: Sequence[ForecastSlot]) -> DaySummary:
    """Mean temperature, max wind and summed rain for one day's slots."""
    temps = [t for t in (_slot_celsius(s) for s in bucket) if t is not None]
    winds = [s.wind_speed or 0.0 for s in bucket]
    rain = sum(s.precipitation_mm or 0.0 for s in bucket)
    return DaySummary(
        day=day,
        temp_avg_c=round1(sum(temps) / len(temps)) if temps else None,
        wind_max_ms=round1(max(winds, default=0.0)),
        rain_mm=round1(rain),
    )


def summarize_forecast(slots: Sequence[ForecastSlot], day_count: int) -> List[DaySummary]:
    """Bucket 3-hour slots by UTC day and aggregate the earliest ``day_count`` days."""
    buckets = bucket_by_day(slots, day_count)
    logger.debug("Bucketed %d forecast slots into days %s", len(slots), list(buckets))
    return [aggregate_slots(day, bucket) for day, bucket in buckets.items()]


def _max_components(samples: Sequence[AirSample]) -> Dict[str, float]:
    """Per-pollutant maximum over samples, for pollutants with a Good threshold."""
    tracked = {canonical_pollutant(k): k for k in GOOD_THRESHOLDS}
    out: Dict[str, float] = {}
    for sample in samples:
        for raw_key, raw_value in (sample.components or {}).items():
            key = tracked.get(canonical_pollutant(raw_key))
            value = as_number(raw_value)
            if key is None or value is None:
                continue
            out[key] = max(out.get(key, value), value)
    return out


def summarize_air_forecast(samples: Sequence[AirSample], day_count: int) -> List[AirDaySummary]:
    """Per-day AQI maximum and pollutant alerts for the earliest ``day_count`` days."""
    buckets = bucket_by_day(samples, day_count)
    maxima = {day: _max_components(bucket) for day, bucket in buckets.items()}
    alerts = air_alerts(maxima)
    return [
        AirDaySummary(
            day=day,
            aqi_max=max(s.aqi for s in bucket),
            alerts=alerts[day],
        )
        for day, bucket in buckets.items()
    ]


def daily_aqi_max(samples: Sequence[AirSample], days: Sequence[str]) -> List[DayAirIndex]:
    """AQI maximum for each requested date; None for dates without samples."""
    buckets = bucket_by_day(samples, len(samples))
    return [
        DayAirIndex(day=day, aqi_max=max(s.aqi for s in buckets[day]) if day in buckets else None)
        for day in days
    ]


def forecast_for_dates(slots: Sequence[ForecastSlot], days: Sequence[str]) -> List[DaySummary]:
    """One summary per requested date; dates past the forecast horizon come back empty."""
    buckets = bucket_by_day(slots, len(slots))
    return [aggregate_slots(day, buckets[day]) if day in buckets else empty_day(day) for day in days]


def air_forecast_for_dates(samples: Sequence[AirSample], days: Sequence[str]) -> List[AirDaySummary]:
    """One air summary per requested date; dates without samples have no AQI and no alerts."""
    by_day = {s.day: s for s in summarize_air_forecast(samples, len(samples))}
    return [by_day.get(day) or AirDaySummary(day=day) for day in days]
