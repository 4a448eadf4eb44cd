"""Deterministic advice derived from aggregated day summaries.

Packing bands come from the mean daily temperature and umbrella need from
precipitation. Pollutant alerts compare concentrations (µg/m³) against fixed
"Good" ceilings. None of the thresholds here are configurable.
"""
from __future__ import annotations

from typing import Dict, Iterator, List, Mapping, Sequence, Tuple

from tripcast.domain import Advice, DailyPollutantAlert, DaySummary, PackingBand, PollutantAlert
from tripcast.normalizer import as_number, round0, round1

COLD_BELOW_C = 8.0
HOT_ABOVE_C = 24.0

# Iteration order of this table is the order alerts are emitted in.
GOOD_THRESHOLDS: Dict[str, float] = {
    "pm2_5": 12,
    "pm10": 54,
    "no2": 53,
    "so2": 35,
    "o3": 70,
    "co": 4400,
}

POLLUTANT_RISKS: Dict[str, str] = {
    "pm2_5": "Fine particles can penetrate deep into lungs; sensitive groups at risk.",
    "pm10": "Coarse particles may irritate airways; sensitive people may feel effects.",
    "no2": "Can irritate airways; people with asthma are at greater risk.",
    "so2": "May cause respiratory symptoms; consider limiting prolonged exertion.",
    "o3": "Can cause throat irritation and coughing; reduce outdoor exertion.",
    "co": "High levels reduce oxygen delivery; headache and fatigue possible.",
}


def canonical_pollutant(key: str) -> str:
    """'pm2_5' -> 'PM25'."""
    return str(key).upper().replace("_", "")


def packing_band(mean_temp_c: float | None) -> PackingBand:
    """Map a mean temperature to Cold (<8), Mild (8..24) or Hot (>24)."""
    if mean_temp_c is None:
        return PackingBand.UNKNOWN
    if mean_temp_c < COLD_BELOW_C:
        return PackingBand.COLD
    if mean_temp_c <= HOT_ABOVE_C:
        return PackingBand.MILD
    return PackingBand.HOT


def packing_advice(days: Sequence[DaySummary]) -> Advice:
    """Summarize a run of days into umbrella and packing advice."""
    umbrella = any((d.rain_mm or 0) > 0 for d in days)
    temps = [d.temp_avg_c for d in days if d.temp_avg_c is not None]
    mean = sum(temps) / len(temps) if temps else None
    return Advice(
        umbrella=umbrella,
        packing=packing_band(mean),
        mean_temp_c=round1(mean) if mean is not None else None,
    )


def _breaches(components: Mapping[str, object] | None) -> Iterator[Tuple[str, float, float]]:
    """Yield (key, value, threshold) for every pollutant above its Good ceiling."""
    if not components:
        return
    by_canonical = {canonical_pollutant(k): v for k, v in components.items()}
    for key, threshold in GOOD_THRESHOLDS.items():
        value = as_number(by_canonical.get(canonical_pollutant(key)))
        if value is not None and value > threshold:
            yield key, value, threshold


def pollution_alerts(components: Mapping[str, object] | None) -> List[PollutantAlert]:
    """Build alerts for a single air-quality reading."""
    alerts: List[PollutantAlert] = []
    for key, value, threshold in _breaches(components):
        over = round1(value - threshold)
        pct = round0(value / threshold * 100)
        alerts.append(
            PollutantAlert(
                pollutant=canonical_pollutant(key),
                value=round1(value),
                good_max=threshold,
                over=over,
                percent_of_good=pct,
                elevation=f"{over} µg/m³ (~{pct}% of 'Good' max)",
                risk=POLLUTANT_RISKS[key],
            )
        )
    return alerts


def daily_alerts(max_components: Mapping[str, object] | None) -> List[DailyPollutantAlert]:
    """Build alerts for one day's per-pollutant maxima."""
    return [
        DailyPollutantAlert(
            pollutant=canonical_pollutant(key),
            value_max=round1(value),
            good_max=threshold,
            percent_of_good=round0(value / threshold * 100),
        )
        for key, value, threshold in _breaches(max_components)
    ]


def air_alerts(per_day_max_components: Mapping[str, Mapping[str, object]]) -> Dict[str, List[DailyPollutantAlert]]:
    """Build per-day alert lists, keyed and ordered like the input."""
    return {day: daily_alerts(comps) for day, comps in per_day_max_components.items()}
