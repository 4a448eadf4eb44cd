"""Domain vocabulary and strict schemas for travel weather summaries.

This module defines the payloads that flow between the aggregation pipeline,
the advice engine and the HTTP layer: locations, per-day weather and air
summaries, pollutant alerts and packing advice. No interpretation logic lives
here.
"""

from __future__ import annotations

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class _StrictBaseModel(BaseModel):
    """Base model with strict extra handling."""

    model_config = ConfigDict(extra="forbid")


class PackingBand(str, Enum):
    """Coarse clothing band derived from the mean daily temperature."""
    COLD = "Cold"
    MILD = "Mild"
    HOT = "Hot"
    UNKNOWN = "Unknown"


class Location(_StrictBaseModel):
    """Canonical geocoding result."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    lat: float
    lon: float
    name: str
    country: str = ""
    state: str = ""


class DaySummary(_StrictBaseModel):
    """One UTC calendar day of weather, in Celsius, m/s and mm."""
    day: str
    temp_avg_c: float | None = None
    wind_max_ms: float = 0.0
    rain_mm: float = 0.0


class PollutantAlert(_StrictBaseModel):
    """Single-reading alert for a pollutant above its 'Good' ceiling."""
    pollutant: str
    value: float
    good_max: float
    over: float
    percent_of_good: int
    elevation: str
    risk: str


class DailyPollutantAlert(_StrictBaseModel):
    """Alert for a pollutant whose daily maximum breached its 'Good' ceiling."""
    pollutant: str
    value_max: float
    good_max: float
    percent_of_good: int


class AirDaySummary(_StrictBaseModel):
    """One UTC calendar day of air quality."""
    day: str
    aqi_max: int | None = None  # None when the forecast has no samples for the day
    alerts: List[DailyPollutantAlert] = Field(default_factory=list)


class DayAirIndex(_StrictBaseModel):
    """Daily AQI maximum aligned to a requested date (None when no samples)."""
    day: str
    aqi_max: int | None = None


class Advice(_StrictBaseModel):
    """Packing advice for a run of days."""
    umbrella: bool = False
    packing: PackingBand = PackingBand.UNKNOWN
    mean_temp_c: float | None = None


class PackingChecklist(_StrictBaseModel):
    """Checklist extracted from the text generation response."""
    checklist: List[str] = Field(default_factory=list)
    notes: str = ""
