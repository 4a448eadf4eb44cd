"""Data source factories for plugging different weather backends."""

from .base import CallableTravelDataSource, TravelDataSource
from .factory import build_data_source
from .openweather_client import (
    AirSample,
    ForecastSlot,
    fetch_air_current,
    fetch_air_forecast,
    fetch_day_summary,
    fetch_forecast_slots,
    geocode_city,
)

__all__ = [
    "build_data_source",
    "TravelDataSource",
    "CallableTravelDataSource",
    "AirSample",
    "ForecastSlot",
    "fetch_air_current",
    "fetch_air_forecast",
    "fetch_day_summary",
    "fetch_forecast_slots",
    "geocode_city",
]
