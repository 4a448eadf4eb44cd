"""Interfaces and helpers for travel data sources."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol

from tripcast.data_sources.openweather_client import AirSample, ForecastSlot
from tripcast.domain import Location


class TravelDataSource(Protocol):
    """Interface for anything that can provide geocoding, weather and air-quality data."""

    def geocode(self, city: str, *, limit: int = 1) -> List[Location]:
        """Return up to ``limit`` matches for a city name."""
        ...

    def fetch_day_summary(self, latitude: float, longitude: float, date: str) -> dict:
        """Return the raw pre-aggregated summary for one UTC date."""
        ...

    def fetch_forecast_slots(self, latitude: float, longitude: float) -> List[ForecastSlot]:
        """Return 3-hour forecast slots."""
        ...

    def fetch_air_current(self, latitude: float, longitude: float) -> Optional[AirSample]:
        """Return the current air-quality sample."""
        ...

    def fetch_air_forecast(self, latitude: float, longitude: float) -> List[AirSample]:
        """Return hourly air-quality forecast samples."""
        ...


@dataclass
class CallableTravelDataSource(TravelDataSource):
    """Wrap five callables so they can be swapped for different backends."""

    geocoder: Callable[..., List[Location]]
    day_summary: Callable[..., dict]
    forecast_slots: Callable[..., List[ForecastSlot]]
    air_current: Callable[..., Optional[AirSample]]
    air_forecast: Callable[..., List[AirSample]]

    def geocode(self, city: str, *, limit: int = 1) -> List[Location]:
        """Delegate to the configured geocoding callable."""
        return self.geocoder(city, limit=limit)

    def fetch_day_summary(self, latitude: float, longitude: float, date: str) -> dict:
        """Delegate to the configured day-summary callable."""
        return self.day_summary(latitude, longitude, date)

    def fetch_forecast_slots(self, latitude: float, longitude: float) -> List[ForecastSlot]:
        """Delegate to the configured 3-hour forecast callable."""
        return self.forecast_slots(latitude, longitude)

    def fetch_air_current(self, latitude: float, longitude: float) -> Optional[AirSample]:
        """Delegate to the configured current air-quality callable."""
        return self.air_current(latitude, longitude)

    def fetch_air_forecast(self, latitude: float, longitude: float) -> List[AirSample]:
        """Delegate to the configured air-quality forecast callable."""
        return self.air_forecast(latitude, longitude)
