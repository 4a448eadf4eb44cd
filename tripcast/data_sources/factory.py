"""Factory helpers for binding the OpenWeather data source to settings."""

from __future__ import annotations

from functools import partial

from tripcast import config
from tripcast.data_sources.base import CallableTravelDataSource, TravelDataSource
from tripcast.data_sources.openweather_client import (
    fetch_air_current,
    fetch_air_forecast,
    fetch_day_summary,
    fetch_forecast_slots,
    geocode_city,
)
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="data_sources/factory")


def build_data_source(settings: config.Settings | None = None) -> TravelDataSource:
    """Instantiate the OpenWeather data source with credentials and endpoints bound."""
    settings = settings or config.settings
    if not settings.openweather_api_key:
        raise ValueError("openweather_api_key must be set for the OpenWeather data source")

    common = {"api_key": settings.openweather_api_key, "timeout": settings.http_timeout_seconds}
    weather = {**common, "base_url": settings.openweather_base_url}
    air = {**common, "base_url": settings.air_base_url}

    logger.info("Using OpenWeather data source at %s", settings.openweather_base_url)
    return CallableTravelDataSource(
        geocoder=partial(geocode_city, **weather),
        day_summary=partial(fetch_day_summary, **weather),
        forecast_slots=partial(fetch_forecast_slots, **weather),
        air_current=partial(fetch_air_current, **air),
        air_forecast=partial(fetch_air_forecast, **air),
    )
