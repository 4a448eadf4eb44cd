"""Helpers for fetching geocoding, weather and air-quality data from OpenWeatherMap."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests

from tripcast.domain import Location
from tripcast.errors import UpstreamError, UpstreamUnauthorized
from tripcast.normalizer import (
    AIR_AQI_CANDIDATES,
    SLOT_RAIN_CANDIDATES,
    SLOT_TEMPERATURE_CANDIDATES,
    SLOT_WIND_CANDIDATES,
    as_number,
    probe,
)
from utils.logging_utils import get_tagged_logger, mask_secret_params
logger = get_tagged_logger(__name__, tag="openweather_client")

session = requests.Session()

DEFAULT_BASE_URL = "https://api.openweathermap.org"
DEFAULT_AIR_BASE_URL = "http://api.openweathermap.org"

GEOCODE_PATH = "/geo/1.0/direct"
DAY_SUMMARY_PATH = "/data/3.0/onecall/day_summary"
FORECAST_PATH = "/data/2.5/forecast"
AIR_CURRENT_PATH = "/data/2.5/air_pollution"
AIR_FORECAST_PATH = "/data/2.5/air_pollution/forecast"

DAY_SUMMARY_TIER = "One Call 3.0 day_summary"
FORECAST_TIER = "2.5 forecast"
AIR_TIER = "2.5 air_pollution"
GEOCODE_TIER = "geocoding"

# The 2.5 forecast is requested without `units`, so temperatures come back in Kelvin.
FORECAST_TEMPERATURE_UNIT = "K"


@dataclass
class ForecastSlot:
    """One 3-hour forecast slot."""
    timestamp: int  # UNIX seconds, UTC
    temperature: Optional[float]
    temperature_unit: str
    wind_speed: Optional[float]  # m/s
    precipitation_mm: Optional[float]


@dataclass
class AirSample:
    """One hourly air-quality sample."""
    timestamp: int  # UNIX seconds, UTC
    aqi: int
    components: Dict[str, float] = field(default_factory=dict)


def _error_body(resp: requests.Response) -> Any:
    """Decoded JSON body when possible, else the raw text."""
    try:
        return resp.json()
    except ValueError:
        return resp.text or None


def _get_json(url: str, params: dict, *, timeout: float, tier: str) -> Any:
    """GET a provider endpoint and map failures onto the upstream error types."""
    logger.debug("OpenWeather GET %s params=%s", url, mask_secret_params(params))
    try:
        resp = session.get(url, params=params, timeout=timeout)
    except requests.exceptions.RequestException as exc:
        logger.warning("OpenWeather request to %s failed: %s", url, exc)
        raise UpstreamError(f"{tier} request failed: {exc}") from exc

    if resp.status_code in (401, 403):
        raise UpstreamUnauthorized(
            f"{tier} not available for this API key.",
            status=resp.status_code,
            body=_error_body(resp),
            tier=tier,
        )
    if not 200 <= resp.status_code < 300:
        logger.warning("OpenWeather returned %s for %s", resp.status_code, url)
        raise UpstreamError(f"{tier} returned {resp.status_code}", status=resp.status_code, body=_error_body(resp))

    try:
        return resp.json()
    except ValueError as exc:
        raise UpstreamError(f"{tier} returned non-JSON response", status=resp.status_code) from exc


def _location_from_item(item: dict) -> Optional[Location]:
    lat, lon = as_number(item.get("lat")), as_number(item.get("lon"))
    if lat is None or lon is None:
        return None
    return Location(
        lat=lat,
        lon=lon,
        name=item.get("name") or "",
        country=item.get("country") or "",
        state=item.get("state") or "",
    )


def geocode_city(
    city: str,
    *,
    api_key: str,
    limit: int = 1,
    base_url: str = DEFAULT_BASE_URL,
    timeout: float = 10.0,
) -> List[Location]:
    """Return up to ``limit`` geocoding matches for a free-text city name."""
    data = _get_json(
        f"{base_url}{GEOCODE_PATH}",
        {"q": city, "limit": limit, "appid": api_key},
        timeout=timeout,
        tier=GEOCODE_TIER,
    )
    if not isinstance(data, list):
        return []
    out = [_location_from_item(item) for item in data if isinstance(item, dict)]
    return [loc for loc in out if loc is not None]


def fetch_day_summary(
    latitude: float,
    longitude: float,
    date: str,
    *,
    api_key: str,
    base_url: str = DEFAULT_BASE_URL,
    timeout: float = 10.0,
) -> dict:
    """Fetch the raw One Call 3.0 day summary (metric units) for a UTC date."""
    data = _get_json(
        f"{base_url}{DAY_SUMMARY_PATH}",
        {"lat": latitude, "lon": longitude, "date": date, "units": "metric", "appid": api_key},
        timeout=timeout,
        tier=DAY_SUMMARY_TIER,
    )
    return data if isinstance(data, dict) else {}


def fetch_forecast_slots(
    latitude: float,
    longitude: float,
    *,
    api_key: str,
    base_url: str = DEFAULT_BASE_URL,
    timeout: float = 10.0,
) -> List[ForecastSlot]:
    """Fetch the 5-day / 3-hour forecast and return it as structured slots."""
    data = _get_json(
        f"{base_url}{FORECAST_PATH}",
        {"lat": latitude, "lon": longitude, "appid": api_key},
        timeout=timeout,
        tier=FORECAST_TIER,
    )
    items = data.get("list") if isinstance(data, dict) else None

    out: List[ForecastSlot] = []
    for item in items or []:
        ts = as_number(item.get("dt")) if isinstance(item, dict) else None
        if ts is None:
            logger.debug("Skipping forecast slot without timestamp: %s", item)
            continue
        out.append(
            ForecastSlot(
                timestamp=int(ts),
                temperature=probe(item, SLOT_TEMPERATURE_CANDIDATES),
                temperature_unit=FORECAST_TEMPERATURE_UNIT,
                wind_speed=probe(item, SLOT_WIND_CANDIDATES),
                precipitation_mm=probe(item, SLOT_RAIN_CANDIDATES),
            )
        )
    return out


def _air_samples(data: Any) -> List[AirSample]:
    items = data.get("list") if isinstance(data, dict) else None
    out: List[AirSample] = []
    for item in items or []:
        ts = as_number(item.get("dt")) if isinstance(item, dict) else None
        if ts is None:
            continue
        aqi = probe(item, AIR_AQI_CANDIDATES)
        components = item.get("components")
        out.append(
            AirSample(
                timestamp=int(ts),
                aqi=int(aqi) if aqi is not None else 1,
                components=dict(components) if isinstance(components, dict) else {},
            )
        )
    return out


def fetch_air_current(
    latitude: float,
    longitude: float,
    *,
    api_key: str,
    base_url: str = DEFAULT_AIR_BASE_URL,
    timeout: float = 10.0,
) -> Optional[AirSample]:
    """Fetch the current air-quality reading; None when the provider has none."""
    data = _get_json(
        f"{base_url}{AIR_CURRENT_PATH}",
        {"lat": latitude, "lon": longitude, "appid": api_key},
        timeout=timeout,
        tier=AIR_TIER,
    )
    samples = _air_samples(data)
    return samples[0] if samples else None


def fetch_air_forecast(
    latitude: float,
    longitude: float,
    *,
    api_key: str,
    base_url: str = DEFAULT_AIR_BASE_URL,
    timeout: float = 10.0,
) -> List[AirSample]:
    """Fetch the hourly air-quality forecast (about 5 days)."""
    data = _get_json(
        f"{base_url}{AIR_FORECAST_PATH}",
        {"lat": latitude, "lon": longitude, "appid": api_key},
        timeout=timeout,
        tier=AIR_TIER,
    )
    return _air_samples(data)
