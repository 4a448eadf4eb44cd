"""HTTP API for travel weather, air quality and packing summaries."""

from typing import Callable, List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .config import settings
from .data_sources import build_data_source
from .domain import AirDaySummary, DaySummary, PackingBand, PollutantAlert
from .forecast_service import MIN_AUTOCOMPLETE_CHARS, SOURCE_DAY_SUMMARY, TripForecastService
from .ollama_client import OllamaClient
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="api")

router = APIRouter()


class WeatherResponse(BaseModel):
    """Multi-day weather with packing advice."""
    source: str
    city: str
    country: str
    forecast: List[DaySummary]
    umbrella: bool
    packing: PackingBand
    mean_temp_c: Optional[float] = None


class DaySummaryResponse(BaseModel):
    """Single-day weather with packing advice."""
    source: str
    city: str
    country: str
    day: str
    temp_avg_c: Optional[float] = None
    wind_max_ms: float
    rain_mm: float
    umbrella: bool
    packing: PackingBand


class Coordinates(BaseModel):
    lat: float
    lon: float


class AirNowResponse(BaseModel):
    """Current air quality and alerts."""
    city: str
    country: str
    coord: Coordinates
    aqi: Optional[int] = None
    components: dict
    alerts: List[PollutantAlert]


class AirForecastResponse(BaseModel):
    """Per-day air quality."""
    city: str
    country: str
    forecast: List[AirDaySummary]


class CitySuggestion(BaseModel):
    """Autocomplete entry."""
    name: str
    country: str
    state: str
    label: str


class PackResponse(BaseModel):
    """LLM packing checklist."""
    city: str
    country: str
    checklist: List[str]
    notes: str


def get_service() -> TripForecastService:
    """Build a request-scoped orchestrator from the process settings."""
    return TripForecastService(
        settings,
        build_data_source(settings),
        OllamaClient(settings),
    )


def get_service_provider() -> Callable[[], TripForecastService]:
    """Deferred service construction for handlers that must report their own failures."""
    return get_service


@router.get("/weather3", response_model=WeatherResponse)
def weather3(
    city: str = "",
    days: Optional[int] = Query(default=None),
    service: TripForecastService = Depends(get_service),
):
    """Multi-day weather from One Call day summaries."""
    outlook = service.weather_days(city, days)
    return WeatherResponse(
        source=outlook.source,
        city=outlook.location.name,
        country=outlook.location.country,
        forecast=outlook.days,
        **outlook.advice.model_dump(),
    )


@router.get("/weather", response_model=WeatherResponse)
def weather(
    city: str = "",
    days: Optional[int] = Query(default=None),
    service: TripForecastService = Depends(get_service),
):
    """Multi-day weather summarized from the free 3-hour forecast."""
    outlook = service.weather_from_forecast(city, days)
    return WeatherResponse(
        source=outlook.source,
        city=outlook.location.name,
        country=outlook.location.country,
        forecast=outlook.days,
        **outlook.advice.model_dump(),
    )


@router.get("/day_summary_city", response_model=DaySummaryResponse)
def day_summary_city(
    city: str = "",
    date: str = "",
    service: TripForecastService = Depends(get_service),
):
    """Weather for a single explicit date."""
    outlook = service.day_summary(city, date)
    return DaySummaryResponse(
        source=SOURCE_DAY_SUMMARY,
        city=outlook.location.name,
        country=outlook.location.country,
        umbrella=outlook.advice.umbrella,
        packing=outlook.advice.packing,
        **outlook.summary.model_dump(),
    )


@router.get("/air", response_model=AirNowResponse)
def air(city: str = "", service: TripForecastService = Depends(get_service)):
    """Current air quality with pollutant alerts."""
    now = service.air_now(city)
    return AirNowResponse(
        city=now.location.name,
        country=now.location.country,
        coord=Coordinates(lat=now.location.lat, lon=now.location.lon),
        aqi=now.aqi,
        components=now.components,
        alerts=now.alerts,
    )


@router.get("/air3", response_model=AirForecastResponse)
def air3(
    city: str = "",
    days: Optional[int] = Query(default=None),
    service: TripForecastService = Depends(get_service),
):
    """Per-day air quality from the hourly forecast."""
    outlook = service.air_days(city, days)
    return AirForecastResponse(
        city=outlook.location.name,
        country=outlook.location.country,
        forecast=outlook.days,
    )


@router.get("/cities", response_model=List[CitySuggestion])
def cities(
    q: str = "",
    service_provider: Callable[[], TripForecastService] = Depends(get_service_provider),
):
    """City autocomplete; at least two characters are required.

    Every failure, including a missing API key, is reported as "autocomplete failed".
    """
    if len(q.strip()) < MIN_AUTOCOMPLETE_CHARS:
        return []
    try:
        matches = service_provider().suggest_cities(q)
    except Exception as exc:
        logger.error("City autocomplete failed for %r: %s", q, exc)
        return JSONResponse(status_code=500, content={"error": "autocomplete failed"})
    return [
        CitySuggestion(
            name=m.name,
            country=m.country,
            state=m.state,
            label=", ".join(part for part in (m.name, m.state, m.country) if part),
        )
        for m in matches
    ]


@router.get("/pack", response_model=PackResponse)
def pack(
    city: str = "",
    days: Optional[int] = Query(default=None),
    service: TripForecastService = Depends(get_service),
):
    """LLM-generated packing checklist for the next few days."""
    plan = service.packing_checklist(city, days)
    return PackResponse(
        city=plan.location.name,
        country=plan.location.country,
        checklist=plan.checklist.checklist,
        notes=plan.checklist.notes,
    )
