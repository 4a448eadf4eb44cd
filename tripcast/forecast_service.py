"""Sequence geocoding, upstream fetches, aggregation and advice per endpoint."""
from __future__ import annotations

import datetime as dt
import re
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence, Union

from tripcast import config
from tripcast.advice import packing_advice, pollution_alerts
from tripcast.aggregation import air_forecast_for_dates, daily_aqi_max, forecast_for_dates
from tripcast.bucketing import next_n_dates_utc
from tripcast.checklist import build_checklist_messages, parse_checklist
from tripcast.data_sources.base import TravelDataSource
from tripcast.data_sources.openweather_client import AirSample
from tripcast.domain import (
    Advice,
    AirDaySummary,
    DayAirIndex,
    DaySummary,
    Location,
    PackingChecklist,
    PollutantAlert,
)
from tripcast.errors import CityNotFound, InvalidInput, UpstreamUnauthorized
from tripcast.normalizer import empty_day, normalize_day
from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="forecast_service")

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$", re.ASCII)
MIN_AUTOCOMPLETE_CHARS = 2

SOURCE_DAY_SUMMARY = "onecall_day_summary"
SOURCE_FORECAST = "forecast_3h"


class TextGenerator(Protocol):
    """Black-box chat completion used for the packing checklist."""

    def chat(self, messages: list[dict]) -> str:
        ...


@dataclass(frozen=True)
class DayFetched:
    """A day whose upstream summary was fetched and normalized."""
    day: str
    summary: DaySummary


@dataclass(frozen=True)
class DayMissed:
    """A day whose upstream fetch failed with a non-fatal error."""
    day: str
    error: Exception


DayResult = Union[DayFetched, DayMissed]


@dataclass
class WeatherOutlook:
    """Multi-day weather for a location plus derived advice."""
    location: Location
    source: str
    days: List[DaySummary]
    advice: Advice


@dataclass
class SingleDayOutlook:
    """One requested day with its advice."""
    location: Location
    summary: DaySummary
    advice: Advice


@dataclass
class AirNow:
    """Current air quality for a location."""
    location: Location
    aqi: Optional[int]
    components: dict
    alerts: List[PollutantAlert]


@dataclass
class AirOutlook:
    """Multi-day air quality for a location."""
    location: Location
    days: List[AirDaySummary]


@dataclass
class PackingPlan:
    """LLM checklist together with the data it was generated from."""
    location: Location
    weather: WeatherOutlook
    air: List[DayAirIndex]
    checklist: PackingChecklist


def resolve_day(result: DayResult) -> DaySummary:
    """Collapse a per-day result into a summary, defaulting missed days."""
    if isinstance(result, DayFetched):
        return result.summary
    return empty_day(result.day)


def validate_date(date: str | None) -> str:
    """Return a stripped YYYY-MM-DD date string or raise InvalidInput."""
    date = (date or "").strip()
    if not DATE_RE.match(date):
        raise InvalidInput("Missing or invalid ?date=YYYY-MM-DD")
    return date


class TripForecastService:
    """Orchestrates one request: geocode, fetch, aggregate, advise.

    The service holds no per-request state; build one per request or share it.
    """

    def __init__(
        self,
        settings: config.Settings,
        data_source: TravelDataSource,
        text_generator: TextGenerator | None = None,
        *,
        clock=None,
    ):
        self.settings = settings
        self.data_source = data_source
        self.text_generator = text_generator
        self._clock = clock or (lambda: dt.datetime.now(tz=dt.timezone.utc))

    # ------------------------------------------------------------------
    # Input handling
    # ------------------------------------------------------------------

    def resolve_location(self, city: str | None) -> Location | None:
        """Resolve a city name to its top geocoding match, or None when unknown."""
        city = (city or "").strip()
        if not city:
            raise InvalidInput("Missing ?city")
        matches = self.data_source.geocode(city, limit=1)
        if not matches:
            logger.info("City not found: %s", city)
            return None
        return matches[0]

    def _require_location(self, city: str | None) -> Location:
        location = self.resolve_location(city)
        if location is None:
            raise CityNotFound((city or "").strip())
        return location

    def _day_count(self, days: int | None) -> int:
        if days is None:
            return self.settings.forecast_days
        if not 1 <= days <= self.settings.max_forecast_days:
            raise InvalidInput(f"?days must be between 1 and {self.settings.max_forecast_days}")
        return days

    # ------------------------------------------------------------------
    # Weather
    # ------------------------------------------------------------------

    def _fetch_day(self, location: Location, day: str) -> DayResult:
        """Fetch one day summary; only authorization failures escape."""
        try:
            raw = self.data_source.fetch_day_summary(location.lat, location.lon, day)
        except UpstreamUnauthorized:
            raise
        except Exception as exc:
            logger.warning("Day summary fetch failed for %s, using empty day: %s", day, exc)
            return DayMissed(day=day, error=exc)
        return DayFetched(day=day, summary=normalize_day(day, raw))

    def collect_days(self, location: Location, dates: Sequence[str]) -> List[DayResult]:
        """One result per date, in date order. Fetches run sequentially."""
        return [self._fetch_day(location, day) for day in dates]

    def weather_days(self, city: str | None, days: int | None = None) -> WeatherOutlook:
        """Multi-day weather from pre-aggregated day summaries, one upstream call per date."""
        count = self._day_count(days)
        location = self._require_location(city)
        dates = next_n_dates_utc(count, now=self._clock())
        results = self.collect_days(location, dates)
        summaries = [resolve_day(r) for r in results]
        missed = sum(1 for r in results if isinstance(r, DayMissed))
        logger.info("Computed %d day summaries for %s (%d missed)", count, location.name, missed)
        return WeatherOutlook(
            location=location,
            source=SOURCE_DAY_SUMMARY,
            days=summaries,
            advice=packing_advice(summaries),
        )

    def weather_from_forecast(self, city: str | None, days: int | None = None) -> WeatherOutlook:
        """Multi-day weather bucketed client-side from 3-hour forecast slots.

        The upstream forecast covers about five days; later requested dates are
        returned as empty days.
        """
        count = self._day_count(days)
        location = self._require_location(city)
        dates = next_n_dates_utc(count, now=self._clock())
        slots = self.data_source.fetch_forecast_slots(location.lat, location.lon)
        summaries = forecast_for_dates(slots, dates)
        logger.info("Computed %d forecast summaries for %s from %d slots", count, location.name, len(slots))
        return WeatherOutlook(
            location=location,
            source=SOURCE_FORECAST,
            days=summaries,
            advice=packing_advice(summaries),
        )

    def weather(self, city: str | None, days: int | None = None) -> WeatherOutlook:
        """Multi-day weather from the configured source."""
        if self.settings.weather_source == "forecast":
            return self.weather_from_forecast(city, days)
        return self.weather_days(city, days)

    def day_summary(self, city: str | None, date: str | None) -> SingleDayOutlook:
        """Weather for one explicit UTC date; any upstream failure propagates."""
        if not (city or "").strip():
            raise InvalidInput("Missing ?city")
        date = validate_date(date)
        location = self._require_location(city)
        raw = self.data_source.fetch_day_summary(location.lat, location.lon, date)
        summary = normalize_day(date, raw)
        return SingleDayOutlook(location=location, summary=summary, advice=packing_advice([summary]))

    # ------------------------------------------------------------------
    # Air quality
    # ------------------------------------------------------------------

    def air_now(self, city: str | None) -> AirNow:
        """Current air quality with pollutant alerts."""
        location = self._require_location(city)
        sample: AirSample | None = self.data_source.fetch_air_current(location.lat, location.lon)
        components = dict(sample.components) if sample else {}
        return AirNow(
            location=location,
            aqi=sample.aqi if sample else None,
            components=components,
            alerts=pollution_alerts(components),
        )

    def air_days(self, city: str | None, days: int | None = None) -> AirOutlook:
        """Hourly air-quality forecast summarized per requested UTC day."""
        count = self._day_count(days)
        location = self._require_location(city)
        dates = next_n_dates_utc(count, now=self._clock())
        samples = self.data_source.fetch_air_forecast(location.lat, location.lon)
        return AirOutlook(location=location, days=air_forecast_for_dates(samples, dates))

    # ------------------------------------------------------------------
    # Packing checklist
    # ------------------------------------------------------------------

    def packing_checklist(self, city: str | None, days: int | None = None) -> PackingPlan:
        """Weather + air summaries handed to the text generator for a checklist."""
        if self.text_generator is None:
            raise RuntimeError("No text generator configured")
        weather = self.weather(city, days)
        location = weather.location
        samples = self.data_source.fetch_air_forecast(location.lat, location.lon)
        air = daily_aqi_max(samples, [d.day for d in weather.days])

        messages = build_checklist_messages(location, weather.days, weather.advice, air)
        raw = self.text_generator.chat(messages)
        checklist = parse_checklist(raw)
        logger.info("Generated packing checklist for %s with %d items", location.name, len(checklist.checklist))
        return PackingPlan(location=location, weather=weather, air=air, checklist=checklist)

    # ------------------------------------------------------------------
    # Autocomplete
    # ------------------------------------------------------------------

    def suggest_cities(self, query: str | None, limit: int = 5) -> List[Location]:
        """Autocomplete matches; short queries return nothing without an upstream call."""
        query = (query or "").strip()
        if len(query) < MIN_AUTOCOMPLETE_CHARS:
            return []
        return self.data_source.geocode(query, limit=limit)
