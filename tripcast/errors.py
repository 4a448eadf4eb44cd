"""Exception taxonomy shared by the upstream clients, the pipeline and the HTTP layer."""

from __future__ import annotations

from typing import Any


class TripcastError(Exception):
    """Base class for all errors raised by this package."""


class InvalidInput(TripcastError):
    """A required request parameter is missing or malformed."""


class CityNotFound(TripcastError):
    """Geocoding returned no match for the requested city."""

    def __init__(self, city: str):
        super().__init__(f"City not found: {city}")
        self.city = city


class UpstreamError(TripcastError):
    """An upstream provider call failed.

    ``status`` and ``body`` carry the provider's HTTP status and decoded body when
    the failure came from an HTTP response; both are None for transport errors.
    """

    def __init__(self, message: str, *, status: int | None = None, body: Any = None):
        super().__init__(message)
        self.status = status
        self.body = body


class UpstreamUnauthorized(UpstreamError):
    """The provider rejected the credentials for this endpoint or data tier."""

    def __init__(self, message: str, *, status: int, body: Any = None, tier: str | None = None):
        super().__init__(message, status=status, body=body)
        self.tier = tier


class MalformedLLMOutput(TripcastError):
    """Text generation output did not contain a usable JSON object."""
