"""FastAPI application setup and error mapping for Tripcast."""

from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .api import router as api_router
from .config import settings
from .errors import CityNotFound, InvalidInput, UpstreamError, UpstreamUnauthorized
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="main")

app = FastAPI(title="Tripcast")


class HealthResponse(BaseModel):
    status: str
    environment: str
    timestamp: str


@app.get("/health", response_model=HealthResponse)
def health():
    """Liveness probe."""
    return HealthResponse(
        status="ok",
        environment=settings.environment,
        timestamp=datetime.now(tz=timezone.utc).isoformat(),
    )


@app.exception_handler(RequestValidationError)
async def _invalid_request(_request: Request, exc: RequestValidationError):
    """Report malformed query parameters as a plain 400."""
    fields = ", ".join(".".join(str(p) for p in err.get("loc", ())[1:]) for err in exc.errors())
    return JSONResponse(status_code=400, content={"error": f"Invalid parameter: {fields or 'request'}"})


@app.exception_handler(InvalidInput)
async def _invalid_input(_request: Request, exc: InvalidInput):
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.exception_handler(CityNotFound)
async def _city_not_found(_request: Request, _exc: CityNotFound):
    return JSONResponse(status_code=404, content={"error": "City not found"})


@app.exception_handler(UpstreamUnauthorized)
async def _upstream_unauthorized(_request: Request, exc: UpstreamUnauthorized):
    """Name the unavailable data tier and point at the free fallback."""
    logger.warning("Upstream tier %s unavailable (status %s)", exc.tier, exc.status)
    return JSONResponse(
        status_code=exc.status,
        content={
            "error": str(exc),
            "details": exc.body,
            "hint": "Use /api/weather (free 3-hour forecast summariser) or upgrade key.",
        },
    )


@app.exception_handler(UpstreamError)
async def _upstream_error(_request: Request, exc: UpstreamError):
    """Pass the provider status and body through when there is one."""
    logger.error("Upstream call failed (status %s): %s", exc.status, exc)
    content = exc.body if exc.body is not None else {"error": str(exc)}
    return JSONResponse(status_code=exc.status or 500, content=content)


@app.exception_handler(Exception)
async def _unhandled(_request: Request, exc: Exception):
    logger.exception("Unhandled error: %s", exc)
    return JSONResponse(status_code=500, content={"error": str(exc)})


# API routes
app.include_router(api_router, prefix="/api")
