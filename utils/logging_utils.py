"""
Process-wide logging for the Tripcast service.

``run_server.py`` calls ``setup_logging()`` once; modules then ask for a
tagged logger:

    from utils.logging_utils import get_tagged_logger

    logger = get_tagged_logger(__name__, tag="openweather_client")
    logger.info("Fetching day summary for %s", day)

Records are stamped with ``job_name`` and ``tag``. Only the message and those
two fields are rendered, so put the facts worth reading into the message;
``extra=`` values are kept on the record for handlers that want them.
Anything up to INFO is written to stdout; WARNING and above to stderr.
"""

from __future__ import annotations

import logging
import logging.config
from typing import Any, Mapping, Optional


# Records emitted at import time (before setup_logging) still get a timestamp and level.
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

DEFAULT_LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | %(job_name)s | %(tag)s | %(name)s | %(message)s"
)
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Query-parameter names containing any of these are redacted before logging.
SENSITIVE_PARAM_TOKENS = ("appid", "key", "token", "secret", "pass")
MASK = "***"

_CONFIGURED: bool = False


class MaxLevelFilter(logging.Filter):
    """Pass records whose level is at most ``max_level``."""

    def __init__(self, max_level: int) -> None:
        super().__init__()
        self.max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        return record.levelno <= self.max_level


class EnsureTagFilter(logging.Filter):
    """Give untagged records (uvicorn, requests, ...) a tag from their logger name."""

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        if not hasattr(record, "tag"):
            name = getattr(record, "name", "") or ""
            record.tag = name.rsplit(".", 1)[-1] or "-"
        return True


class JobNameFilter(logging.Filter):
    """Stamp every record with the process job name."""

    def __init__(self, job_name: Optional[str] = None) -> None:
        super().__init__()
        self.job_name = job_name or "-"

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        if not hasattr(record, "job_name"):
            record.job_name = self.job_name
        return True


def _stream_handler(stream: str, level: str, filters: list[str]) -> dict:
    return {
        "class": "logging.StreamHandler",
        "formatter": "standard",
        "filters": filters,
        "level": level,
        "stream": f"ext://sys.{stream}",
    }


def build_logging_config(
    *,
    level: str | int = "INFO",
    log_format: str = DEFAULT_LOG_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT,
    job_name: Optional[str] = None,
) -> Mapping[str, Any]:
    """Return the ``dictConfig`` mapping used by ``setup_logging``."""
    common_filters = ["ensure_tag", "job_name"]
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "ensure_tag": {"()": EnsureTagFilter},
            "job_name": {"()": JobNameFilter, "job_name": job_name},
            "info_and_below": {"()": MaxLevelFilter, "max_level": logging.INFO},
        },
        "formatters": {
            "standard": {"format": log_format, "datefmt": date_format},
        },
        "handlers": {
            "stdout": _stream_handler("stdout", "DEBUG", common_filters + ["info_and_below"]),
            "stderr": _stream_handler("stderr", "WARNING", common_filters),
        },
        "root": {"level": level, "handlers": ["stdout", "stderr"]},
    }


def setup_logging(
    *,
    level: str | int = "INFO",
    log_format: str = DEFAULT_LOG_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT,
    job_name: Optional[str] = None,
    override_existing: bool = False,
) -> None:
    """Install the logging config; later calls do nothing unless ``override_existing``."""
    global _CONFIGURED

    if _CONFIGURED and not override_existing:
        return

    logging.config.dictConfig(
        build_logging_config(
            level=level,
            log_format=log_format,
            date_format=date_format,
            job_name=job_name,
        )
    )
    _CONFIGURED = True


class TaggedLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter that adds its tag to whatever ``extra`` the call site passes."""

    def process(self, msg, kwargs):
        kwargs["extra"] = {**(kwargs.get("extra") or {}), **self.extra}
        return msg, kwargs


def get_tagged_logger(name: str, *, tag: Optional[str] = None) -> TaggedLoggerAdapter:
    """Logger for ``name`` whose records carry ``tag`` (default: last dotted segment)."""
    if tag is None:
        tag = name.rsplit(".", 1)[-1]
    return TaggedLoggerAdapter(logging.getLogger(name), {"tag": tag})


def mask_secret_params(params: Mapping[str, Any] | None) -> dict:
    """Copy of request params with credential-looking values replaced.

    Examples
    --------
    - {"q": "Dublin", "appid": "abc123"} -> {"q": "Dublin", "appid": "***"}
    """
    if not params:
        return {}
    return {
        key: MASK if any(token in str(key).lower() for token in SENSITIVE_PARAM_TOKENS) else value
        for key, value in params.items()
    }
