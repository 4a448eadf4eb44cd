"""Application configuration pulled from environment variables via pydantic."""
import os
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="config")


class Settings(BaseSettings):
    """Environment-driven configuration for the tripcast service."""
    model_config = SettingsConfigDict(env_prefix="TRIPCAST_", env_file=".env", extra="ignore")

    environment: str = "local"
    openweather_api_key: str = ""
    openweather_base_url: str = "https://api.openweathermap.org"
    air_base_url: str = "http://api.openweathermap.org"
    http_timeout_seconds: float = 10.0
    forecast_days: int = 3
    max_forecast_days: int = 8
    weather_source: str = "day_summary"  # options: day_summary, forecast
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "phi4-mini"
    ollama_options: dict = Field(
        default_factory=lambda: {
            "temperature": float(os.getenv("TRIPCAST_OLLAMA_TEMPERATURE", 0.2)),
            "top_p": float(os.getenv("TRIPCAST_OLLAMA_TOP_P", 0.9)),
        }
    )

    @field_validator("openweather_base_url", "air_base_url", "ollama_base_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URLs to avoid double slashes."""
        return str(v).rstrip("/")

    @field_validator("weather_source", mode="after")
    @classmethod
    def check_weather_source(cls, v: str) -> str:
        """Only the two upstream weather paths are supported."""
        v = str(v).strip().lower()
        if v not in ("day_summary", "forecast"):
            raise ValueError(f"Unknown weather source '{v}'")
        return v


settings = Settings()

if not settings.openweather_api_key or len(settings.openweather_api_key.strip()) < 10:
    logger.warning("TRIPCAST_OPENWEATHER_API_KEY missing or invalid; upstream calls will be rejected")


if __name__ == "__main__":
    logger.setLevel("DEBUG")
    logger.debug(f"Loaded settings: {settings.model_dump_json(indent=4)}")
