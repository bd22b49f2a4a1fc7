"""Service configuration and settings."""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_BASE_DIR = Path(__file__).resolve().parents[1]
_ENV_FILE = _BASE_DIR / ".env"


class Settings(BaseSettings):
    """Travel info settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE, env_file_encoding="utf-8", extra="ignore"
    )

    # Upstream endpoints
    mofa_opendata_base_url: str = Field(
        default="https://www.ezairyu.mofa.go.jp/opendata",
        description="MOFA open data feed base URL (XML per country)",
    )
    mofa_anzen_base_url: str = Field(
        default="https://www.anzen.mofa.go.jp",
        description="MOFA overseas safety website, used for deep links",
    )
    country_api_base_url: str = Field(
        default="https://restcountries.com/v3.1",
        description="REST Countries API base URL",
    )
    geocoding_api_url: str = Field(
        default="https://geocoding-api.open-meteo.com/v1/search",
        description="Open-Meteo geocoding endpoint",
    )
    forecast_api_url: str = Field(
        default="https://api.open-meteo.com/v1/forecast",
        description="Open-Meteo daily forecast endpoint",
    )
    user_agent: str = Field(
        default="AI-Travel-Planner/1.0", description="User-Agent for upstream calls"
    )

    # Timeouts (seconds)
    source_timeout_s: float = Field(
        default=20.0, description="Default timeout for the safety feed"
    )
    country_api_timeout_s: float = Field(
        default=10.0, description="Timeout for the country reference API"
    )
    climate_api_timeout_s: float = Field(
        default=10.0, description="Timeout for the climate API"
    )
    ai_timeout_s: float = Field(
        default=15.0, description="Timeout for the risk classification call"
    )

    # Retry Configuration
    max_retries: int = Field(default=2, description="Retries after the first attempt")
    retry_delay_s: float = Field(
        default=1.0, description="Base backoff, multiplied by the attempt number"
    )

    # Cache
    safety_feed_ttl_s: int = Field(
        default=300, description="Adapter-level TTL matching the feed publish cadence"
    )
    memory_cache_max_entries: int = Field(
        default=1000, description="Max entries held by the in-memory tier"
    )
    cache_cleanup_interval_s: float = Field(
        default=60.0, description="Interval of the expired-entry sweep"
    )
    file_cache_enabled: bool = Field(
        default=True, description="Enable the file-backed cache tier"
    )
    cache_dir: str = Field(
        default=".cache/travel-info", description="Directory of the file cache tier"
    )
    file_cache_max_entries: int = Field(
        default=5000, description="Max files kept by the file tier; oldest go first"
    )

    # AI risk disambiguation
    openai_api_key: str = Field(
        default="", description="OpenAI API key; empty disables AI disambiguation"
    )
    openai_model: str = Field(
        default="gpt-4o-mini", description="Model used for risk classification"
    )

    # Time difference reference (JST)
    reference_utc_offset_hours: float = Field(
        default=9.0, description="UTC offset the time difference is computed against"
    )

    @field_validator("cache_dir", mode="after")
    @classmethod
    def _resolve_cache_dir(cls, value: str) -> str:
        """Relative cache dirs always point at the repo root."""
        path = Path(value)
        if not path.is_absolute():
            path = (_BASE_DIR / path).resolve()
        return path.as_posix()


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get settings singleton."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def is_ai_configured(settings: Settings | None = None) -> bool:
    """Return True when an OpenAI key is present.

    A missing key is a supported, disabled state rather than an error.
    """
    settings = settings or get_settings()
    api_key = (settings.openai_api_key or "").strip()
    return bool(api_key) and not api_key.startswith("dummy-")
