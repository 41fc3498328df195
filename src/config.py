"""Application configuration using pydantic-settings pattern."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "Management Dashboard"
    app_version: str = "0.1.0"
    app_env: str = Field(default="development")
    log_level: str = Field(default="INFO")

    # Calendar source (Google service account)
    google_calendar_credentials: str | None = Field(default=None)
    calendar_id: str = Field(default="primary")
    event_cache_ttl_seconds: int = Field(
        default=300,
        ge=0,
        description="How long fetched calendar events are reused",
    )
    event_lookahead_days: int = Field(
        default=30,
        ge=1,
        le=365,
        description="Days ahead fetched into the event cache",
    )
    event_fetch_limit: int = Field(default=100, ge=1, le=2500)
    cache_refresh_minutes: int = Field(
        default=5,
        ge=1,
        description="Interval of the background event cache refresh",
    )

    # Decisions
    seed_sample_data: bool = Field(
        default=True,
        description="Load sample rules and decisions at startup",
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
