"""Application configuration from environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Ephemeris
    swisseph_ephe_path: str = Field(default="", alias="SWISSEPH_EPHE_PATH")

    # Memoization cache
    timing_cache_enabled: bool = Field(default=True, alias="TIMING_CACHE_ENABLED")
    timing_cache_max_entries: int = Field(default=512, ge=1, alias="TIMING_CACHE_MAX_ENTRIES")
    timing_cache_utc_offset_minutes: int = Field(
        default=0,
        ge=-14 * 60,
        le=14 * 60,
        alias="TIMING_CACHE_UTC_OFFSET_MINUTES",
    )

    # Retrograde tracker
    retrograde_lookahead_days: int = Field(default=90, ge=1, le=366, alias="RETROGRADE_LOOKAHEAD_DAYS")

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def reset_settings_cache() -> None:
    """Clear cached settings (useful in tests)."""
    get_settings.cache_clear()
