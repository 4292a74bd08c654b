"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./geoevents.db",
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    app_timezone: str = Field(
        default="UTC",
        description="IANA timezone (or UTC+HH:MM offset) used for stored timestamps",
    )
    default_search_radius: float = Field(
        default=10.0,
        gt=0,
        description="Radius in kilometres used when a search does not provide one",
    )
    notification_radius: float = Field(
        default=20.0,
        gt=0,
        description="Maximum distance in kilometres between a user and a new event to notify them",
    )
    default_page_size: int = Field(default=10, gt=0)
    max_page_size: int = Field(default=100, gt=0)
    reminder_sweep_interval_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Seconds between two sweeps promoting due reminders to the channel",
    )
    reminder_sweep_batch_size: int = Field(default=500, gt=0)
    log_level: str = Field(default="INFO")

    @model_validator(mode="after")
    def _validate_page_sizes(self) -> "Settings":
        if self.default_page_size > self.max_page_size:
            raise ValueError("DEFAULT_PAGE_SIZE must not exceed MAX_PAGE_SIZE")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
