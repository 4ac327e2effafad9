"""Progress display configuration using pydantic-settings.

Loads configuration from environment variables (and a ``.env`` file in the
working directory, if present) with sensible defaults.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class HeadwaySettings(BaseSettings):
    """Configuration for progress tracking and display.

    All settings can be overridden via environment variables.
    The prefix HEADWAY_ is used for all settings.

    Example:
        export HEADWAY_REFRESH_RATE=0.1
        export HEADWAY_SHOW_TIME_LEFT=true
        export HEADWAY_THEME=ascii
    """

    model_config = SettingsConfigDict(
        env_prefix="HEADWAY_",
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
    )

    # Tracker settings (seconds)
    measurement_interval: float = Field(default=1.0, gt=0)

    # Bar settings
    refresh_rate: float = Field(default=0.2, gt=0)
    bar_width: int = Field(default=20, gt=0)
    speed_box_width: int = Field(default=13, gt=0)
    time_box_width: int = Field(default=13, gt=0)
    width: int = Field(default=80, gt=0)
    show_speed: bool = False
    show_time_left: bool = False

    # Palette name, detected from the locale when unset
    theme: Literal["unicode", "ascii", "cp437"] | None = None

    log_level: str = "WARNING"

    @field_validator("theme", mode="before")
    @classmethod
    def _normalize_theme(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.strip().lower()
            return value or None
        return value

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return value.strip().upper()


@lru_cache
def get_settings() -> HeadwaySettings:
    """Get cached settings instance.

    Returns:
        HeadwaySettings loaded from environment.
    """
    return HeadwaySettings()


def clear_settings_cache() -> None:
    """Clear the cached settings.

    Useful when environment variables change, e.g. in tests.
    """
    get_settings.cache_clear()
