"""Configuration management."""

from headway.config.settings import (
    HeadwaySettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "HeadwaySettings",
    "clear_settings_cache",
    "get_settings",
]
