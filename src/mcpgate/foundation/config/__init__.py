"""Configuration management using pydantic-settings.

Provides environment-based configuration with type safety and validation.
"""

from .settings import (
    LoggingSettings,
    ServerSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "LoggingSettings",
    "ServerSettings",
    "Settings",
    "clear_settings_cache",
    "get_settings",
]
