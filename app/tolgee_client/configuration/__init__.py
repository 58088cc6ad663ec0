"""Configuration module - public API.

Centralized configuration management for the Tolgee client using Pydantic
BaseSettings.

Exports:
    settings: Singleton Settings instance
    Settings: Main settings class (for testing/overrides)
    TolgeeSettings: Tolgee backend settings class
"""

from tolgee_client.configuration.settings import Settings, settings
from tolgee_client.configuration.tolgee import (
    DEFAULT_API_URL,
    DEFAULT_CDN_URL,
    TolgeeSettings,
)

__all__ = [
    "Settings",
    "settings",
    "TolgeeSettings",
    "DEFAULT_API_URL",
    "DEFAULT_CDN_URL",
]
