"""Configuration package."""

from ledger.config.settings import (
    AppSettings,
    PreferenceSettings,
    Settings,
    StorageSettings,
    get_settings,
)

__all__ = [
    "AppSettings",
    "PreferenceSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
]
