"""Configuration package."""

from budget_tracker.config.settings import (
    AppSettings,
    get_settings,
    validate_settings,
)

__all__ = [
    "AppSettings",
    "get_settings",
    "validate_settings",
]
