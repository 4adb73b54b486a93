"""
Configuration Management for Budget Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Every variable is prefixed with BUDGET_TRACKER_ and may also come
from a `.env` file in the working directory.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


STORAGE_BACKENDS = ("file", "memory")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="BUDGET_TRACKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Render logs for humans instead of JSON"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum log level"
    )

    # Storage
    storage_backend: str = Field(
        default="file",
        description="Where keyed state lives: 'file' or 'memory'"
    )
    data_file: Path = Field(
        default=Path("budget_tracker_data.json"),
        description="JSON file used by the 'file' storage backend"
    )

    # Display
    currency_symbol: str = Field(
        default="$",
        max_length=5,
        description="Symbol shown in front of amounts"
    )

    # Validation thresholds
    future_date_tolerance_days: int = Field(
        default=7,
        ge=0,
        description="How many days in the future a transaction date can be before we warn"
    )

    # Audit
    audit_buffer_size: int = Field(
        default=200,
        ge=0,
        le=10000,
        description="How many recent audit events to keep in memory"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {v}. Allowed: {LOG_LEVELS}")
        return level

    @field_validator('storage_backend')
    @classmethod
    def validate_storage_backend(cls, v: str) -> str:
        backend = v.lower()
        if backend not in STORAGE_BACKENDS:
            raise ValueError(
                f"Unknown storage backend: {v}. Allowed: {STORAGE_BACKENDS}"
            )
        return backend

    def format_amount(self, amount) -> str:
        """Format an amount with the configured currency symbol."""
        return f"{self.currency_symbol}{amount:,.2f}"


@lru_cache()
def get_settings() -> AppSettings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return AppSettings()


def validate_settings() -> dict[str, object]:
    """
    Validate settings are properly configured.

    Returns {"app": bool} plus "app_error" on failure, and a
    "data_file" warning when the file backend points at a directory
    that does not exist. Useful for startup checks.
    """
    results: dict[str, object] = {}

    try:
        settings = get_settings()
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)
        return results

    if settings.storage_backend == "file":
        parent = settings.data_file.expanduser().resolve().parent
        if not parent.exists():
            results["data_file"] = f"Directory does not exist: {parent}"

    return results
