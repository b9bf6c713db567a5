"""
Configuration Management for SplitEasy

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The calculation engine itself reads no configuration; only the
peripheral layers (editing limits, storage, logging) do.
"""

from decimal import Decimal
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Recent-splits storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SPLITEASY_STORAGE_",
        extra="ignore"
    )

    path: str = Field(
        default="~/.spliteasy/recent_splits.json",
        description="JSON file holding the recently saved splits"
    )
    max_stored_splits: int = Field(
        default=10,
        ge=1,
        le=100,
        description="How many recent splits to keep (newest first)"
    )

    @property
    def resolved_path(self) -> Path:
        """Storage path with ~ expanded."""
        return Path(self.path).expanduser()


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
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
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for local structured logs"
    )

    # Editing limits
    max_person_name_length: int = Field(
        default=50,
        ge=1,
        le=500,
        description="Maximum length of a person's display name"
    )
    max_item_name_length: int = Field(
        default=100,
        ge=1,
        le=500,
        description="Maximum length of an item name"
    )
    max_amount: Decimal = Field(
        default=Decimal("1000000000"),
        gt=0,
        description="Largest price or tax accepted from user input"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Only accept standard logging level names."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Unsupported log level: {v}. Allowed: {allowed}")
        return v.upper()


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus a
    "<name>_error" entry for every section that failed.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.storage
        results["storage"] = True
    except Exception as e:
        results["storage"] = False
        results["storage_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
