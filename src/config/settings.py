"""
Configuration Management for Expense Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The ledger has exactly one external resource (the JSON data file), so the
settings are small, but everything that varies between deployments
(file locations, log level, suggested categories) lives in one place.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_CATEGORIES = (
    "Food,Transport,Shopping,Bills,Health,Entertainment,Study,Travel,Other"
)


class StorageSettings(BaseSettings):
    """Flat-file storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    data_file: Path = Field(
        default=Path("data/expenses.json"),
        description="Path to the JSON document holding all expenses"
    )
    audit_log_file: Optional[Path] = Field(
        default=None,
        description="Optional JSON-lines file that receives audit events"
    )
    strict_load: bool = Field(
        default=False,
        description="Raise on a corrupted data file instead of starting empty"
    )
    json_indent: int = Field(
        default=4,
        ge=0,
        le=8,
        description="Indentation used when writing the data file"
    )

    @field_validator('data_file')
    @classmethod
    def validate_data_file(cls, v: Path) -> Path:
        """The data file must name a file, not a directory."""
        if v.exists() and v.is_dir():
            raise ValueError(f"Data file path {v} is a directory")
        return v


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Minimum level for structured logs"
    )

    # Form behaviour
    default_category: str = Field(
        default="Other",
        min_length=1,
        description="Category used when a submission carries none"
    )
    suggested_categories: str = Field(
        default=DEFAULT_CATEGORIES,
        description="Comma-separated list of categories offered in the form"
    )
    currency_symbol: str = Field(
        default="$",
        max_length=3,
        description="Symbol prefixed to rendered amounts"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def categories_list(self) -> list[str]:
        """Get suggested categories as a list."""
        return [
            cat.strip()
            for cat in self.suggested_categories.split(",")
            if cat.strip()
        ]


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

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
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
