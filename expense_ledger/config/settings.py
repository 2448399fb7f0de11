"""
Configuration Management for the Expense Ledger

Settings come from LEDGER_* and plain environment variables or a .env file,
parsed and validated by pydantic-settings.

DESIGN DECISION: Where the ledger keeps its data and how it displays money
are decided in one module. A bad value (unknown backend, path-like key,
unknown timezone) fails at startup instead of on the first write.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Local byte store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: str = Field(
        default="file",
        pattern="^(file|memory)$",
        description="Byte store backend: a directory of files, or process memory"
    )
    data_dir: Path = Field(
        default=Path(".ledger_data"),
        description="Directory holding the file byte store"
    )
    key: str = Field(
        default="transactions_v1",
        min_length=1,
        description="Key under which the snapshot is persisted"
    )
    quarantine_malformed: bool = Field(
        default=True,
        description="Copy the raw snapshot aside when entries are dropped on load"
    )

    @field_validator("key")
    @classmethod
    def validate_key(cls, v: str) -> str:
        """Keys become file names, so path separators are not allowed."""
        if "/" in v or "\\" in v or v in {".", ".."}:
            raise ValueError(f"Storage key must be a plain name, got {v!r}")
        return v

    @property
    def quarantine_key(self) -> str:
        return f"{self.key}.quarantine"


class AppSettings(BaseSettings):
    """Display and reporting settings (no prefix)."""

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
        pattern="^(DEBUG|INFO|WARNING|ERROR)$",
        description="Minimum level for structured logs"
    )

    # Display
    currency_code: str = Field(
        default="VND",
        min_length=3,
        max_length=3,
        description="ISO currency code used for display and export"
    )
    currency_symbol: str = Field(
        default="₫",
        description="Currency symbol used for display"
    )
    display_timezone: Optional[str] = Field(
        default=None,
        description="IANA timezone for calendar windows (default: system local)"
    )

    # Reports
    top_categories_limit: int = Field(
        default=5,
        ge=1,
        le=20,
        description="How many categories the monthly summary ranks"
    )
    trailing_week_days: int = Field(
        default=7,
        ge=1,
        le=31,
        description="Length of the 'week' history tab in days"
    )

    @field_validator("display_timezone")
    @classmethod
    def validate_timezone(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: {v}")
        return v

    @property
    def tzinfo(self) -> Optional[ZoneInfo]:
        """Configured timezone, or None for the system local timezone."""
        return ZoneInfo(self.display_timezone) if self.display_timezone else None


class Settings(BaseSettings):
    """
    Entry point for all settings.

    Sub-settings are built on access, so a broken storage section does not
    stop the display settings from loading.
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
    Shared Settings instance.

    Tests that change the environment call get_settings.cache_clear().
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Try to build every settings section.

    Returns {section: ok} plus a "<section>_error" message for each failure.
    Shown on the Data page of the UI.
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
