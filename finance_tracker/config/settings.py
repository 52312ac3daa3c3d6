"""
Configuration Management for Finance Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

All configuration lives here. Variables are read with the FINANCE_ prefix
from the environment or a local .env file, and validated at startup.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from finance_tracker.models.ledger import MAX_DESCRIPTION_LENGTH


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="FINANCE_",
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
        description="Enable debug mode (forces DEBUG logging)"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Minimum log level for the local structured log"
    )
    log_json: bool = Field(
        default=True,
        description="Render log lines as JSON (False = console renderer)"
    )

    # Ledger
    load_seed_data: bool = Field(
        default=True,
        description="Populate a new session's ledger with the sample dataset"
    )

    # Dashboard
    recent_transactions_limit: int = Field(
        default=5,
        ge=1,
        le=50,
        description="How many transactions the recent activity list shows"
    )
    default_category_color: str = Field(
        default="#94a3b8",
        min_length=1,
        description="Chart color for categories with no matching Category"
    )
    currency_symbol: str = Field(
        default="$",
        max_length=5,
        description="Symbol shown in front of amounts"
    )
    month_key_format: str = Field(
        default="%b %Y",
        description="strftime format of the monthly chart group key"
    )

    # Validation thresholds
    max_description_length: int = Field(
        default=MAX_DESCRIPTION_LENGTH,
        ge=1,
        le=MAX_DESCRIPTION_LENGTH,
        description="Maximum transaction description length"
    )
    future_date_tolerance_days: int = Field(
        default=365,
        ge=0,
        description="How many days in the future a transaction can be dated without a warning"
    )

    # Audit
    audit_history_size: int = Field(
        default=500,
        ge=10,
        description="How many audit events the in-memory audit log keeps"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Only accept standard logging level names."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        level = v.strip().upper()
        if level not in allowed:
            raise ValueError(f"Unsupported log level: {v}. Allowed: {sorted(allowed)}")
        return level

    @field_validator('month_key_format')
    @classmethod
    def validate_month_key_format(cls, v: str) -> str:
        """The key must at least contain the month."""
        if "%b" not in v and "%m" not in v and "%B" not in v:
            raise ValueError("month_key_format must contain a month directive (%b, %B or %m)")
        return v

    @property
    def effective_log_level(self) -> str:
        """Log level actually used: debug mode overrides log_level."""
        return "DEBUG" if self.debug_mode else self.log_level


class Settings(BaseSettings):
    """
    Root settings container.

    Sub-settings are loaded lazily so that a broken section
    can be reported without preventing startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

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


def validate_all_settings(settings: Optional[Settings] = None) -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus a
    "<name>_error" entry for every section that failed.
    """
    results = {}

    settings = settings or get_settings()

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
