"""
Configuration Management for Bank Account Console

Uses pydantic-settings for type-safe configuration from environment variables.

Every setting has a default, so the console runs with no environment at
all. The balance minimums are NOT configured here: they are fixed
constants in bank_account.models.account.
"""

import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseSettings):
    """Structured logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="BANK_ACCOUNT_LOG_",
        extra="ignore"
    )

    level: str = Field(
        default="WARNING",
        description="Minimum stdlib log level for structured logs"
    )
    json_output: bool = Field(
        default=True,
        description="Render log lines as JSON (False = human-readable console)"
    )

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Only accept stdlib level names."""
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables.
    """

    model_config = SettingsConfigDict(
        env_prefix="BANK_ACCOUNT_",
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

    # Presentation
    currency_symbol: str = Field(
        default="$",
        min_length=1,
        max_length=3,
        description="Symbol printed in front of balances"
    )

    # Audit trail
    audit_history_limit: int = Field(
        default=1000,
        ge=1,
        le=100000,
        description="Maximum audit events kept in memory"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        extra="ignore"
    )

    @property
    def app(self) -> AppSettings:
        return AppSettings()

    @property
    def logging(self) -> LoggingSettings:
        return LoggingSettings()


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
    "<name>_error" entry for each section that failed.
    """
    results = {}

    settings = get_settings()

    for name in ("app", "logging"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
