"""
Configuration Management for the Personal Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Every tunable (database location, debounce window, log format) is
validated once at startup.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Durable store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///ledger.db",
        description="SQLAlchemy URL of the local database"
    )
    echo: bool = Field(
        default=False,
        description="Echo SQL statements (debugging only)"
    )

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Only local SQLite databases are supported."""
        if not v.startswith("sqlite"):
            raise ValueError(f"Unsupported database URL: {v}")
        return v


class PreferenceSettings(BaseSettings):
    """UI preference persistence configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_PREFERENCES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    button_position_key: str = Field(
        default="plusButtonPosition",
        description="Key under which the add button position is stored"
    )
    debounce_seconds: float = Field(
        default=2.0,
        gt=0.0,
        description="Quiet period before a position change is written"
    )
    default_x: float = Field(
        default=200.0,
        description="Horizontal position used when nothing is stored"
    )
    default_y: float = Field(
        default=400.0,
        description="Vertical position used when nothing is stored"
    )


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

    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for emitted log lines"
    )
    log_json: bool = Field(
        default=False,
        description="Render logs as JSON instead of console lines"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


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
    def preferences(self) -> PreferenceSettings:
        return PreferenceSettings()

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
