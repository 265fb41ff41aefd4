#!/usr/bin/env python3
"""
Centralized Configuration Module using Pydantic Settings

This module provides type-safe, environment-based configuration for the
Redis Web Manager backend. All configuration is centralized here so the
connection registry, the keyspace services and the HTTP layer agree on
limits and defaults.

Architectural Decision: one flat environment, several typed views
- Each concern declares its variables once, in its own section class
- `Settings` inherits every section, so a single .env populates them all
- Components receive only their section (`settings.browser`, `settings.redis`)
- Invalid values fail at startup, not on the first request
"""

from typing import Literal, TypeVar

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SECTION_CONFIG = SettingsConfigDict(env_prefix="", case_sensitive=True)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class RedisSettings(BaseSettings):
    """
    Backend session configuration.

    Sessions are single-socket clients created on demand by the connection
    registry, so there is no pool sizing here. Only connection establishment
    is bounded; commands themselves run without a timeout unless
    REDIS_SOCKET_TIMEOUT is set.
    """

    REDIS_SOCKET_CONNECT_TIMEOUT: float = Field(default=5.0, description="Connect timeout in seconds")
    REDIS_SOCKET_TIMEOUT: float | None = Field(default=None, description="Command socket timeout in seconds")
    REDIS_CONNECT_RETRIES: int = Field(default=2, ge=0, description="Connect retries after the first attempt")
    REDIS_CONNECT_RETRY_DELAY: float = Field(default=0.2, ge=0, description="Fixed backoff between connect attempts")

    model_config = SECTION_CONFIG


class BrowserSettings(BaseSettings):
    """Limits for key enumeration and value previews."""

    PREVIEW_LIMIT_DEFAULT: int = Field(default=200, ge=1, description="Default preview size")
    PREVIEW_LIMIT_MAX: int = Field(default=1000, ge=1, description="Hard cap on preview size")
    SCAN_HARD_CAP: int = Field(default=1000, ge=1, description="Maximum unique keys returned by a scan")
    SCAN_PAGE_SIZE: int = Field(default=100, ge=1, description="COUNT hint for each SCAN step")

    model_config = SECTION_CONFIG


class StorageSettings(BaseSettings):
    # Unset means <package dir>/connections.json
    CONNECTIONS_FILE: str | None = Field(default=None, description="Profiles file or directory")
    CONNECTIONS_TEMPLATE_FILE: str | None = Field(default=None, description="Seed file for new profile stores")

    model_config = SECTION_CONFIG


class LoggingSettings(BaseSettings):
    """structlog output configuration."""

    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: Literal["json", "console"] = Field(default="json", description="Log output format")

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {list(LOG_LEVELS)}")
        return level

    model_config = SECTION_CONFIG


class ApplicationSettings(BaseSettings):
    """HTTP surface: bind address, route prefix, CORS."""

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development", description="Controls error verbosity and auto-reload"
    )
    APP_NAME: str = Field(default="Redis Web Manager API", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Reported by /health")
    API_HOST: str = Field(default="0.0.0.0", description="Bind address")
    PORT: int = Field(default=3000, description="Bind port")
    API_BASE_PATH: str = Field(default="/api", description="Prefix for every business route")
    CORS_ORIGINS: list[str] = Field(default=["*"], description="Allowed CORS origins")

    model_config = SECTION_CONFIG


SectionT = TypeVar("SectionT", bound=BaseSettings)


class Settings(
    RedisSettings, BrowserSettings, StorageSettings, LoggingSettings, ApplicationSettings
):
    """
    Every section in one object, loaded from the environment and `.env`.

    Usage:
        from redis_web_manager.core.config.settings import get_settings

        settings = get_settings()
        cap = settings.browser.SCAN_HARD_CAP
        retries = settings.redis.REDIS_CONNECT_RETRIES
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    def _section(self, section: type[SectionT]) -> SectionT:
        # Values are already validated; construct without re-reading the environment
        return section.model_construct(
            **{name: getattr(self, name) for name in section.model_fields}
        )

    @property
    def redis(self) -> RedisSettings:
        return self._section(RedisSettings)

    @property
    def browser(self) -> BrowserSettings:
        return self._section(BrowserSettings)

    @property
    def storage(self) -> StorageSettings:
        return self._section(StorageSettings)

    @property
    def logging(self) -> LoggingSettings:
        return self._section(LoggingSettings)

    @property
    def app(self) -> ApplicationSettings:
        return self._section(ApplicationSettings)


_settings: Settings | None = None


def get_settings() -> Settings:
    """Process-wide settings, loaded on first use."""
    global _settings

    if _settings is None:
        _settings = Settings()

    return _settings


def reload_settings() -> Settings:
    """Re-read the environment (tests change it between cases)."""
    global _settings
    _settings = Settings()
    return _settings
