"""
Shared configuration management for the Book Cache proxy.
"""

from typing import Any

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shared.logging import get_logger


DEFAULT_CACHE_TTL = 3600


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Environment
    env: str = Field(default="local", validation_alias=AliasChoices("BOOKCACHE_ENV", "env"))
    log_level: str = Field(
        default="info",
        validation_alias=AliasChoices("BOOKCACHE_LOG_LEVEL", "LOG_LEVEL", "log_level"),
    )

    # Cache backend
    redis_url: str = Field(
        default="redis://localhost:6379",
        validation_alias=AliasChoices("BOOKCACHE_REDIS_URL", "REDIS_URL", "redis_url"),
    )
    redis_socket_timeout: float = Field(
        default=5.0,
        validation_alias=AliasChoices("BOOKCACHE_REDIS_SOCKET_TIMEOUT", "redis_socket_timeout"),
    )
    cache_ttl_seconds: int = Field(
        default=DEFAULT_CACHE_TTL,
        validation_alias=AliasChoices("BOOKCACHE_CACHE_TTL", "CACHE_TTL", "cache_ttl_seconds"),
    )

    # Origin API
    origin_base_url: str = Field(
        default="https://openlibrary.org",
        validation_alias=AliasChoices("BOOKCACHE_ORIGIN_URL", "OPEN_LIBRARY_URL", "origin_base_url"),
    )
    origin_timeout_seconds: float = Field(
        default=10.0,
        validation_alias=AliasChoices("BOOKCACHE_ORIGIN_TIMEOUT", "origin_timeout_seconds"),
    )
    origin_user_agent: str = Field(
        default="CacheBook/1.0",
        validation_alias=AliasChoices("BOOKCACHE_USER_AGENT", "origin_user_agent"),
    )

    @field_validator("cache_ttl_seconds", mode="before")
    @classmethod
    def _coerce_cache_ttl(cls, value: Any) -> int:
        """TTL must be a positive whole number of seconds; anything else falls back to the default."""
        try:
            ttl = int(str(value).strip())
        except (TypeError, ValueError):
            ttl = 0
        if ttl <= 0:
            get_logger("bookcache.config").warning(
                "Invalid cache TTL value, falling back to default",
                value=value,
                default=DEFAULT_CACHE_TTL,
            )
            return DEFAULT_CACHE_TTL
        return ttl


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    host: str = Field(default="0.0.0.0", validation_alias=AliasChoices("BOOKCACHE_HOST", "host"))
    port: int = Field(default=3000, validation_alias=AliasChoices("BOOKCACHE_PORT", "PORT", "port"))


def get_config(service_name: str, **overrides: Any) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, **overrides)
