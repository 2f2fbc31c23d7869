"""
Application configuration.

Loads settings from environment variables and .env file.
A Settings instance is built once at startup and passed to ``create_app``;
nothing else reads the environment.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Attributes:
        project_name: Display name for the API.
        version: Current API version string.
        debug: Enable debug mode (exposes /docs). Must be False in production.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        log_file: Optional path of a rotating log file.
        database_url: SQLAlchemy async URL of the member store.
        auto_create_schema: Create missing tables on startup.
        cache_provider: ``memory`` or ``redis``.
        redis_url: Redis URL, used when cache_provider is ``redis``.
        cache_ttl_seconds: Lifetime of cached offset pages.
        default_page_size: Page size used when the client sends none.
        max_page_size: Largest page size a client may request.
        rate_limit_enabled: Enforce the default rate limit.
        rate_limit_default: Default rate limit for all endpoints.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", populate_by_name=True
    )

    project_name: str = "JobBank"
    version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    log_file: Optional[str] = None

    database_url: str = Field(
        default="sqlite+aiosqlite:///./jobbank.db",
        validation_alias=AliasChoices(
            "database_url", "SYS_DATABASE_CONNECTION_STRING"
        ),
    )
    auto_create_schema: bool = True

    cache_provider: Literal["memory", "redis"] = "memory"
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        validation_alias=AliasChoices("redis_url", "SYS_REDIS_URL"),
    )
    cache_ttl_seconds: int = Field(
        default=300,
        ge=1,
        validation_alias=AliasChoices(
            "cache_ttl_seconds", "DEFAULT_CACHE_EXPIRATION"
        ),
    )

    default_page_size: int = Field(default=10, ge=1)
    max_page_size: int = Field(default=100, ge=1)

    rate_limit_enabled: bool = True
    rate_limit_default: str = "60/minute"


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings loaded from the environment."""
    return Settings()
