"""Application configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    One instance is built at startup and handed to ``create_app``; the
    database, cache and logging layers receive it from there.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    api_version: str = "v1"
    app_name: str = "Task API"

    # Server
    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Database
    database_url: str = "sqlite+aiosqlite:///./tasks.db"
    database_echo: bool = False

    @property
    def async_database_url(self) -> str:
        """Get database URL with an async driver for SQLAlchemy.

        Cloud providers hand out 'postgres://' URLs but SQLAlchemy async needs
        'postgresql+asyncpg://'.
        """
        url = self.database_url
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql+asyncpg://", 1)
        elif url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url

    # Cache
    cache_enabled: bool = False
    redis_url: str = "redis://localhost:6379/0"
    cache_ttl_seconds: int = Field(default=600, gt=0)
    cache_key_prefix: str = "tasks::"
    cache_timeout_seconds: float = Field(default=2.0, gt=0)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["structured", "simple"] = "structured"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
