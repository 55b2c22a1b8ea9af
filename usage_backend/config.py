"""Application configuration management."""
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from pathlib import Path
import logging

from usage_backend.models.user import DEFAULT_CLIENT_VERSION

DEFAULT_PORT = 4000
DEFAULT_RETENTION_LIMIT = 1000


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    environment: str = "development"
    host: str = "0.0.0.0"
    port: int = Field(default=DEFAULT_PORT, description="Listening port, overridden by PORT")
    allowed_origins: str = "*"  # Comma-separated list, "*" allows any origin

    # Storage
    storage_dir: Path = Field(default=Path("storage"), description="Directory holding users.json and activity.json")
    static_dir: Path = Field(default=Path("public"), description="Optional static files directory")

    # Records
    activity_retention_limit: int = Field(
        default=DEFAULT_RETENTION_LIMIT,
        description="Maximum number of activity events kept (oldest evicted first)",
    )
    default_client_version: str = DEFAULT_CLIENT_VERSION
    session_end_action: str = "stop"  # Action whose messagesSent counts towards totals

    # Dashboard
    dashboard_refresh_seconds: int = 10

    # Logging
    log_dir: Path = Path("logs")
    log_level: str = "INFO"

    @field_validator("port")
    @classmethod
    def validate_port(cls, value: int) -> int:
        if not 1 <= value <= 65535:
            logging.getLogger(__name__).warning(
                f"PORT={value} out of range (1-65535), using default {DEFAULT_PORT}"
            )
            return DEFAULT_PORT
        return value

    @field_validator("activity_retention_limit")
    @classmethod
    def validate_retention_limit(cls, value: int) -> int:
        if value < 1:
            raise ValueError("activity_retention_limit must be at least 1")
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value):
        if isinstance(value, str):
            return value.strip().upper() or "INFO"
        return value

    @property
    def cors_origins(self) -> list[str]:
        """Parse the configured CORS origins."""
        origins = [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]
        return origins or ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
