"""Configuration management for SMS Threads.

This module handles application configuration using Pydantic settings.
Configuration can be loaded from environment variables or .env files.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support.

    All settings can be overridden via environment variables with
    the SMS_THREADS_ prefix (e.g., SMS_THREADS_STORAGE_PATH).
    """

    model_config = SettingsConfigDict(
        env_prefix="SMS_THREADS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Storage Configuration
    storage_path: Path = Field(
        default=Path("sms_threads.sqlite3"),
        description="Path to the SQLite database backing the key-value store",
    )
    drafts_storage_key: str = Field(
        default="draft index",
        description="Key under which the whole draft index is persisted",
    )
    storage_max_retries: int = Field(
        default=3,
        ge=0,
        description="Maximum number of retries for transient storage failures",
    )
    storage_retry_delay: float = Field(
        default=0.1,
        ge=0.0,
        description="Initial delay in seconds between storage retries",
    )

    # Application Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings: Application settings instance.
    """
    return Settings()
