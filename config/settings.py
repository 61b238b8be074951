"""
Configuration settings for the growbulk bulk operation engine.
All values can be overridden from environment variables (prefix ``BULK_``).
"""

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "growbulk"
    debug: bool = Field(default=False)
    environment: str = Field(default="production")

    # Database (PostgreSQL)
    database_url: str = Field(default="")
    database_echo: bool = Field(default=False)

    # Redis (progress cache). Empty disables publishing.
    redis_url: str = Field(default="")
    progress_cache_ttl: int = Field(default=3600, gt=0)  # seconds

    # Batch scheduling
    batch_throttle_ms: int = Field(default=100, ge=0)
    display_grace_ms: int = Field(default=2000, ge=0)

    # Undo history
    history_depth: int = Field(default=10, gt=0)

    # Author recorded on notes written by bulk operations
    note_author: str = Field(default="user")

    class Config:
        env_prefix = "BULK_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get the application settings."""
    return settings
