"""
Application settings using Pydantic.

Provides environment-based configuration loading with CWVARIABLES_ prefix.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CWVARIABLES_",
        extra="ignore",
    )

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # Fixture data backing the CLI provider
    fixtures_path: str | None = None

    # Region used by the CLI when a query leaves it empty
    default_region: str = "us-east-1"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
