"""
Application configuration using pydantic-settings.
Loads from environment variables with .env file support.
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR

    # API Settings
    api_v1_prefix: str = "/api/v1"
    project_name: str = "Module Progression Engine"
    version: str = "1.0.0"

    # Engine
    seed_namespace: str = "lms-progression"  # mixed into every derived RNG seed
    weighted_selection_strategy: Literal["inverse_usage", "uniform"] = "inverse_usage"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
