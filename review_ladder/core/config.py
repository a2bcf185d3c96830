"""
Application configuration using Pydantic Settings.

Centralizes scheduler configuration with environment variable support.
"""

from functools import lru_cache
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Database
    database_url: str = "sqlite+aiosqlite:///./data/review_ladder.db"

    # Environment
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"
    log_to_file: bool = False

    # Learner defaults
    default_timezone: str = "UTC"
    default_daily_capacity: int = 2

    # Periodic trigger (seconds)
    daily_sweep_interval_seconds: int = 3600
    daily_sweep_first_delay_seconds: int = 60

    # Inactivity thresholds (days)
    pause_after_inactive_days: int = 7
    reset_after_inactive_days: int = 30
    reset_window_days: int = 30

    # Seed for the replenishment random source; None draws from OS entropy
    replenish_random_seed: Optional[int] = None

    @field_validator(
        "default_daily_capacity",
        "daily_sweep_interval_seconds",
        "pause_after_inactive_days",
        "reset_after_inactive_days",
        "reset_window_days",
    )
    @classmethod
    def must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be >= 1")
        return v

    @field_validator("log_level")
    @classmethod
    def log_level_known(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level '{v}'")
        return level

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # Ignore extra env vars


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
