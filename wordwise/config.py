"""
Configuration settings for the wordwise service.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from wordwise.scheduling.engine import SM2Config


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="WORDWISE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Database
    # ========================================
    database_url: str = Field(
        default="sqlite:///data/wordwise.db",
        description="SQLAlchemy connection string (SQLite or PostgreSQL)",
    )
    database_echo: bool = Field(
        default=False,
        description="Echo SQL statements to the log",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    # ========================================
    # API Server
    # ========================================
    api_host: str = Field(
        default="127.0.0.1",
        description="API server host",
    )
    api_port: int = Field(
        default=8100,
        description="API server port",
    )

    # ========================================
    # SM-2 Settings (for spaced repetition)
    # ========================================
    sm2_initial_easiness: float = Field(
        default=2.5,
        description="Easiness factor for a learner's first attempt on an item",
    )
    sm2_minimum_easiness: float = Field(
        default=1.3,
        description="Lower clamp for the easiness factor",
    )
    sm2_maximum_easiness: float = Field(
        default=2.5,
        description="Upper clamp for the easiness factor",
    )
    sm2_first_interval: int = Field(
        default=1,
        description="Days until review after the first passing attempt",
    )
    sm2_second_interval: int = Field(
        default=6,
        description="Days until review after the second passing attempt",
    )

    # ========================================
    # Review Queue
    # ========================================
    queue_read_workers: int = Field(
        default=2,
        description="Threads used to read items and progress concurrently",
    )

    def sm2_config(self) -> SM2Config:
        """Build the scheduling engine configuration."""
        return SM2Config(
            initial_easiness=self.sm2_initial_easiness,
            minimum_easiness=self.sm2_minimum_easiness,
            maximum_easiness=self.sm2_maximum_easiness,
            first_interval=self.sm2_first_interval,
            second_interval=self.sm2_second_interval,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
