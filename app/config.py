"""
Kindred — Application Configuration

Loads all configuration from environment variables (and an optional .env file)
using Pydantic Settings.  A cached ``get_settings()`` helper is provided so that
FastAPI dependency-injection (and any other call-site) always receives the same
validated instance without re-parsing the environment on every request.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration for the Kindred peer-support service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------ #
    # Database – Cloud SQL via Unix socket or private IP
    # ------------------------------------------------------------------ #
    DATABASE_URL: str = "postgresql+asyncpg://kindred_user@localhost:5432/kindred"
    DB_USER: str = "kindred_user"
    DB_PASSWORD: str = ""
    DB_NAME: str = "kindred"
    CLOUD_SQL_INSTANCE_CONNECTION: str = ""
    CLOUD_SQL_USE_UNIX_SOCKET: bool = True
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 5
    DB_POOL_TIMEOUT_SECONDS: float = 30.0
    DB_POOL_RECYCLE_SECONDS: int = 1800

    # ------------------------------------------------------------------ #
    # Match scoring points (additive, one entry per factor)
    # ------------------------------------------------------------------ #
    PRIMARY_CATEGORY_POINTS: int = 50
    SECONDARY_CATEGORY_POINTS: int = 50
    SUPPORT_TAG_POINTS: int = 10      # per overlapping need/offer tag
    SUPPORT_TAG_CAP: int = 50
    INTEREST_TAG_POINTS: int = 3      # per fuzzy interest match
    INTEREST_TAG_CAP: int = 10
    AGE_BRACKET_POINTS: int = 10
    STAGE_POINTS: int = 10
    RECURRENCE_POINTS: int = 10

    # ------------------------------------------------------------------ #
    # Identifiers
    # ------------------------------------------------------------------ #
    PAIR_KEY_SEPARATOR: str = "_"

    # ------------------------------------------------------------------ #
    # Runtime environment
    # ------------------------------------------------------------------ #
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    REQUEST_TIMEOUT_SECONDS: float = 30.0

    # ------------------------------------------------------------------ #
    # CORS
    # ------------------------------------------------------------------ #
    ALLOWED_ORIGINS: str = "*"

    # ------------------------------------------------------------------ #
    # Derived helpers
    # ------------------------------------------------------------------ #
    @property
    def allowed_origins_list(self) -> list[str]:
        """Return ALLOWED_ORIGINS as a list split on commas."""
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",")]

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @field_validator(
        "PRIMARY_CATEGORY_POINTS",
        "SECONDARY_CATEGORY_POINTS",
        "SUPPORT_TAG_POINTS",
        "SUPPORT_TAG_CAP",
        "INTEREST_TAG_POINTS",
        "INTEREST_TAG_CAP",
        "AGE_BRACKET_POINTS",
        "STAGE_POINTS",
        "RECURRENCE_POINTS",
    )
    @classmethod
    def _points_must_be_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"Scoring points must be non-negative, got {v}")
        return v

    @field_validator("PAIR_KEY_SEPARATOR")
    @classmethod
    def _separator_must_be_non_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("PAIR_KEY_SEPARATOR must not be empty")
        return v


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached, validated ``Settings`` instance.

    Using ``@lru_cache`` guarantees the .env file is read and validated
    exactly once per process lifetime.  Import this function anywhere you
    need access to configuration::

        from app.config import get_settings
        settings = get_settings()
    """
    return Settings()
