"""
Friends Midnight — Centralized configuration.

Loads all settings from .env and validates them.
This module is the foundation for every other module in the project.
"""

from __future__ import annotations

import os
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

# Load .env from project root (two levels up from src/config.py)
_ENV_PATH = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_ENV_PATH)


class Settings(BaseModel):
    """Application settings loaded from environment variables."""

    # SQLite key/value file holding the friend list
    DATABASE_PATH: str = "data/friends.db"
    STORAGE_KEY: str = "friends"

    # Refresh cadence of the countdown table
    REFRESH_INTERVAL_MS: int = 1000

    # Viewer's zone — empty → detected from the system
    LOCAL_TIMEZONE: str = ""

    LOG_LEVEL: str = "INFO"

    @field_validator("REFRESH_INTERVAL_MS", mode="before")
    @classmethod
    def parse_interval(cls, v: str | int) -> int:
        interval = int(v)
        if interval <= 0:
            raise ValueError(f"REFRESH_INTERVAL_MS must be positive, got {interval}")
        return interval

    @field_validator("LOCAL_TIMEZONE")
    @classmethod
    def check_timezone(cls, v: str) -> str:
        v = v.strip()
        if not v:
            return ""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
            raise ValueError(f"LOCAL_TIMEZONE is not a known zone: {v!r}") from exc
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        return v.strip().upper() or "INFO"


def _load_settings() -> Settings:
    """Load settings from environment."""
    return Settings(
        DATABASE_PATH=os.getenv("DATABASE_PATH", "data/friends.db"),
        STORAGE_KEY=os.getenv("STORAGE_KEY", "friends"),
        REFRESH_INTERVAL_MS=os.getenv("REFRESH_INTERVAL_MS", "1000"),
        LOCAL_TIMEZONE=os.getenv("LOCAL_TIMEZONE", ""),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
    )


# Singleton — imported by all other modules as:
#   from src.config import settings
settings = _load_settings()
