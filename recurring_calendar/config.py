"""
Recurring Calendar — Centralized configuration.

Loads all settings from .env and validates them.
Every key has a default, so an empty environment gives an in-memory calendar.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError, field_validator

# Load .env from project root (two levels up from recurring_calendar/config.py)
_ENV_PATH = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_ENV_PATH)

_STORE_KINDS = ("memory", "sqlite")


class Settings(BaseModel):
    """Application settings loaded from environment variables."""

    # Event store backend: "memory" | "sqlite"
    EVENT_STORE: str = "memory"

    # SQLite (only needed when EVENT_STORE=sqlite)
    DATABASE_PATH: str = "data/calendar.db"

    # Logging
    LOG_LEVEL: str = "INFO"

    # Appended to the description of a moved instance
    RESCHEDULED_SUFFIX: str = " (Rescheduled)"

    @field_validator("EVENT_STORE", mode="before")
    @classmethod
    def parse_store(cls, v: str) -> str:
        kind = str(v).strip().lower()
        if kind not in _STORE_KINDS:
            raise ValueError(f"EVENT_STORE must be one of {_STORE_KINDS}, got {v!r}")
        return kind

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def parse_log_level(cls, v: str) -> str:
        level = str(v).strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown LOG_LEVEL: {v!r}")
        return level


def _load_settings() -> Settings:
    """Load settings from environment, validating every key."""
    try:
        return Settings(
            EVENT_STORE=os.getenv("EVENT_STORE", "memory"),
            DATABASE_PATH=os.getenv("DATABASE_PATH", "data/calendar.db"),
            LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
            RESCHEDULED_SUFFIX=os.getenv("RESCHEDULED_SUFFIX", " (Rescheduled)"),
        )
    except ValidationError as exc:
        print(f"ERROR: invalid calendar settings in .env:\n{exc}", file=sys.stderr)
        sys.exit(1)


# Singleton — imported by all other modules as:
#   from recurring_calendar.config import settings
settings = _load_settings()
