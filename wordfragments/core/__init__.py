"""Core configuration and infrastructure helpers."""

from .config import (
    ALLOWED_CORS_ORIGINS,
    DAILY_TTL_SEC,
    DATABASE_URL,
    DB_RESET,
    GAME_DURATION_SEC,
    HISTORY_DAYS,
    LEADERBOARD_SIZE,
    LEADERBOARD_WRITE_ATTEMPTS,
    LEXICON_PATH,
    LOG_LEVEL,
    REFERENCE_TIMEZONE,
    SESSION_TTL_SEC,
)
from .database import build_engine, create_tables
from .errors import FragmentsError, MalformedRecord, SessionNotFound, StoreUnavailable
from .logging_setup import configure_logging
from .time import epoch_seconds, utcnow

__all__ = [
    "ALLOWED_CORS_ORIGINS",
    "DAILY_TTL_SEC",
    "DATABASE_URL",
    "DB_RESET",
    "GAME_DURATION_SEC",
    "HISTORY_DAYS",
    "LEADERBOARD_SIZE",
    "LEADERBOARD_WRITE_ATTEMPTS",
    "LEXICON_PATH",
    "LOG_LEVEL",
    "REFERENCE_TIMEZONE",
    "SESSION_TTL_SEC",
    "FragmentsError",
    "MalformedRecord",
    "SessionNotFound",
    "StoreUnavailable",
    "build_engine",
    "configure_logging",
    "create_tables",
    "epoch_seconds",
    "utcnow",
]
