"""Application settings and environment helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List, Optional

from dotenv import load_dotenv

load_dotenv(override=False)


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer") from exc


def _split_csv(raw: str | None) -> List[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def _unique(values: Iterable[str]) -> List[str]:
    seen = set()
    ordered: List[str] = []
    for value in values:
        if value not in seen:
            seen.add(value)
            ordered.append(value)
    return ordered


_PROJECT_ROOT = Path(__file__).resolve().parents[2]


# Storage --------------------------------------------------------------------
DATABASE_URL = os.getenv(
    "DATABASE_URL", f"sqlite:///{_PROJECT_ROOT / 'data' / 'fragments.db'}"
)
DB_RESET = _env_bool("DB_RESET", False)


# Game rules -----------------------------------------------------------------
REFERENCE_TIMEZONE = os.getenv("REFERENCE_TIMEZONE", "UTC")
GAME_DURATION_SEC = _env_int("GAME_DURATION_SEC", 60)
SESSION_TTL_SEC = _env_int("SESSION_TTL_SEC", 5 * 60)
DAILY_TTL_SEC = _env_int("DAILY_TTL_SEC", 7 * 24 * 60 * 60)
HISTORY_DAYS = _env_int("HISTORY_DAYS", 7)
LEADERBOARD_SIZE = _env_int("LEADERBOARD_SIZE", 10)
LEADERBOARD_WRITE_ATTEMPTS = _env_int("LEADERBOARD_WRITE_ATTEMPTS", 10)

_lexicon_path = os.getenv("LEXICON_PATH")
LEXICON_PATH: Optional[Path] = Path(_lexicon_path) if _lexicon_path else None


# HTTP -----------------------------------------------------------------------
_frontend_origins = _split_csv(os.getenv("FRONTEND_ORIGIN"))
_additional_origins = _split_csv(os.getenv("ADDITIONAL_ALLOWED_ORIGINS"))

_local_dev_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

ALLOWED_CORS_ORIGINS = _unique(
    [
        *_frontend_origins,
        *_additional_origins,
        *_local_dev_origins,
    ]
)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


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
]
