"""Clock helpers."""

from __future__ import annotations

import time
from datetime import datetime, timezone


def utcnow() -> datetime:
    """Return the current UTC datetime."""
    return datetime.now(timezone.utc)


def epoch_seconds() -> float:
    """Return the current Unix timestamp in seconds."""
    return time.time()


__all__ = ["epoch_seconds", "utcnow"]
