"""System-level API endpoints."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ...core import HISTORY_DAYS
from ...services import Services
from ...services.words import MAX_WORD_LENGTH, MIN_WORD_LENGTH
from ..deps import get_services

router = APIRouter(tags=["system"])


@router.get("/health")
def health() -> Dict[str, bool]:
    """Simple readiness probe."""

    return {"ok": True}


@router.get("/healthz")
def healthz() -> JSONResponse:
    """Kubernetes-style readiness endpoint."""

    return JSONResponse({"ok": True})


@router.get("/config")
def get_config(services: Services = Depends(get_services)) -> Dict[str, Any]:
    """Expose game rules the client renders."""

    return {
        "game_duration_sec": services.games.duration,
        "leaderboard_size": services.leaderboard.size,
        "history_days": HISTORY_DAYS,
        "min_word_length": MIN_WORD_LENGTH,
        "max_word_length": MAX_WORD_LENGTH,
        "reference_timezone": str(services.window.tz),
        "dictionary_check": services.validator.lexicon is not None,
    }


__all__ = ["router"]
