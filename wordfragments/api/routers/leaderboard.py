"""Leaderboard endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from ...services import LeaderboardStore, Services, parse_date_key
from ..deps import get_leaderboard, get_services, optional_post_id

router = APIRouter(prefix="/api", tags=["leaderboard"])


@router.get("/leaderboard")
async def get_leaderboard_for_day(
    date: Optional[str] = None,
    post_id: Optional[str] = Depends(optional_post_id),
    leaderboard: LeaderboardStore = Depends(get_leaderboard),
):
    """Both daily boards; words stay hidden until today's play is complete."""

    if date is not None:
        try:
            parse_date_key(date)
        except ValueError as exc:
            raise HTTPException(400, str(exc))

    boards = await leaderboard.daily_boards(date)
    return {
        "type": "leaderboard",
        "postId": post_id,
        **boards.model_dump(by_alias=True),
    }


@router.get("/leaderboard/dates")
async def list_leaderboard_dates(services: Services = Depends(get_services)):
    """Recent days that still have leaderboard data, newest first."""

    return {
        "today": services.window.current_date_key(),
        "dates": await services.leaderboard.available_dates(),
    }


__all__ = ["router"]
