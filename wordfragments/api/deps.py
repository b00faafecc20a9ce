"""Request-scoped dependencies."""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header, HTTPException, Request

from ..services import GameService, LeaderboardStore, Services

ANONYMOUS = "anonymous"


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_games(services: Services = Depends(get_services)) -> GameService:
    return services.games


def get_leaderboard(services: Services = Depends(get_services)) -> LeaderboardStore:
    return services.leaderboard


def require_post_id(x_post_id: Optional[str] = Header(default=None)) -> str:
    """Post id forwarded by the hosting platform."""

    post_id = (x_post_id or "").strip()
    if not post_id:
        raise HTTPException(400, "postId is required")
    return post_id


def optional_post_id(x_post_id: Optional[str] = Header(default=None)) -> Optional[str]:
    return (x_post_id or "").strip() or None


def require_username(x_username: Optional[str] = Header(default=None)) -> str:
    """Username asserted by the upstream identity provider."""

    username = (x_username or "").strip()
    if not username:
        raise HTTPException(400, "User authentication required")
    return username


def optional_username(x_username: Optional[str] = Header(default=None)) -> str:
    return (x_username or "").strip() or ANONYMOUS


__all__ = [
    "ANONYMOUS",
    "get_games",
    "get_leaderboard",
    "get_services",
    "optional_post_id",
    "optional_username",
    "require_post_id",
    "require_username",
]
