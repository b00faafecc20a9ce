"""Game session endpoints."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException

from ...core.errors import SessionNotFound
from ...models import GameSession
from ...services import GameService, Services
from ..deps import (
    get_games,
    get_services,
    optional_username,
    require_post_id,
    require_username,
)

router = APIRouter(prefix="/api", tags=["game"])


def _game_state(post_id: str, game: Optional[GameSession]) -> Dict[str, Any]:
    if game is None:
        raise HTTPException(404, "Game not found")
    return {
        "type": "game-state",
        "postId": post_id,
        "gameState": game.model_dump(by_alias=True),
    }


@router.get("/init")
async def init(
    post_id: str = Depends(require_post_id),
    username: str = Depends(optional_username),
    services: Services = Depends(get_services),
):
    """Today's fragment and countdown for the splash screen."""

    window = services.window
    date_key = window.current_date_key()
    fragment = await services.fragments.daily_fragment(date_key)
    return {
        "type": "init",
        "postId": post_id,
        "username": username,
        "fragment": fragment,
        "date": date_key,
        "secondsUntilNextFragment": window.seconds_until_next_fragment(),
        "dayComplete": window.is_day_complete(),
        "gameDuration": services.games.duration,
    }


@router.post("/new-game")
async def new_game(
    post_id: str = Depends(require_post_id),
    username: str = Depends(require_username),
    games: GameService = Depends(get_games),
):
    """Start a new game, replacing any unfinished one."""

    game = await games.start(post_id, username)
    return {
        "type": "new-game",
        "postId": post_id,
        "gameState": game.model_dump(by_alias=True),
    }


@router.get("/game-state")
async def game_state(
    post_id: str = Depends(require_post_id),
    username: str = Depends(require_username),
    games: GameService = Depends(get_games),
):
    return _game_state(post_id, await games.get(post_id, username))


@router.post("/submit-word")
async def submit_word(
    body: Dict[str, Any],
    post_id: str = Depends(require_post_id),
    username: str = Depends(require_username),
    games: GameService = Depends(get_games),
):
    """Submit a word for the player's running game."""

    word = body.get("word")
    if not isinstance(word, str) or not word.strip():
        raise HTTPException(400, "Word is required")

    try:
        result = await games.submit(post_id, username, word.strip())
    except SessionNotFound:
        raise HTTPException(404, "Game not found")

    return {
        "type": "submit-word",
        "postId": post_id,
        "valid": result.valid,
        "score": result.score,
        "points": result.points,
        "reason": result.reason,
        "message": result.message,
        "gameState": result.session.model_dump(by_alias=True),
    }


@router.post("/end-game")
async def end_game(
    post_id: str = Depends(require_post_id),
    username: str = Depends(require_username),
    games: GameService = Depends(get_games),
):
    return _game_state(post_id, await games.end(post_id, username))


@router.post("/tick")
async def tick(
    body: Optional[Dict[str, Any]] = Body(default=None),
    post_id: str = Depends(require_post_id),
    username: str = Depends(require_username),
    games: GameService = Depends(get_games),
):
    """Count seconds off the game clock; the game ends when it runs out."""

    raw = (body or {}).get("elapsed", 1)
    if isinstance(raw, bool) or not isinstance(raw, int) or raw < 0:
        raise HTTPException(400, "elapsed must be a non-negative integer")
    return _game_state(post_id, await games.tick(post_id, username, raw))


__all__ = ["router"]
