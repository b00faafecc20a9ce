"""Value objects for game sessions."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for payloads exchanged with the store and the client in camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GameSession(CamelModel):
    """One player's timed play-through for a post."""

    fragment: str
    date: str
    current_word: str = ""
    score: int = Field(default=0, ge=0)
    best_word: str = ""
    time_left: int = Field(default=60, ge=0)
    active: bool = True


class SubmitResult(CamelModel):
    valid: bool
    score: int
    points: int = 0
    reason: Optional[str] = None
    message: str
    session: GameSession


__all__ = ["CamelModel", "GameSession", "SubmitResult"]
