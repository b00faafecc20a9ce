"""Value objects for the daily leaderboards."""

from __future__ import annotations

from typing import List

from pydantic import Field

from .game import CamelModel


class LeaderboardEntry(CamelModel):
    """A player's standing on one daily board."""

    username: str
    score: int = Field(ge=0)
    best_word: str = ""


class DailyBoards(CamelModel):
    """Both boards for a day plus the visibility flag applied to them."""

    score_board: List[LeaderboardEntry]
    word_board: List[LeaderboardEntry]
    show_words: bool
    fragment: str
    date: str


__all__ = ["DailyBoards", "LeaderboardEntry"]
