"""Service layer: fragments, words, sessions and leaderboards."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional

from .dates import DateWindow, parse_date_key
from .fragments import FRAGMENTS, FragmentProvider
from .leaderboard import LeaderboardStore
from .sessions import GameService
from .store import KeyValueStore, SQLModelStore
from .words import Lexicon, WordList, WordValidator, score_word


@dataclass
class Services:
    """Everything the HTTP layer needs, wired around one store."""

    store: KeyValueStore
    window: DateWindow
    fragments: FragmentProvider
    validator: WordValidator
    leaderboard: LeaderboardStore
    games: GameService


def build_services(
    store: KeyValueStore,
    *,
    window: Optional[DateWindow] = None,
    lexicon: Optional[Lexicon] = None,
    rng: Optional[random.Random] = None,
) -> Services:
    window = window or DateWindow()
    fragments = FragmentProvider(store, rng=rng)
    validator = WordValidator(lexicon)
    leaderboard = LeaderboardStore(store, fragments, window)
    games = GameService(store, fragments, validator, leaderboard, window)
    return Services(
        store=store,
        window=window,
        fragments=fragments,
        validator=validator,
        leaderboard=leaderboard,
        games=games,
    )


__all__ = [
    "DateWindow",
    "FRAGMENTS",
    "FragmentProvider",
    "GameService",
    "KeyValueStore",
    "LeaderboardStore",
    "Lexicon",
    "SQLModelStore",
    "Services",
    "WordList",
    "WordValidator",
    "build_services",
    "parse_date_key",
    "score_word",
]
