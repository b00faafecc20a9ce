"""Daily score and word leaderboards."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Optional

from ..core.config import (
    DAILY_TTL_SEC,
    HISTORY_DAYS,
    LEADERBOARD_SIZE,
    LEADERBOARD_WRITE_ATTEMPTS,
)
from ..core.errors import MalformedRecord, StoreUnavailable
from ..models import DailyBoards, LeaderboardEntry
from .dates import DateWindow
from .fragments import FragmentProvider
from .records import dump_board, load_board
from .store import KeyValueStore

logger = logging.getLogger(__name__)

HIDDEN_WORD = "***"

Board = List[LeaderboardEntry]


def score_board_key(date_key: str) -> str:
    return f"daily_score_leaderboard:{date_key}"


def word_board_key(date_key: str) -> str:
    return f"daily_word_leaderboard:{date_key}"


def merge_score_entry(board: Board, entry: LeaderboardEntry, limit: int) -> Board:
    """Insert or improve ``entry`` on a score-ranked board.

    An existing entry is replaced only by a strictly higher score; the word
    travels with whichever score wins.
    """

    updated = list(board)
    for idx, existing in enumerate(updated):
        if existing.username == entry.username:
            if entry.score > existing.score:
                updated[idx] = entry
            break
    else:
        updated.append(entry)

    updated.sort(key=lambda item: item.score, reverse=True)
    return updated[:limit]


def merge_word_entry(board: Board, entry: LeaderboardEntry, limit: int) -> Board:
    """Insert or improve ``entry`` on a word-length-ranked board.

    An existing entry is replaced only by a strictly longer word, keeping
    the better of the two scores.
    """

    updated = list(board)
    for idx, existing in enumerate(updated):
        if existing.username == entry.username:
            if len(entry.best_word) > len(existing.best_word):
                updated[idx] = LeaderboardEntry(
                    username=entry.username,
                    score=max(entry.score, existing.score),
                    best_word=entry.best_word,
                )
            break
    else:
        updated.append(entry)

    updated.sort(key=lambda item: len(item.best_word), reverse=True)
    return updated[:limit]


def mask_words(board: Board, *, reveal_leader: bool = False) -> Board:
    """Hide every word, optionally leaving the rank-1 word visible."""

    masked: Board = []
    for idx, entry in enumerate(board):
        if not entry.best_word or (reveal_leader and idx == 0):
            masked.append(entry)
        else:
            masked.append(entry.model_copy(update={"best_word": HIDDEN_WORD}))
    return masked


class LeaderboardStore:
    """Sole writer of the two daily boards.

    Each board is a JSON list under one key; updates run a bounded
    compare-and-swap loop so concurrent results for the same day are not
    lost.
    """

    def __init__(
        self,
        store: KeyValueStore,
        fragments: FragmentProvider,
        window: DateWindow,
        *,
        size: int = LEADERBOARD_SIZE,
        ttl: int = DAILY_TTL_SEC,
        history_days: int = HISTORY_DAYS,
        write_attempts: int = LEADERBOARD_WRITE_ATTEMPTS,
    ) -> None:
        self._store = store
        self._fragments = fragments
        self._window = window
        self.size = size
        self._ttl = ttl
        self._history_days = history_days
        self._write_attempts = write_attempts

    async def record_result(
        self, date_key: str, username: str, score: int, best_word: str
    ) -> None:
        entry = LeaderboardEntry(username=username, score=score, best_word=best_word)
        await asyncio.gather(
            self._update_board(
                score_board_key(date_key),
                lambda board: merge_score_entry(board, entry, self.size),
            ),
            self._update_board(
                word_board_key(date_key),
                lambda board: merge_word_entry(board, entry, self.size),
            ),
        )
        logger.info(
            "Recorded %s on %s leaderboards: score=%d word=%s",
            username,
            date_key,
            score,
            best_word,
        )

    async def daily_boards(self, date_key: Optional[str] = None) -> DailyBoards:
        target = date_key or self._window.current_date_key()
        score_board, word_board, fragment = await asyncio.gather(
            self._read_board(score_board_key(target)),
            self._read_board(word_board_key(target)),
            self._read_fragment(target),
        )

        show_words = not self._window.is_today(target) or self._window.is_day_complete()
        if not show_words:
            score_board = mask_words(score_board)
            word_board = mask_words(word_board, reveal_leader=True)

        return DailyBoards(
            score_board=score_board,
            word_board=word_board,
            show_words=show_words,
            fragment=fragment,
            date=target,
        )

    async def available_dates(self) -> List[str]:
        """Recent days (newest first) that still have a fragment on record."""

        keys = self._window.recent_date_keys(self._history_days)
        try:
            present = await asyncio.gather(
                *(self._fragments.has_fragment(key) for key in keys)
            )
        except StoreUnavailable:
            logger.warning("Could not list leaderboard dates; store unavailable")
            return []
        return [key for key, exists in zip(keys, present) if exists]

    async def _update_board(self, key: str, merge: Callable[[Board], Board]) -> Board:
        for attempt in range(1, self._write_attempts + 1):
            raw, version = await self._store.get_versioned(key)
            updated = merge(self._decode(key, raw))
            stored = await self._store.compare_and_set(
                key, dump_board(updated), expected_version=version, ttl=self._ttl
            )
            if stored:
                return updated
            logger.debug("Leaderboard %s changed concurrently (attempt %d)", key, attempt)
        raise StoreUnavailable(
            f"Leaderboard {key} kept changing; gave up after {self._write_attempts} attempts"
        )

    async def _read_board(self, key: str) -> Board:
        try:
            raw = await self._store.get(key)
        except StoreUnavailable:
            logger.warning("Leaderboard %s unavailable; serving an empty board", key)
            return []
        return self._decode(key, raw)

    async def _read_fragment(self, date_key: str) -> str:
        try:
            return await self._fragments.stored_fragment(date_key)
        except StoreUnavailable:
            logger.warning("Fragment for %s unavailable", date_key)
            return ""

    @staticmethod
    def _decode(key: str, raw: Optional[str]) -> Board:
        if raw is None:
            return []
        try:
            return load_board(key, raw)
        except MalformedRecord as exc:
            logger.warning("Data integrity problem, treating as empty: %s", exc)
            return []


__all__ = [
    "HIDDEN_WORD",
    "LeaderboardStore",
    "mask_words",
    "merge_score_entry",
    "merge_word_entry",
    "score_board_key",
    "word_board_key",
]
