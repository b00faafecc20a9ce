"""Per-player game sessions.

A session moves ``Active -> Ended`` exactly once. Every mutation is a
compare-and-swap on the ``game:<post>:<user>`` record, so only the writer
that performs the ``Active -> Ended`` transition submits the result to the
leaderboards.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Tuple

from ..core.config import GAME_DURATION_SEC, LEADERBOARD_WRITE_ATTEMPTS, SESSION_TTL_SEC
from ..core.errors import MalformedRecord, SessionNotFound, StoreUnavailable
from ..models import GameSession, SubmitResult
from .dates import DateWindow
from .fragments import FragmentProvider
from .leaderboard import LeaderboardStore
from .records import dump_model, load_session
from .store import KeyValueStore
from .words import CHARACTERS, LENGTH, MAX_WORD_LENGTH, MIN_WORD_LENGTH, PREFIX, WordValidator

logger = logging.getLogger(__name__)

INACTIVE_MESSAGE = "Game is not active"

Change = Callable[[GameSession], Tuple[Optional[GameSession], Any]]


def game_key(post_id: str, username: str) -> str:
    return f"game:{post_id}:{username}"


def rejection_message(word: str, fragment: str, reason: Optional[str]) -> str:
    if reason == PREFIX:
        hint = f'Make sure it starts with "{fragment}".'
    elif reason == LENGTH:
        hint = f"Words must be {MIN_WORD_LENGTH} to {MAX_WORD_LENGTH} letters long."
    elif reason == CHARACTERS:
        hint = "Use letters only."
    else:
        hint = "Make sure it is a real word."
    return f'"{word}" is not valid. {hint}'


class GameService:
    """Start, play and finish timed sessions keyed by (post, player)."""

    def __init__(
        self,
        store: KeyValueStore,
        fragments: FragmentProvider,
        validator: WordValidator,
        leaderboard: LeaderboardStore,
        window: DateWindow,
        *,
        duration: int = GAME_DURATION_SEC,
        session_ttl: int = SESSION_TTL_SEC,
        write_attempts: int = LEADERBOARD_WRITE_ATTEMPTS,
    ) -> None:
        self._store = store
        self._fragments = fragments
        self._validator = validator
        self._leaderboard = leaderboard
        self._window = window
        self.duration = duration
        self._session_ttl = session_ttl
        self._write_attempts = write_attempts

    async def start(self, post_id: str, username: str) -> GameSession:
        """Begin a fresh session, discarding any unfinished one."""

        date_key = self._window.current_date_key()
        fragment = await self._fragments.daily_fragment(date_key)
        game = GameSession(fragment=fragment, date=date_key, time_left=self.duration)
        await self._store.set(
            game_key(post_id, username), dump_model(game), ttl=self._session_ttl
        )
        logger.info("Started game for %s on post %s (fragment %s)", username, post_id, fragment)
        return game

    async def get(self, post_id: str, username: str) -> Optional[GameSession]:
        game, _ = await self._load(game_key(post_id, username))
        return game

    async def submit(self, post_id: str, username: str, word: str) -> SubmitResult:
        """Score ``word`` against the session's fragment.

        Raises :class:`SessionNotFound` when there is no live session.
        """

        def change(game: GameSession):
            if not game.active:
                return None, None
            check = self._validator.check(word, game.fragment)
            if not check.valid:
                # Rewritten unchanged so the TTL is refreshed.
                return game, check
            best_word = word if len(word) > len(game.best_word) else game.best_word
            return (
                game.model_copy(
                    update={
                        "score": game.score + self._validator.score(word),
                        "current_word": word,
                        "best_word": best_word,
                    }
                ),
                check,
            )

        game, check = await self._apply(post_id, username, change)
        if check is None:
            return SubmitResult(
                valid=False, score=game.score, message=INACTIVE_MESSAGE, session=game
            )
        if not check.valid:
            return SubmitResult(
                valid=False,
                score=game.score,
                reason=check.reason,
                message=rejection_message(word, game.fragment, check.reason),
                session=game,
            )

        points = self._validator.score(word)
        return SubmitResult(
            valid=True,
            score=game.score,
            points=points,
            message=f'Great! "{word}" is valid and earned {points} points!',
            session=game,
        )

    async def end(self, post_id: str, username: str) -> Optional[GameSession]:
        """Finish the session; returns None when there is no session."""

        def change(game: GameSession):
            if not game.active:
                return None, False
            return game.model_copy(update={"active": False, "time_left": 0}), True

        return await self._finish(post_id, username, change)

    async def tick(
        self, post_id: str, username: str, elapsed: int = 1
    ) -> Optional[GameSession]:
        """Count ``elapsed`` seconds off the clock, ending the game at zero."""

        if elapsed < 0:
            raise ValueError("elapsed must be non-negative")

        def change(game: GameSession):
            if not game.active:
                return None, False
            remaining = max(0, game.time_left - elapsed)
            if remaining == 0:
                return game.model_copy(update={"active": False, "time_left": 0}), True
            return game.model_copy(update={"time_left": remaining}), False

        return await self._finish(post_id, username, change)

    async def _finish(
        self, post_id: str, username: str, change: Change
    ) -> Optional[GameSession]:
        try:
            game, ended_now = await self._apply(post_id, username, change)
        except SessionNotFound:
            return None

        if ended_now:
            logger.info(
                "Game over for %s on post %s: score=%d best=%s",
                username,
                post_id,
                game.score,
                game.best_word or "-",
            )
            if game.score > 0 and game.best_word:
                await self._leaderboard.record_result(
                    game.date, username, game.score, game.best_word
                )
        return game

    async def _load(self, key: str) -> Tuple[Optional[GameSession], int]:
        raw, version = await self._store.get_versioned(key)
        if raw is None:
            return None, version
        try:
            return load_session(key, raw), version
        except MalformedRecord as exc:
            logger.warning("Data integrity problem, ignoring session: %s", exc)
            return None, version

    async def _apply(
        self, post_id: str, username: str, change: Change
    ) -> Tuple[GameSession, Any]:
        """Read, transform and conditionally write a session.

        ``change`` returns ``(updated, outcome)``; ``updated`` of None means
        nothing is written.
        """

        key = game_key(post_id, username)
        for attempt in range(1, self._write_attempts + 1):
            current, version = await self._load(key)
            if current is None:
                raise SessionNotFound(post_id, username)

            updated, outcome = change(current)
            if updated is None:
                return current, outcome

            stored = await self._store.compare_and_set(
                key, dump_model(updated), expected_version=version, ttl=self._session_ttl
            )
            if stored:
                return updated, outcome
            logger.debug("Session %s changed concurrently (attempt %d)", key, attempt)
        raise StoreUnavailable(f"Session {key} kept changing; gave up")


__all__ = ["GameService", "INACTIVE_MESSAGE", "game_key", "rejection_message"]
