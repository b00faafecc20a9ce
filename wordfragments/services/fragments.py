"""Fragment-of-the-day selection and storage."""

from __future__ import annotations

import logging
import random
from typing import Final, Optional, Sequence, Tuple

from ..core.config import DAILY_TTL_SEC
from ..core.errors import StoreUnavailable
from .store import KeyValueStore

logger = logging.getLogger(__name__)

# Common 2-3 letter openings that start many English words.
FRAGMENTS: Final[Tuple[str, ...]] = (
    "an", "ar", "at", "be", "co", "de", "ex", "in", "on", "or", "re", "st", "th", "to", "un",
    "ab", "ad", "al", "as", "ba", "ca", "ch", "cl", "cr", "di", "dr", "el", "en", "er", "es",
    "fl", "fr", "gr", "ha", "he", "ho", "im", "is", "it", "la", "le", "li", "ma", "me", "mi",
    "mo", "ne", "no", "of", "pa", "pl", "pr", "qu", "ra", "ro", "sc", "sh", "sl", "sp", "sw",
    "ta", "te", "tr", "up", "wa", "we", "wi", "wo", "yo",
    "ant", "app", "art", "ask", "bad", "bag", "bar", "bat", "bed", "big", "bit", "box", "boy",
    "bus", "but", "buy", "can", "car", "cat", "cup", "cut", "day", "did", "dog", "ear", "eat",
    "end", "eye", "far", "few", "for", "fun", "get", "got", "had", "has", "her", "him", "his",
    "hot", "how", "job", "key", "kid", "let", "man", "may", "new", "not", "now", "old", "one",
    "our", "out", "own", "put", "red", "run", "say", "see", "she", "sit", "six", "sun", "ten",
    "the", "top", "try", "two", "use", "way", "who", "why", "win", "yes", "you",
)


def fragment_key(date_key: str) -> str:
    return f"daily_fragment:{date_key}"


class FragmentProvider:
    """Owns the ``daily_fragment:<date>`` records.

    A fragment is drawn lazily the first time a date is requested and is
    never re-rolled while the record lives.
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        fragments: Sequence[str] = FRAGMENTS,
        ttl: int = DAILY_TTL_SEC,
        rng: Optional[random.Random] = None,
    ) -> None:
        if not fragments:
            raise ValueError("Fragment list cannot be empty")
        self._store = store
        self._fragments = tuple(fragments)
        self._ttl = ttl
        self._rng = rng or random.Random()

    async def daily_fragment(self, date_key: str) -> str:
        """Return the fragment for ``date_key``, creating it if needed."""

        key = fragment_key(date_key)
        existing = await self._store.get(key)
        if existing:
            return existing

        candidate = self._rng.choice(self._fragments)
        if await self._store.set_if_absent(key, candidate, ttl=self._ttl):
            logger.info("New daily fragment for %s: %s", date_key, candidate)
            return candidate

        winner = await self._store.get(key)
        if not winner:
            raise StoreUnavailable(f"Fragment for {date_key} could not be read back")
        logger.debug("Lost fragment race for %s; using %s", date_key, winner)
        return winner

    async def stored_fragment(self, date_key: str) -> str:
        """Return the fragment recorded for ``date_key`` without creating one."""

        return await self._store.get(fragment_key(date_key)) or ""

    async def has_fragment(self, date_key: str) -> bool:
        return bool(await self.stored_fragment(date_key))


__all__ = ["FRAGMENTS", "FragmentProvider", "fragment_key"]
