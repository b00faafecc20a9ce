"""Word checks and scoring."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Protocol, Set

MIN_WORD_LENGTH = 3
MAX_WORD_LENGTH = 20
BONUS_THRESHOLD = 5

_LETTERS_RE = re.compile(r"[A-Za-z]+")

# Rejection reasons
PREFIX = "prefix"
LENGTH = "length"
CHARACTERS = "characters"
UNKNOWN_WORD = "unknown_word"


class Lexicon(Protocol):
    def __contains__(self, word: object) -> bool: ...


class WordList:
    """Case-insensitive set of known words."""

    def __init__(self, words: Iterable[str]) -> None:
        self._words: Set[str] = {w.strip().lower() for w in words if w.strip()}
        if not self._words:
            raise ValueError("Word list cannot be empty")

    @classmethod
    def from_file(cls, path: Path | str) -> "WordList":
        """Load one word per line; blank lines and ``#`` comments are skipped."""
        with open(path, "r", encoding="utf-8") as handle:
            return cls(line for line in handle if not line.lstrip().startswith("#"))

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and word.lower() in self._words

    def __len__(self) -> int:
        return len(self._words)


@dataclass(frozen=True)
class WordCheck:
    valid: bool
    reason: Optional[str] = None


def score_word(word: str) -> int:
    """Length plus two bonus points per letter beyond five."""

    length = len(word)
    return length + 2 * max(0, length - BONUS_THRESHOLD)


class WordValidator:
    """Checks candidate words against a fragment.

    Without a lexicon only shape is checked (prefix, letters, length); pass
    a :class:`WordList` to also require dictionary words.
    """

    def __init__(self, lexicon: Optional[Lexicon] = None) -> None:
        self.lexicon = lexicon

    def check(self, word: str, fragment: str) -> WordCheck:
        if not word.lower().startswith(fragment.lower()):
            return WordCheck(False, PREFIX)
        if len(word) < MIN_WORD_LENGTH or len(word) > MAX_WORD_LENGTH:
            return WordCheck(False, LENGTH)
        if not _LETTERS_RE.fullmatch(word):
            return WordCheck(False, CHARACTERS)
        if self.lexicon is not None and word not in self.lexicon:
            return WordCheck(False, UNKNOWN_WORD)
        return WordCheck(True)

    def validate(self, word: str, fragment: str) -> bool:
        return self.check(word, fragment).valid

    score = staticmethod(score_word)


__all__ = [
    "CHARACTERS",
    "LENGTH",
    "Lexicon",
    "MAX_WORD_LENGTH",
    "MIN_WORD_LENGTH",
    "PREFIX",
    "UNKNOWN_WORD",
    "WordCheck",
    "WordList",
    "WordValidator",
    "score_word",
]
