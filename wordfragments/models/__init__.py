"""Model exports."""

from .game import GameSession, SubmitResult
from .kv import KVRecord
from .leaderboard import DailyBoards, LeaderboardEntry

__all__ = [
    "DailyBoards",
    "GameSession",
    "KVRecord",
    "LeaderboardEntry",
    "SubmitResult",
]
