"""Day partitioning in the reference timezone.

Fragment retention, leaderboard retention and the word-reveal gate all
derive from the same "time until next midnight" computed here.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Callable, List
from zoneinfo import ZoneInfo

from ..core.config import REFERENCE_TIMEZONE
from ..core.time import utcnow

_DATE_KEY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

REVEAL_WINDOW = timedelta(hours=1)


def parse_date_key(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` key, raising ``ValueError`` on anything else."""

    if not _DATE_KEY_RE.match(value or ""):
        raise ValueError(f"date must be YYYY-MM-DD, got: {value!r}")
    return date.fromisoformat(value)


class DateWindow:
    """Clock-aware helpers for daily keys and midnight timing."""

    def __init__(
        self,
        tz: str | tzinfo = REFERENCE_TIMEZONE,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.tz = ZoneInfo(tz) if isinstance(tz, str) else tz
        self._clock = clock

    def now(self) -> datetime:
        return self._clock().astimezone(self.tz)

    def today(self) -> date:
        return self.now().date()

    @staticmethod
    def date_key(day: date) -> str:
        return day.isoformat()

    def current_date_key(self) -> str:
        return self.date_key(self.today())

    def is_today(self, date_key: str) -> bool:
        return date_key == self.current_date_key()

    def next_midnight(self) -> datetime:
        tomorrow = self.today() + timedelta(days=1)
        return datetime.combine(tomorrow, time.min, tzinfo=self.tz)

    def time_until_midnight(self) -> timedelta:
        # Subtract in UTC; same-tzinfo arithmetic ignores DST offset changes.
        return self.next_midnight().astimezone(timezone.utc) - self.now().astimezone(
            timezone.utc
        )

    def seconds_until_next_fragment(self) -> int:
        return max(0, int(self.time_until_midnight().total_seconds()))

    def is_day_complete(self) -> bool:
        """True during the last hour before midnight."""
        return self.time_until_midnight() <= REVEAL_WINDOW

    def recent_date_keys(self, days: int) -> List[str]:
        """Keys for the last ``days`` calendar days, newest (today) first."""
        today = self.today()
        return [self.date_key(today - timedelta(days=offset)) for offset in range(days)]


__all__ = ["DateWindow", "REVEAL_WINDOW", "parse_date_key"]
