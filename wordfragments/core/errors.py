"""Domain error types."""

from __future__ import annotations


class FragmentsError(Exception):
    """Base class for errors raised by the game services."""


class SessionNotFound(FragmentsError):
    """No live game session exists for the (post, player) key."""

    def __init__(self, post_id: str, username: str) -> None:
        super().__init__(f"No game session for {username!r} on post {post_id!r}")
        self.post_id = post_id
        self.username = username


class StoreUnavailable(FragmentsError):
    """The key-value store could not complete a read or write."""


class MalformedRecord(FragmentsError):
    """A stored value could not be deserialized."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"Malformed record at {key!r}: {reason}")
        self.key = key
        self.reason = reason


__all__ = ["FragmentsError", "MalformedRecord", "SessionNotFound", "StoreUnavailable"]
