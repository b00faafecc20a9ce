"""Key-value store contract and its SQL-backed implementation.

Every value is a string with an optional expiry. Each write bumps a
per-key version number so callers can run optimistic read-modify-write
loops with :meth:`SQLModelStore.compare_and_set`.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Protocol, Tuple

from sqlalchemy import and_, delete, insert, or_, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, col, select
from starlette.concurrency import run_in_threadpool

from ..core.errors import MalformedRecord, StoreUnavailable
from ..core.time import epoch_seconds
from ..models import KVRecord

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Narrow async contract the game services consume."""

    async def get(self, key: str) -> Optional[str]: ...

    async def get_versioned(self, key: str) -> Tuple[Optional[str], int]: ...

    async def set(self, key: str, value: str, *, ttl: Optional[int] = None) -> None: ...

    async def set_if_absent(
        self, key: str, value: str, *, ttl: Optional[int] = None
    ) -> bool: ...

    async def compare_and_set(
        self,
        key: str,
        value: str,
        *,
        expected_version: int,
        ttl: Optional[int] = None,
    ) -> bool: ...

    async def incr_by(self, key: str, amount: int = 1) -> int: ...

    async def delete(self, key: str) -> None: ...

    async def purge_expired(self) -> int: ...


class SQLModelStore:
    """:class:`KeyValueStore` over the ``kv_records`` table.

    Version 0 means "absent"; stored rows start at version 1. Expired rows
    read as absent until they are overwritten or purged.
    """

    def __init__(
        self,
        engine: Engine,
        *,
        clock: Callable[[], float] = epoch_seconds,
        incr_attempts: int = 10,
    ) -> None:
        self._engine = engine
        self._clock = clock
        self._incr_attempts = incr_attempts

    # Public async API -------------------------------------------------------
    async def get(self, key: str) -> Optional[str]:
        value, _ = await self.get_versioned(key)
        return value

    async def get_versioned(self, key: str) -> Tuple[Optional[str], int]:
        return await self._run(self._get_versioned, key)

    async def set(self, key: str, value: str, *, ttl: Optional[int] = None) -> None:
        await self._run(self._set, key, value, ttl)

    async def set_if_absent(
        self, key: str, value: str, *, ttl: Optional[int] = None
    ) -> bool:
        return await self._run(self._set_if_absent, key, value, ttl)

    async def compare_and_set(
        self,
        key: str,
        value: str,
        *,
        expected_version: int,
        ttl: Optional[int] = None,
    ) -> bool:
        if expected_version == 0:
            return await self.set_if_absent(key, value, ttl=ttl)
        return await self._run(self._compare_and_set, key, value, expected_version, ttl)

    async def incr_by(self, key: str, amount: int = 1) -> int:
        return await self._run(self._incr_by, key, amount)

    async def delete(self, key: str) -> None:
        await self._run(self._delete, key)

    async def purge_expired(self) -> int:
        return await self._run(self._purge_expired)

    # Internals --------------------------------------------------------------
    async def _run(self, func: Callable[..., Any], *args: Any) -> Any:
        try:
            return await run_in_threadpool(func, *args)
        except SQLAlchemyError as exc:
            logger.error("Store operation %s failed: %s", func.__name__, exc)
            raise StoreUnavailable(f"{func.__name__.lstrip('_')} failed") from exc

    def _expiry(self, now: float, ttl: Optional[int]) -> Optional[float]:
        return None if ttl is None else now + ttl

    @staticmethod
    def _live(now: float):
        expires_at = col(KVRecord.expires_at)
        return or_(expires_at.is_(None), expires_at > now)

    @staticmethod
    def _expired(now: float):
        expires_at = col(KVRecord.expires_at)
        return and_(expires_at.is_not(None), expires_at <= now)

    def _get_versioned(self, key: str) -> Tuple[Optional[str], int]:
        now = self._clock()
        with Session(self._engine) as session:
            record = session.exec(
                select(KVRecord).where(col(KVRecord.key) == key, self._live(now))
            ).first()
            if record is None:
                return None, 0
            return record.value, record.version

    def _set(self, key: str, value: str, ttl: Optional[int]) -> None:
        now = self._clock()
        values = {"value": value, "expires_at": self._expiry(now, ttl)}
        overwrite = (
            update(KVRecord)
            .where(col(KVRecord.key) == key)
            .values(version=col(KVRecord.version) + 1, **values)
        )
        try:
            with self._engine.begin() as conn:
                if conn.execute(overwrite).rowcount == 0:
                    conn.execute(insert(KVRecord).values(key=key, version=1, **values))
        except IntegrityError:
            # A concurrent writer inserted first; overwrite it.
            with self._engine.begin() as conn:
                conn.execute(overwrite)

    def _set_if_absent(self, key: str, value: str, ttl: Optional[int]) -> bool:
        now = self._clock()
        values = {"value": value, "expires_at": self._expiry(now, ttl)}
        try:
            with self._engine.begin() as conn:
                # Reuse an expired row in place so its version keeps increasing.
                revived = conn.execute(
                    update(KVRecord)
                    .where(col(KVRecord.key) == key, self._expired(now))
                    .values(version=col(KVRecord.version) + 1, **values)
                )
                if revived.rowcount == 0:
                    conn.execute(insert(KVRecord).values(key=key, version=1, **values))
        except IntegrityError:
            return False
        return True

    def _compare_and_set(
        self, key: str, value: str, expected_version: int, ttl: Optional[int]
    ) -> bool:
        now = self._clock()
        with self._engine.begin() as conn:
            result = conn.execute(
                update(KVRecord)
                .where(
                    col(KVRecord.key) == key,
                    col(KVRecord.version) == expected_version,
                    self._live(now),
                )
                .values(
                    value=value,
                    version=expected_version + 1,
                    expires_at=self._expiry(now, ttl),
                )
            )
        return result.rowcount == 1

    def _incr_by(self, key: str, amount: int) -> int:
        for _ in range(self._incr_attempts):
            raw, version = self._get_versioned(key)
            try:
                current = int(raw) if raw is not None else 0
            except ValueError as exc:
                raise MalformedRecord(key, "value is not an integer") from exc
            updated = current + amount

            if version == 0:
                if self._set_if_absent(key, str(updated), None):
                    return updated
                continue

            with self._engine.begin() as conn:
                result = conn.execute(
                    update(KVRecord)
                    .where(
                        col(KVRecord.key) == key,
                        col(KVRecord.version) == version,
                        self._live(self._clock()),
                    )
                    .values(value=str(updated), version=version + 1)
                )
            if result.rowcount == 1:
                return updated
        raise StoreUnavailable(f"Increment of {key!r} kept conflicting")

    def _delete(self, key: str) -> None:
        with self._engine.begin() as conn:
            conn.execute(delete(KVRecord).where(col(KVRecord.key) == key))

    def _purge_expired(self) -> int:
        now = self._clock()
        with self._engine.begin() as conn:
            result = conn.execute(delete(KVRecord).where(self._expired(now)))
        removed = result.rowcount or 0
        if removed:
            logger.info("Purged %d expired records", removed)
        return removed


__all__ = ["KeyValueStore", "SQLModelStore"]
