"""Database model backing the key-value store."""

from __future__ import annotations

from typing import Optional

from sqlmodel import Field as ORMField, SQLModel


class KVRecord(SQLModel, table=True):
    """One string value with an optional absolute expiry (Unix seconds)."""

    __tablename__ = "kv_records"

    key: str = ORMField(primary_key=True, max_length=255)
    value: str
    version: int = 1
    expires_at: Optional[float] = ORMField(default=None, index=True)


__all__ = ["KVRecord"]
