"""Database engine helpers."""

from __future__ import annotations

from pathlib import Path

from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from .config import DATABASE_URL


def build_engine(url: str = DATABASE_URL) -> Engine:
    """Create an engine, preparing SQLite files and in-memory pools as needed."""

    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite":
        return create_engine(url, pool_pre_ping=True)

    connect_args = {"check_same_thread": False}
    if parsed.database in (None, "", ":memory:"):
        # One shared connection, otherwise every pooled connection gets its own empty database.
        return create_engine(url, connect_args=connect_args, poolclass=StaticPool)

    Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(url, connect_args=connect_args)


def create_tables(engine: Engine, *, reset: bool = False) -> None:
    """Create all registered tables, optionally dropping them first."""

    if reset:
        SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)


__all__ = ["build_engine", "create_tables"]
