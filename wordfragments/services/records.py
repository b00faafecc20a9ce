"""JSON encoding of stored records."""

from __future__ import annotations

from typing import List, Type, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from ..core.errors import MalformedRecord
from ..models import GameSession, LeaderboardEntry

M = TypeVar("M", bound=BaseModel)

_BOARD = TypeAdapter(List[LeaderboardEntry])


def _reason(exc: ValidationError) -> str:
    first = exc.errors()[0] if exc.errors() else {}
    where = ".".join(str(part) for part in first.get("loc", ())) or "value"
    return f"{where}: {first.get('msg', 'invalid')}"


def load_model(key: str, raw: str, model: Type[M]) -> M:
    try:
        return model.model_validate_json(raw)
    except ValidationError as exc:
        raise MalformedRecord(key, _reason(exc)) from exc


def dump_model(value: BaseModel) -> str:
    return value.model_dump_json(by_alias=True)


def load_session(key: str, raw: str) -> GameSession:
    return load_model(key, raw, GameSession)


def load_board(key: str, raw: str) -> List[LeaderboardEntry]:
    try:
        return _BOARD.validate_json(raw)
    except ValidationError as exc:
        raise MalformedRecord(key, _reason(exc)) from exc


def dump_board(board: List[LeaderboardEntry]) -> str:
    return _BOARD.dump_json(board, by_alias=True).decode("utf-8")


__all__ = ["dump_board", "dump_model", "load_board", "load_model", "load_session"]
