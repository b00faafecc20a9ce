import random
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from wordfragments.core import build_engine, create_tables
from wordfragments.services import DateWindow, SQLModelStore, build_services


class FakeClock:
    """Manually advanced clock shared by the store and the date window."""

    def __init__(self, start: datetime):
        self.current = start

    def now(self) -> datetime:
        return self.current

    def epoch(self) -> float:
        return self.current.timestamp()

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)

    def set(self, when: datetime) -> None:
        self.current = when


NOON = datetime(2025, 3, 14, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def clock():
    return FakeClock(NOON)


@pytest.fixture
def engine(tmp_path):
    db_engine = build_engine(f"sqlite:///{tmp_path / 'test.db'}")
    create_tables(db_engine)
    yield db_engine
    db_engine.dispose()


@pytest.fixture
def store(engine, clock):
    return SQLModelStore(engine, clock=clock.epoch)


@pytest.fixture
def window(clock):
    return DateWindow("UTC", clock=clock.now)


@pytest.fixture
def services(store, window):
    return build_services(store, window=window, rng=random.Random(7))


@pytest.fixture
def client(engine, services):
    from wordfragments.app import create_app

    application = create_app(engine, services=services, db_reset=False)
    with TestClient(application) as test_client:
        yield test_client
