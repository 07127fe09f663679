"""Shared test fixtures.

Every test gets its own HubStore driven by a manual clock, so timestamps are
deterministic and no state leaks between tests.
"""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient


class ManualClock:
    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float = 1.0) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock():
    return ManualClock(datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def store(clock):
    from hub.store import HubStore
    return HubStore(clock=clock)


@pytest.fixture
def client(store):
    from app.main import create_app
    with TestClient(create_app(store)) as test_client:
        yield test_client
