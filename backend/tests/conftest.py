from datetime import datetime, timedelta, timezone

import pytest

from services.content_cache import ContentCache
from services.storage import MemoryStore


class FakeClock:
    """Clock that advances one second per call"""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2026, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def storage():
    return MemoryStore()


@pytest.fixture
def cache(storage, clock):
    return ContentCache(storage, clock=clock)
