"""Shared test fixtures for prayer tracker tests."""

from datetime import datetime, timezone

import pytest

from prayer_tracker.backends import MemoryStore
from prayer_tracker.store import PrayerStorage


class FixedClock:
    """Callable clock that tests can move forward."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def backend():
    return MemoryStore()


@pytest.fixture
def storage(backend):
    return PrayerStorage(backend)


@pytest.fixture
def clock():
    return FixedClock(datetime(2026, 10, 14, 12, 0, tzinfo=timezone.utc))
