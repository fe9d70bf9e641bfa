"""Shared fixtures."""
from datetime import datetime

import pytest

from fitcore.services.storage import InMemoryStorage
from fitcore.services.store import EntityStore


class FixedClock:
    """Clock returning a settable moment."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock():
    return FixedClock(datetime(2026, 3, 14, 12, 0, 0))


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def store(storage):
    return EntityStore(storage, key_prefix="gx_")
