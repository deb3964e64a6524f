"""
Shared test fixtures for Mythic Journey.

This module provides common fixtures used across all test modules:
- A controllable clock (fixed start, advanced explicitly by tests)
- Deterministic id factory
- In-memory storage
- JourneyStore and ProgressionFacade wired to the above

Usage:
    All fixtures are automatically available to any test in the tests/ directory.
"""

from __future__ import annotations

import itertools
from datetime import UTC, datetime, timedelta

import pytest

from src.journey.facade import ProgressionFacade
from src.journey.storage import InMemoryStorage
from src.journey.store import JourneyStore

START = datetime(2026, 3, 2, 9, 30, tzinfo=UTC)  # a Monday


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime = START) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> datetime:
        self.current += timedelta(**kwargs)
        return self.current


class SequentialIds:
    """Id factory producing entry_1, entry_2, journey_1 ..."""

    def __init__(self) -> None:
        self._counters: dict[str, itertools.count] = {}

    def __call__(self, prefix: str) -> str:
        counter = self._counters.setdefault(prefix, itertools.count(1))
        return f"{prefix}_{next(counter)}"


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def ids() -> SequentialIds:
    return SequentialIds()


@pytest.fixture()
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture()
def store(storage: InMemoryStorage, clock: FakeClock, ids: SequentialIds) -> JourneyStore:
    """A fresh journey persisted to in-memory storage."""
    return JourneyStore.open(storage, clock=clock, id_factory=ids)


@pytest.fixture()
def facade(store: JourneyStore) -> ProgressionFacade:
    return ProgressionFacade(store)
