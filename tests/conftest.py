from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from src.shift_tracker.shift_tracker.clicks.service import ClickLog
from src.shift_tracker.shift_tracker.clicks.store_click_repository import StoreClickRepository
from src.shift_tracker.shift_tracker.database.memory_store import InMemoryDocumentStore
from src.shift_tracker.shift_tracker.employees.roster import StaticEmployeeRoster
from src.shift_tracker.shift_tracker.shifts.actions import ShiftActions
from src.shift_tracker.shift_tracker.shifts.service import ShiftRegistry
from src.shift_tracker.shift_tracker.shifts.store_shift_repository import StoreShiftRepository


class ManualClock:
    """Store clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> datetime:
        self.now = self.now + timedelta(seconds=seconds)
        return self.now

    def set(self, value: datetime) -> datetime:
        self.now = value
        return self.now


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 1, 9, 0, 0)


@pytest.fixture
def clock(fixed_now) -> ManualClock:
    return ManualClock(fixed_now)


@pytest.fixture
def store(clock) -> InMemoryDocumentStore:
    return InMemoryDocumentStore(clock=clock)


@pytest.fixture
def roster() -> StaticEmployeeRoster:
    return StaticEmployeeRoster()


@pytest.fixture
def shifts_repo(store) -> StoreShiftRepository:
    return StoreShiftRepository(store)


@pytest.fixture
def clicks_repo(store) -> StoreClickRepository:
    return StoreClickRepository(store)


@pytest.fixture
def registry(shifts_repo, clock) -> ShiftRegistry:
    return ShiftRegistry(shifts_repo, clock=clock)


@pytest.fixture
def click_log(clicks_repo, registry) -> ClickLog:
    return ClickLog(clicks_repo, registry)


@pytest.fixture
def actions(registry, click_log, roster) -> ShiftActions:
    return ShiftActions(registry, click_log, roster)
