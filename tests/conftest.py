from __future__ import annotations

from datetime import datetime, timedelta, timezone, tzinfo

import pytest

from study_hall.attendance.aggregator import Aggregator
from study_hall.attendance.gateway import CheckInGateway
from study_hall.attendance.memory_store import InMemoryAttendanceStore
from study_hall.attendance.tracker import SessionTracker

IST = timezone(timedelta(hours=5, minutes=30), "IST")
TOKEN = "TAXSHILA_LIBRARY_CHECKIN_QR_V1"


class FrozenClock:
    """Clock that only moves when a test moves it."""

    def __init__(self, now: datetime):
        self._now = now

    @property
    def tz(self) -> tzinfo:
        return self._now.tzinfo

    def now(self) -> datetime:
        return self._now

    def set(self, now: datetime) -> None:
        self._now = now

    def advance(self, **kwargs) -> datetime:
        self._now = self._now + timedelta(**kwargs)
        return self._now


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 2, 9, 0, tzinfo=IST)


@pytest.fixture
def clock(fixed_now) -> FrozenClock:
    return FrozenClock(fixed_now)


@pytest.fixture
def store() -> InMemoryAttendanceStore:
    return InMemoryAttendanceStore()


@pytest.fixture
def tracker(store, clock) -> SessionTracker:
    return SessionTracker(store, clock)


@pytest.fixture
def gateway(tracker) -> CheckInGateway:
    return CheckInGateway(tracker, TOKEN)


@pytest.fixture
def aggregator(store) -> Aggregator:
    return Aggregator(store, IST)
