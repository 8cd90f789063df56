from __future__ import annotations

import pytest

from conftest import TOKEN
from study_hall.attendance.gateway import CheckInGateway
from study_hall.attendance.memory_store import InMemoryAttendanceStore
from study_hall.attendance.model import SeatSnapshot
from study_hall.attendance.tracker import SessionTracker
from study_hall.core.enums import ScanOutcomeKind
from study_hall.core.exceptions import StorageUnavailable


class CountingStore(InMemoryAttendanceStore):
    def __init__(self):
        super().__init__()
        self.calls = 0

    def find_open_by_student(self, student_id):
        self.calls += 1
        return super().find_open_by_student(student_id)

    def insert(self, record):
        self.calls += 1
        return super().insert(record)


def test_wrong_token_is_rejected_without_touching_store(clock):
    store = CountingStore()
    gateway = CheckInGateway(SessionTracker(store, clock), TOKEN)

    outcome = gateway.handle_scan("WRONG_TOKEN", "S1")

    assert outcome.kind == ScanOutcomeKind.INVALID_PAYLOAD
    assert not outcome.ok
    assert store.calls == 0
    assert store.all() == []


@pytest.mark.parametrize("payload", [None, ""])
def test_empty_frames_are_ignored(clock, payload):
    store = CountingStore()
    gateway = CheckInGateway(SessionTracker(store, clock), TOKEN)

    outcome = gateway.handle_scan(payload, "S1")

    assert outcome.kind == ScanOutcomeKind.IGNORED
    assert store.calls == 0


def test_token_match_is_exact(gateway, store):
    assert gateway.handle_scan(f" {TOKEN}", "S1").kind == ScanOutcomeKind.INVALID_PAYLOAD
    assert gateway.handle_scan(TOKEN.lower(), "S1").kind == ScanOutcomeKind.INVALID_PAYLOAD
    assert store.all() == []


def test_scan_scenario(gateway, tracker, store, clock):
    first = gateway.handle_scan(TOKEN, "S1", seat=SeatSnapshot(seat_number="12", shift="morning"))
    assert first.kind == ScanOutcomeKind.CHECKED_IN
    assert first.record.is_open
    assert first.record.seat_number == "12"

    clock.advance(minutes=5)
    second = gateway.handle_scan(TOKEN, "S1")
    assert second.kind == ScanOutcomeKind.ALREADY_ACTIVE
    assert second.ok
    assert second.record == first.record
    assert len(store.all()) == 1

    clock.advance(minutes=115)
    closed = tracker.check_out(first.record.record_id)
    assert closed.duration_minutes == 120
    assert tracker.get_active_session("S1") is None


def test_missing_student_id_is_an_error_outcome(gateway, store):
    outcome = gateway.handle_scan(TOKEN, "")

    assert outcome.kind == ScanOutcomeKind.ERROR
    assert outcome.error_kind == "validation"
    assert store.all() == []


def test_storage_failure_is_reported_not_swallowed(clock):
    class Down(InMemoryAttendanceStore):
        def find_open_by_student(self, student_id):
            raise StorageUnavailable("db down")

    gateway = CheckInGateway(SessionTracker(Down(), clock), TOKEN)

    outcome = gateway.handle_scan(TOKEN, "S1")

    assert outcome.kind == ScanOutcomeKind.ERROR
    assert outcome.error_kind == StorageUnavailable.kind
    assert "db down" in outcome.message


def test_gateway_requires_token(tracker):
    with pytest.raises(ValueError):
        CheckInGateway(tracker, "")
