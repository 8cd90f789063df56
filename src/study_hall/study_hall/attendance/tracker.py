from __future__ import annotations

import logging
from typing import Optional

from ..common.clock import Clock
from ..common.locks import KeyedLock
from ..common.validators import require_non_empty
from ..core.exceptions import (
    AlreadyCheckedIn,
    AlreadyCheckedOut,
    InvalidSessionTime,
    NoActiveSession,
    OpenSessionConflict,
    RecordNotFound,
)
from .model import AttendanceRecord, SeatSnapshot, new_record_id
from .repository import AttendanceStore

logger = logging.getLogger(__name__)


class SessionTracker:
    """Check-in/check-out state machine.

    The only component that creates or closes attendance records. A member
    has at most one open record: check-in holds a per-student lock around the
    read-then-insert, and the store's conditional insert backs it up across
    processes.
    """

    def __init__(self, store: AttendanceStore, clock: Clock, *, locks: Optional[KeyedLock] = None):
        self._store = store
        self._clock = clock
        self._locks = locks or KeyedLock()

    def get_active_session(self, student_id: str) -> Optional[AttendanceRecord]:
        return self._store.find_open_by_student(require_non_empty(student_id, "student_id"))

    def check_in(self, student_id: str, seat: Optional[SeatSnapshot] = None) -> AttendanceRecord:
        student_id = require_non_empty(student_id, "student_id")
        seat = seat or SeatSnapshot()

        with self._locks.hold(student_id):
            active = self.get_active_session(student_id)
            if active is not None:
                logger.warning("Duplicate check-in for %s (open record %s)", student_id, active.record_id)
                raise AlreadyCheckedIn(student_id, active)

            record = AttendanceRecord(
                record_id=new_record_id(),
                student_id=student_id,
                check_in_time=self._clock.now(),
                seat_number=seat.seat_number,
                shift=seat.shift,
            )
            try:
                self._store.insert(record)
            except OpenSessionConflict as e:
                # Another process won the race between our read and our write.
                logger.warning("Check-in for %s lost an insert race", student_id)
                raise AlreadyCheckedIn(student_id, self.get_active_session(student_id)) from e

        logger.info("Checked in %s at %s (record %s)", student_id, record.check_in_time.isoformat(), record.record_id)
        return record

    def check_out(self, record_id: str) -> AttendanceRecord:
        record_id = require_non_empty(record_id, "record_id")

        record = self._store.get(record_id)
        if record is None:
            raise RecordNotFound(record_id)
        if not record.is_open:
            raise AlreadyCheckedOut(record_id)

        now = self._clock.now()
        if now <= record.check_in_time:
            raise InvalidSessionTime(
                f"Check-out at {now.isoformat()} is not after check-in at {record.check_in_time.isoformat()}"
            )

        if not self._store.update_check_out(record_id, now):
            # Closed (or removed) between our read and the conditional update.
            if self._store.get(record_id) is None:
                raise RecordNotFound(record_id)
            raise AlreadyCheckedOut(record_id)

        closed = record.closed_at(now)
        logger.info(
            "Checked out %s at %s after %s min (record %s)",
            closed.student_id,
            now.isoformat(),
            closed.duration_minutes,
            record_id,
        )
        return closed

    def check_out_active(self, student_id: str) -> AttendanceRecord:
        """Close whatever session the member currently has open."""

        student_id = require_non_empty(student_id, "student_id")
        active = self.get_active_session(student_id)
        if active is None:
            raise NoActiveSession(student_id)
        return self.check_out(active.record_id)
