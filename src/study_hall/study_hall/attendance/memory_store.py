from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Optional, Sequence

from ..core.exceptions import OpenSessionConflict
from .model import AttendanceRecord
from .repository import AttendanceStore

logger = logging.getLogger(__name__)


class InMemoryAttendanceStore(AttendanceStore):
    """Process-local store used for development and tests.

    Insert is a conditional write: it refuses a second open record for the
    same student, mirroring the unique index of the MySQL schema.
    """

    def __init__(self, records: Sequence[AttendanceRecord] = ()):
        self._lock = threading.Lock()
        self._by_id: dict[str, AttendanceRecord] = {}
        self._open_by_student: dict[str, str] = {}
        for r in records:
            self._by_id[r.record_id] = r
            if r.is_open:
                self._open_by_student[r.student_id] = r.record_id

    def insert(self, record: AttendanceRecord) -> None:
        with self._lock:
            if record.is_open and record.student_id in self._open_by_student:
                raise OpenSessionConflict(record.student_id)
            self._by_id[record.record_id] = record
            if record.is_open:
                self._open_by_student[record.student_id] = record.record_id

    def update_check_out(self, record_id: str, check_out_time: datetime) -> bool:
        with self._lock:
            r = self._by_id.get(record_id)
            if r is None or not r.is_open:
                return False
            self._by_id[record_id] = r.closed_at(check_out_time)
            self._open_by_student.pop(r.student_id, None)
            return True

    def get(self, record_id: str) -> Optional[AttendanceRecord]:
        with self._lock:
            return self._by_id.get(record_id)

    def find_open_by_student(self, student_id: str) -> Optional[AttendanceRecord]:
        with self._lock:
            record_id = self._open_by_student.get(student_id)
            return self._by_id.get(record_id) if record_id else None

    def find_by_date_range(
        self,
        student_id: Optional[str],
        start: datetime,
        end: datetime,
    ) -> Sequence[AttendanceRecord]:
        with self._lock:
            candidates = [r for r in self._by_id.values() if student_id is None or r.student_id == student_id]
        items = []
        for r in candidates:
            if not isinstance(r.check_in_time, datetime) or r.check_in_time.tzinfo is None:
                logger.warning("Skipping attendance record %s: unreadable check_in_time", r.record_id)
                continue
            if start <= r.check_in_time < end:
                items.append(r)
        items.sort(key=lambda r: (r.check_in_time, r.record_id))
        return items

    def all(self) -> list[AttendanceRecord]:
        with self._lock:
            return list(self._by_id.values())
