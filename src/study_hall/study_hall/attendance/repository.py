from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceStore(Protocol):
    """Persistence contract for attendance records.

    Every method is durable on return and raises StorageUnavailable when the
    backend cannot be reached.
    """

    def insert(self, record: AttendanceRecord) -> None:
        """Store a new record; raises OpenSessionConflict if the member already
        has an open record stored."""

        raise NotImplementedError

    def update_check_out(self, record_id: str, check_out_time: datetime) -> bool:
        """Fill check_out_time only while the record is still open.

        Returns False when the record is missing or already closed.
        """

        raise NotImplementedError

    def get(self, record_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def find_open_by_student(self, student_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def find_by_date_range(
        self,
        student_id: Optional[str],
        start: datetime,
        end: datetime,
    ) -> Sequence[AttendanceRecord]:
        """Records with start <= check_in_time < end, ordered by check-in."""

        raise NotImplementedError
