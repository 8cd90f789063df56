from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ..attendance.model import AttendanceRecord


class DomainError(Exception):
    """Base exception for business rule violations."""

    kind = "domain"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    kind = "validation"


class AttendanceError(DomainError):
    """Base for check-in/check-out session errors."""

    kind = "attendance"


class AlreadyCheckedIn(AttendanceError):
    """The member already has an open session."""

    kind = "already_checked_in"

    def __init__(self, student_id: str, active: Optional["AttendanceRecord"] = None):
        super().__init__(f"Student {student_id} is already checked in")
        self.student_id = student_id
        self.active = active


class AlreadyCheckedOut(AttendanceError):
    kind = "already_checked_out"

    def __init__(self, record_id: str):
        super().__init__(f"Attendance record {record_id} is already checked out")
        self.record_id = record_id


class RecordNotFound(AttendanceError):
    kind = "record_not_found"

    def __init__(self, record_id: str, message: Optional[str] = None):
        super().__init__(message or f"Attendance record {record_id} not found")
        self.record_id = record_id


class NoActiveSession(RecordNotFound):
    """Check-out by member requested while nothing is open."""

    def __init__(self, student_id: str):
        super().__init__("", f"Student {student_id} has no open session")
        self.student_id = student_id


class InvalidSessionTime(AttendanceError):
    """Check-out instant is not strictly after check-in."""

    kind = "invalid_session_time"


class OpenSessionConflict(AttendanceError):
    """Raised by a store when a conditional insert finds an open session."""

    kind = "open_session_conflict"

    def __init__(self, student_id: str):
        super().__init__(f"Open session already stored for student {student_id}")
        self.student_id = student_id


class StorageUnavailable(AttendanceError):
    """Persistence layer could not be reached; fatal for the current operation."""

    kind = "storage_unavailable"
