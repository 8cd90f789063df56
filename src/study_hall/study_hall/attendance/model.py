from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Optional

from ..common.datetime_utils import to_iso


def new_record_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class SeatSnapshot:
    """Chỗ ngồi / ca học của thành viên tại thời điểm check-in."""

    seat_number: Optional[str] = None
    shift: Optional[str] = None


@dataclass(frozen=True)
class AttendanceRecord:
    """Thực thể miền (domain): một phiên học từ check-in tới check-out."""

    record_id: str
    student_id: str
    check_in_time: datetime
    check_out_time: Optional[datetime] = None
    seat_number: Optional[str] = None
    shift: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.check_out_time is None

    @property
    def duration_minutes(self) -> Optional[int]:
        if self.check_out_time is None:
            return None
        return int((self.check_out_time - self.check_in_time).total_seconds() // 60)

    def closed_at(self, check_out_time: datetime) -> "AttendanceRecord":
        return replace(self, check_out_time=check_out_time)

    def to_dict(self) -> dict[str, Any]:
        return {
            "record_id": self.record_id,
            "student_id": self.student_id,
            "check_in_time": to_iso(self.check_in_time),
            "check_out_time": to_iso(self.check_out_time),
            "seat_number": self.seat_number,
            "shift": self.shift,
            "duration_minutes": self.duration_minutes,
        }
