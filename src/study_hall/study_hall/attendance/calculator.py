from __future__ import annotations

from abc import ABC, abstractmethod

from .model import AttendanceRecord


class StudyTimeCalculator(ABC):
    """Calculator interface (Strategy Pattern for study-hour credit)."""

    @abstractmethod
    def credited_seconds(self, record: AttendanceRecord) -> int:
        raise NotImplementedError


class CompletedSessionCalculator(StudyTimeCalculator):
    """Standard rule: only closed sessions count, (out - in), not below 0."""

    def credited_seconds(self, record: AttendanceRecord) -> int:
        if record.check_out_time is None:
            return 0
        seconds = int((record.check_out_time - record.check_in_time).total_seconds())
        return max(seconds, 0)
