from __future__ import annotations

import logging
from datetime import date, datetime, tzinfo
from typing import Iterable, Optional, Union

from ..common.datetime_utils import YearMonth, as_date, as_year_month, day_bounds, month_bounds
from ..common.validators import require_non_empty
from ..core.constants import STUDY_HOURS_DECIMALS
from .calculator import CompletedSessionCalculator, StudyTimeCalculator
from .model import AttendanceRecord
from .repository import AttendanceStore

logger = logging.getLogger(__name__)


def _is_well_formed(record: AttendanceRecord) -> bool:
    if not isinstance(record.check_in_time, datetime) or record.check_in_time.tzinfo is None:
        return False
    if record.check_out_time is None:
        return True
    return isinstance(record.check_out_time, datetime) and record.check_out_time > record.check_in_time


class Aggregator:
    """Read-only views over stored attendance: daily detail and monthly study time.

    Day and month boundaries are taken in the reference timezone ``tz``. A
    session is attributed wholly to the day/month of its check-in.
    """

    def __init__(
        self,
        store: AttendanceStore,
        tz: tzinfo,
        *,
        calculator: Optional[StudyTimeCalculator] = None,
    ):
        self._store = store
        self._tz = tz
        self._calculator = calculator or CompletedSessionCalculator()

    def _well_formed(self, records: Iterable[AttendanceRecord]) -> list[AttendanceRecord]:
        out = []
        for r in records:
            if _is_well_formed(r):
                out.append(r)
            else:
                logger.warning("Excluding malformed attendance record %s", getattr(r, "record_id", "?"))
        return out

    def daily_detail(self, day: Union[date, str], student_id: Optional[str] = None) -> list[AttendanceRecord]:
        day = as_date(day)
        if student_id is not None:
            student_id = require_non_empty(student_id, "student_id")

        start, end = day_bounds(day, self._tz)
        records = self._well_formed(self._store.find_by_date_range(student_id, start, end))
        records.sort(key=lambda r: (r.check_in_time, r.record_id))
        return records

    def monthly_study_minutes(self, student_id: str, year_month: Union[YearMonth, str]) -> int:
        student_id = require_non_empty(student_id, "student_id")
        ym = as_year_month(year_month)

        start, end = month_bounds(ym, self._tz)
        records = self._well_formed(self._store.find_by_date_range(student_id, start, end))
        total_seconds = sum(self._calculator.credited_seconds(r) for r in records)
        return total_seconds // 60

    def monthly_study_hours(self, student_id: str, year_month: Union[YearMonth, str]) -> float:
        minutes = self.monthly_study_minutes(student_id, year_month)
        return round(minutes / 60, STUDY_HOURS_DECIMALS)
