from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from conftest import IST
from study_hall.attendance.aggregator import Aggregator
from study_hall.attendance.memory_store import InMemoryAttendanceStore
from study_hall.attendance.model import AttendanceRecord
from study_hall.common.datetime_utils import YearMonth
from study_hall.core.exceptions import StorageUnavailable, ValidationError


def _rec(record_id, student_id, check_in, check_out=None, **kw) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=record_id,
        student_id=student_id,
        check_in_time=check_in,
        check_out_time=check_out,
        **kw,
    )


def _at(day: int, hour: int, minute: int = 0, second: int = 0, month: int = 3) -> datetime:
    return datetime(2026, month, day, hour, minute, second, tzinfo=IST)


class FakeStore:
    def __init__(self, rows):
        self._rows = rows
        self.last_args = None

    def find_by_date_range(self, student_id, start, end):
        self.last_args = (student_id, start, end)
        return list(self._rows)


def test_completed_sessions_only_count_and_daily_order():
    # Stored out of order on purpose.
    store = InMemoryAttendanceStore([
        _rec("r2", "S1", _at(2, 14)),
        _rec("r1", "S1", _at(2, 9), _at(2, 11, 30)),
    ])
    agg = Aggregator(store, IST)

    assert agg.monthly_study_minutes("S1", YearMonth(2026, 3)) == 150
    assert [r.record_id for r in agg.daily_detail(date(2026, 3, 2), "S1")] == ["r1", "r2"]


def test_daily_detail_all_members_is_ordered_by_check_in():
    store = InMemoryAttendanceStore([
        _rec("b", "S2", _at(2, 10), _at(2, 12), seat_number="B-1", shift="fullday"),
        _rec("a", "S1", _at(2, 8)),
        _rec("c", "S3", _at(3, 8)),
    ])
    agg = Aggregator(store, IST)

    records = agg.daily_detail("2026-03-02")

    assert [r.record_id for r in records] == ["a", "b"]
    assert records[1].seat_number == "B-1"


def test_day_boundaries_use_reference_timezone():
    # 00:15 IST on the 3rd is still the 2nd in UTC.
    store = InMemoryAttendanceStore([
        _rec("late", "S1", _at(2, 23, 30)),
        _rec("early", "S2", datetime(2026, 3, 2, 18, 45, tzinfo=timezone.utc)),
    ])
    agg = Aggregator(store, IST)

    assert [r.record_id for r in agg.daily_detail(date(2026, 3, 2))] == ["late"]
    assert [r.record_id for r in agg.daily_detail(date(2026, 3, 3))] == ["early"]


def test_cross_month_session_belongs_to_check_in_month():
    store = InMemoryAttendanceStore([
        _rec("r1", "S1", _at(31, 23, month=1), _at(1, 1, month=2)),
    ])
    agg = Aggregator(store, IST)

    assert agg.monthly_study_minutes("S1", "2026-01") == 120
    assert agg.monthly_study_minutes("S1", "2026-02") == 0


def test_minutes_are_floored_after_summing_seconds():
    store = InMemoryAttendanceStore([
        _rec("r1", "S1", _at(2, 9), _at(2, 9, 10, 30)),
        _rec("r2", "S1", _at(2, 10), _at(2, 10, 10, 30)),
    ])
    agg = Aggregator(store, IST)

    assert agg.monthly_study_minutes("S1", "2026-03") == 21


def test_other_members_are_not_counted():
    store = InMemoryAttendanceStore([
        _rec("r1", "S1", _at(2, 9), _at(2, 10)),
        _rec("r2", "S2", _at(2, 9), _at(2, 12)),
    ])
    agg = Aggregator(store, IST)

    assert agg.monthly_study_minutes("S1", "2026-03") == 60


def test_monthly_study_hours_is_fractional():
    store = InMemoryAttendanceStore([_rec("r1", "S1", _at(2, 9), _at(2, 11, 30))])

    assert Aggregator(store, IST).monthly_study_hours("S1", "2026-03") == 2.5


def test_malformed_records_are_excluded():
    good = _rec("ok", "S1", _at(2, 9), _at(2, 10))
    rows = [
        good,
        _rec("no-in", "S1", None, _at(2, 10)),
        _rec("backwards", "S1", _at(2, 12), _at(2, 11)),
        _rec("naive", "S1", datetime(2026, 3, 2, 9), datetime(2026, 3, 2, 10)),
    ]
    agg = Aggregator(FakeStore(rows), IST)

    assert agg.monthly_study_minutes("S1", "2026-03") == 60
    assert agg.daily_detail("2026-03-02", "S1") == [good]


def test_month_query_bounds_are_local():
    store = FakeStore([])
    Aggregator(store, IST).monthly_study_minutes("S1", "2026-12")

    student_id, start, end = store.last_args
    assert student_id == "S1"
    assert start == datetime(2026, 12, 1, tzinfo=IST)
    assert end == datetime(2027, 1, 1, tzinfo=IST)


@pytest.mark.parametrize("bad", ["2026-13", "March", ""])
def test_invalid_month_is_rejected(bad):
    with pytest.raises(ValidationError):
        Aggregator(FakeStore([]), IST).monthly_study_minutes("S1", bad)


def test_invalid_day_is_rejected():
    with pytest.raises(ValidationError):
        Aggregator(FakeStore([]), IST).daily_detail("02/03/2026")


def test_storage_failure_propagates():
    class Down:
        def find_by_date_range(self, student_id, start, end):
            raise StorageUnavailable("db down")

    with pytest.raises(StorageUnavailable):
        Aggregator(Down(), IST).daily_detail(date(2026, 3, 2))
