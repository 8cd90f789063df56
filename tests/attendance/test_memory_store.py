from __future__ import annotations

from datetime import datetime

import pytest

from conftest import IST
from study_hall.attendance.aggregator import Aggregator
from study_hall.attendance.memory_store import InMemoryAttendanceStore
from study_hall.attendance.model import AttendanceRecord
from study_hall.core.exceptions import OpenSessionConflict


def _open(record_id, student_id="S1", hour=9):
    return AttendanceRecord(
        record_id=record_id,
        student_id=student_id,
        check_in_time=datetime(2026, 3, 2, hour, tzinfo=IST),
    )


def test_insert_refuses_second_open_record():
    store = InMemoryAttendanceStore()
    store.insert(_open("r1"))

    with pytest.raises(OpenSessionConflict):
        store.insert(_open("r2", hour=10))

    assert store.find_open_by_student("S1").record_id == "r1"
    assert store.get("r2") is None


def test_update_check_out_only_while_open():
    store = InMemoryAttendanceStore()
    store.insert(_open("r1"))
    out = datetime(2026, 3, 2, 11, tzinfo=IST)

    assert store.update_check_out("r1", out) is True
    assert store.update_check_out("r1", datetime(2026, 3, 2, 12, tzinfo=IST)) is False
    assert store.update_check_out("missing", out) is False
    assert store.get("r1").check_out_time == out
    assert store.find_open_by_student("S1") is None


def test_closed_session_frees_the_slot():
    store = InMemoryAttendanceStore()
    store.insert(_open("r1"))
    store.update_check_out("r1", datetime(2026, 3, 2, 11, tzinfo=IST))

    store.insert(_open("r2", hour=12))

    assert store.find_open_by_student("S1").record_id == "r2"


def test_date_range_is_half_open():
    store = InMemoryAttendanceStore([_open("r9", hour=9), _open("r10", "S2", hour=10), _open("r11", "S3", hour=11)])

    found = store.find_by_date_range(
        None,
        datetime(2026, 3, 2, 9, tzinfo=IST),
        datetime(2026, 3, 2, 11, tzinfo=IST),
    )

    assert [r.record_id for r in found] == ["r9", "r10"]
    assert store.find_by_date_range("S2", datetime(2026, 3, 2, tzinfo=IST), datetime(2026, 3, 3, tzinfo=IST))[0].record_id == "r10"


def test_date_range_skips_naive_check_in():
    good = AttendanceRecord("ok", "S1", datetime(2026, 3, 2, 9, tzinfo=IST), datetime(2026, 3, 2, 10, tzinfo=IST))
    naive = AttendanceRecord("naive", "S1", datetime(2026, 3, 2, 9), datetime(2026, 3, 2, 11))
    store = InMemoryAttendanceStore([good, naive])

    found = store.find_by_date_range("S1", datetime(2026, 3, 1, tzinfo=IST), datetime(2026, 4, 1, tzinfo=IST))

    assert found == [good]
    agg = Aggregator(store, IST)
    assert agg.monthly_study_minutes("S1", "2026-03") == 60
    assert agg.daily_detail("2026-03-02") == [good]
