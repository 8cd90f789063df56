from __future__ import annotations

import logging
from datetime import datetime, timezone, tzinfo
from typing import Any, Optional, Sequence

from ..common.datetime_utils import from_utc_naive, to_utc_naive
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, storage_errors
from .model import AttendanceRecord
from .repository import AttendanceStore

logger = logging.getLogger(__name__)

_COLUMNS = "record_id, student_id, check_in_time, check_out_time, seat_number, shift"


def _coerce_instant(value: Any, tz: tzinfo) -> Optional[datetime]:
    """DATETIME columns hold naive UTC; return an aware instant in ``tz``."""

    if value is None:
        return None
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError:
            return None
    if not isinstance(value, datetime):
        return None
    if value.tzinfo is not None:
        return value.astimezone(tz)
    return from_utc_naive(value, tz)


class MySQLAttendanceStore(AttendanceStore):
    def __init__(self, conn_factory: DatabaseConnection, *, tz: tzinfo = timezone.utc):
        self._conn_factory = conn_factory
        self._tz = tz

    def _to_record(self, r: dict) -> Optional[AttendanceRecord]:
        check_in = _coerce_instant(r.get("check_in_time"), self._tz)
        if check_in is None:
            logger.warning("Skipping attendance row %s: unreadable check_in_time", r.get("record_id"))
            return None
        check_out = _coerce_instant(r.get("check_out_time"), self._tz)
        if r.get("check_out_time") is not None and check_out is None:
            logger.warning("Skipping attendance row %s: unreadable check_out_time", r.get("record_id"))
            return None
        return AttendanceRecord(
            record_id=str(r["record_id"]),
            student_id=str(r["student_id"]),
            check_in_time=check_in,
            check_out_time=check_out,
            seat_number=r.get("seat_number"),
            shift=r.get("shift"),
        )

    def insert(self, record: AttendanceRecord) -> None:
        conflict_id = record.student_id if record.is_open else None
        with storage_errors(conflict_student_id=conflict_id), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(record_id, student_id, check_in_time, check_out_time, seat_number, shift)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    record.record_id,
                    record.student_id,
                    to_utc_naive(record.check_in_time),
                    to_utc_naive(record.check_out_time) if record.check_out_time else None,
                    record.seat_number,
                    record.shift,
                ),
            )

    def update_check_out(self, record_id: str, check_out_time: datetime) -> bool:
        with storage_errors(), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s
                WHERE record_id=%s AND check_out_time IS NULL
                """,
                (to_utc_naive(check_out_time), record_id),
            )
            return cur.rowcount > 0

    def get(self, record_id: str) -> Optional[AttendanceRecord]:
        with storage_errors(), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE record_id=%s", (record_id,))
            r = fetchone(cur)
        return self._to_record(r) if r else None

    def find_open_by_student(self, student_id: str) -> Optional[AttendanceRecord]:
        with storage_errors(), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE student_id=%s AND check_out_time IS NULL
                ORDER BY check_in_time DESC
                LIMIT 1
                """,
                (student_id,),
            )
            r = fetchone(cur)
        return self._to_record(r) if r else None

    def find_by_date_range(
        self,
        student_id: Optional[str],
        start: datetime,
        end: datetime,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["check_in_time >= %s", "check_in_time < %s"]
        params: list[object] = [to_utc_naive(start), to_utc_naive(end)]
        if student_id is not None:
            clauses.append("student_id=%s")
            params.append(student_id)

        where = " AND ".join(clauses)

        with storage_errors(), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE {where}
                ORDER BY check_in_time ASC, record_id ASC
                """,
                tuple(params),
            )
            rows = fetchall(cur)

        records = (self._to_record(r) for r in rows)
        return [r for r in records if r is not None]
