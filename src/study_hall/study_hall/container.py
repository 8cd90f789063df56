from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from typing import Optional

from .attendance.aggregator import Aggregator
from .attendance.gateway import CheckInGateway
from .attendance.memory_store import InMemoryAttendanceStore
from .attendance.mysql_attendance_repository import MySQLAttendanceStore
from .attendance.repository import AttendanceStore
from .attendance.tracker import SessionTracker
from .common.clock import Clock, SystemClock
from .core.constants import DEFAULT_CHECKIN_TOKEN, DEFAULT_TIMEZONE
from .database.connection import DatabaseConnection, DBConfig


@dataclass(frozen=True)
class Container:
    clock: Clock
    checkin_token: str

    attendance_store: AttendanceStore

    session_tracker: SessionTracker
    checkin_gateway: CheckInGateway
    aggregator: Aggregator


def build_store(backend: str, *, db_config: Optional[dict], tz: tzinfo) -> AttendanceStore:
    backend = (backend or "memory").lower()
    if backend == "memory":
        return InMemoryAttendanceStore()
    if backend == "mysql":
        if not db_config:
            raise ValueError("STORAGE_BACKEND=mysql requires DB_CONFIG")
        conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
        return MySQLAttendanceStore(conn, tz=tz)
    raise ValueError(f"Unknown storage backend: {backend!r}")


def build_container(
    *,
    storage_backend: str = "memory",
    db_config: Optional[dict] = None,
    checkin_token: str = DEFAULT_CHECKIN_TOKEN,
    timezone: str | tzinfo = DEFAULT_TIMEZONE,
    clock: Optional[Clock] = None,
    store: Optional[AttendanceStore] = None,
) -> Container:
    clock = clock or SystemClock(timezone)
    tz = clock.tz

    attendance_store = store or build_store(storage_backend, db_config=db_config, tz=tz)

    session_tracker = SessionTracker(attendance_store, clock)
    checkin_gateway = CheckInGateway(session_tracker, checkin_token)
    aggregator = Aggregator(attendance_store, tz)

    return Container(
        clock=clock,
        checkin_token=checkin_token,
        attendance_store=attendance_store,
        session_tracker=session_tracker,
        checkin_gateway=checkin_gateway,
        aggregator=aggregator,
    )
