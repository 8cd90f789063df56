from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import OpenSessionConflict, StorageUnavailable
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        raise StorageUnavailable(f"Cannot connect to database: {e}") from e
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


@contextmanager
def storage_errors(*, conflict_student_id: Optional[str] = None) -> Iterator[None]:
    """Translate connector errors into domain errors.

    A duplicate-key error becomes OpenSessionConflict when the caller is
    inserting an open session; everything else is StorageUnavailable.
    """

    try:
        yield
    except mysql.connector.IntegrityError as e:
        if conflict_student_id is not None and e.errno == errorcode.ER_DUP_ENTRY:
            raise OpenSessionConflict(conflict_student_id) from e
        raise StorageUnavailable(f"Database rejected write: {e}") from e
    except mysql.connector.Error as e:
        raise StorageUnavailable(f"Database error: {e}") from e


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])
