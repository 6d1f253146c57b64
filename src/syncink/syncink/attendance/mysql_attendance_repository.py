from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..core.enums import AttendanceKind
from ..core.exceptions import DuplicateEntryError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_db_datetime, to_db_datetime
from .model import Attendance, WorkEntry, build_attendance
from .repository import AttendanceRepository

_ENTRY_COLUMNS = """
    entry_id, user_id, work_date, attendance, seconds_done, remarks,
    created_at, submitted_at, is_late, retroactive_request_id
"""


def _to_entry(row: Dict[str, Any]) -> WorkEntry:
    return WorkEntry(
        entry_id=int(row["entry_id"]),
        user_id=int(row["user_id"]),
        work_date=row["work_date"],
        attendance=build_attendance(AttendanceKind(row["attendance"]), row.get("seconds_done"), row.get("remarks")),
        created_at=from_db_datetime(row["created_at"]),
        submitted_at=from_db_datetime(row["submitted_at"]),
        is_late=bool(row.get("is_late", False)),
        retroactive_request_id=row.get("retroactive_request_id"),
    )


def _columns_for(attendance: Attendance) -> tuple:
    """(attendance, seconds_done, remarks) column values for a variant."""
    return (
        attendance.kind.value,
        getattr(attendance, "seconds_done", None),
        getattr(attendance, "remarks", None),
    )


def correct_entry(cur, *, entry_id: int, attendance: Attendance, retroactive_request_id: int) -> bool:
    """Overwrite the attendance of an entry on an open cursor.

    Runs inside the caller's transaction so approval and correction commit together.
    """
    kind, seconds_done, remarks = _columns_for(attendance)
    cur.execute(
        """
        UPDATE work_entries
        SET attendance=%s, seconds_done=%s, remarks=%s, retroactive_request_id=%s
        WHERE entry_id=%s
        """,
        (kind, seconds_done, remarks, int(retroactive_request_id), int(entry_id)),
    )
    return cur.rowcount > 0


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, entry_id: int) -> Optional[WorkEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_ENTRY_COLUMNS} FROM work_entries WHERE entry_id=%s", (int(entry_id),))
            row = fetchone(cur)
            return _to_entry(row) if row else None

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[WorkEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_ENTRY_COLUMNS} FROM work_entries WHERE user_id=%s AND work_date=%s",
                (int(user_id), work_date),
            )
            row = fetchone(cur)
            return _to_entry(row) if row else None

    def list_for_user(self, user_id: int) -> Sequence[WorkEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_ENTRY_COLUMNS} FROM work_entries WHERE user_id=%s ORDER BY work_date DESC",
                (int(user_id),),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def list_by_date_range(
        self,
        *,
        start_date: date,
        end_date: date,
        user_id: Optional[int] = None,
    ) -> Sequence[WorkEntry]:
        where = ["work_date BETWEEN %s AND %s"]
        params: list = [start_date, end_date]
        if user_id is not None:
            where.append("user_id=%s")
            params.append(int(user_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_ENTRY_COLUMNS}
                FROM work_entries
                WHERE {' AND '.join(where)}
                ORDER BY work_date DESC, user_id
                """,
                tuple(params),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[WorkEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_ENTRY_COLUMNS} FROM work_entries ORDER BY work_date DESC, user_id")
            return [_to_entry(r) for r in fetchall(cur)]

    def create_entry(
        self,
        *,
        user_id: int,
        work_date: date,
        attendance: Attendance,
        created_at: datetime,
        submitted_at: datetime,
        is_late: bool,
    ) -> int:
        kind, seconds_done, remarks = _columns_for(attendance)
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO work_entries(
                        user_id, work_date, attendance, seconds_done, remarks,
                        created_at, submitted_at, is_late
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(user_id),
                        work_date,
                        kind,
                        seconds_done,
                        remarks,
                        to_db_datetime(created_at),
                        to_db_datetime(submitted_at),
                        int(bool(is_late)),
                    ),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            if e.errno == errorcode.ER_DUP_ENTRY:
                raise DuplicateEntryError("An entry for this date has already been submitted") from e
            raise

    def delete_for_user(self, user_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM work_entries WHERE user_id=%s", (int(user_id),))
            return int(cur.rowcount)
