from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..attendance.model import RequestedAttendance, build_attendance
from ..core.enums import AttendanceKind, RequestStatus
from ..attendance.mysql_attendance_repository import correct_entry
from ..core.exceptions import AlreadyReviewedError, DuplicatePendingRequestError, NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_db_datetime, to_db_datetime
from .model import RetroactiveRequest
from .repository import RetroactiveRequestRepository

_REQUEST_COLUMNS = """
    request_id, entry_id, user_id, requested_by, request_date, reason,
    original_attendance, requested_attendance, requested_seconds_done, requested_remarks,
    status, reviewed_by, reviewed_at, review_comments
"""


def _to_request(r: Dict[str, Any]) -> RetroactiveRequest:
    return RetroactiveRequest(
        request_id=int(r["request_id"]),
        entry_id=int(r["entry_id"]),
        user_id=int(r["user_id"]),
        requested_by=int(r["requested_by"]),
        request_date=from_db_datetime(r["request_date"]),
        reason=r["reason"],
        original_attendance=AttendanceKind(r["original_attendance"]),
        requested=build_attendance(
            AttendanceKind(r["requested_attendance"]),
            r.get("requested_seconds_done"),
            r.get("requested_remarks"),
        ),
        status=RequestStatus(r["status"]),
        reviewed_by=r.get("reviewed_by"),
        reviewed_at=from_db_datetime(r.get("reviewed_at")),
        review_comments=r.get("review_comments"),
    )


class MySQLRetroactiveRequestRepository(RetroactiveRequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_request(
        self,
        *,
        entry_id: int,
        user_id: int,
        requested_by: int,
        request_date: datetime,
        reason: str,
        original_attendance: AttendanceKind,
        requested: RequestedAttendance,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO retroactive_requests(
                        entry_id, user_id, requested_by, request_date, reason,
                        original_attendance, requested_attendance,
                        requested_seconds_done, requested_remarks, status
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(entry_id),
                        int(user_id),
                        int(requested_by),
                        to_db_datetime(request_date),
                        reason,
                        AttendanceKind(original_attendance).value,
                        requested.kind.value,
                        getattr(requested, "seconds_done", None),
                        getattr(requested, "remarks", None),
                        RequestStatus.PENDING.value,
                    ),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            if e.errno == errorcode.ER_DUP_ENTRY:
                raise DuplicatePendingRequestError("A request for this day is already pending") from e
            raise

    def get_by_id(self, request_id: int) -> Optional[RetroactiveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_REQUEST_COLUMNS} FROM retroactive_requests WHERE request_id=%s",
                (int(request_id),),
            )
            r = fetchone(cur)
            return _to_request(r) if r else None

    def get_pending_for_entry(self, entry_id: int) -> Optional[RetroactiveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_REQUEST_COLUMNS}
                FROM retroactive_requests
                WHERE entry_id=%s AND status=%s
                LIMIT 1
                """,
                (int(entry_id), RequestStatus.PENDING.value),
            )
            r = fetchone(cur)
            return _to_request(r) if r else None

    def list_requests(
        self,
        *,
        status: Optional[RequestStatus] = None,
        user_id: Optional[int] = None,
    ) -> Sequence[RetroactiveRequest]:
        where = []
        params: list = []
        if status is not None:
            where.append("status=%s")
            params.append(RequestStatus(status).value)
        if user_id is not None:
            where.append("user_id=%s")
            params.append(int(user_id))

        sql = f"SELECT {_REQUEST_COLUMNS} FROM retroactive_requests"
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += " ORDER BY request_date DESC, request_id DESC"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_request(r) for r in fetchall(cur)]

    def decide(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        reviewed_by: Optional[int],
        reviewed_at: datetime,
        review_comments: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE retroactive_requests
                SET status=%s, reviewed_by=%s, reviewed_at=%s, review_comments=%s
                WHERE request_id=%s AND status=%s
                """,
                (
                    RequestStatus(status).value,
                    reviewed_by,
                    to_db_datetime(reviewed_at),
                    review_comments,
                    int(request_id),
                    RequestStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def approve_and_apply(
        self,
        *,
        request_id: int,
        reviewed_by: Optional[int],
        reviewed_at: datetime,
        review_comments: Optional[str],
        entry_id: int,
        attendance: RequestedAttendance,
    ) -> None:
        # One connection, one commit; raising inside db_cursor rolls both updates back.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE retroactive_requests
                SET status=%s, reviewed_by=%s, reviewed_at=%s, review_comments=%s
                WHERE request_id=%s AND status=%s
                """,
                (
                    RequestStatus.APPROVED.value,
                    reviewed_by,
                    to_db_datetime(reviewed_at),
                    review_comments,
                    int(request_id),
                    RequestStatus.PENDING.value,
                ),
            )
            if cur.rowcount == 0:
                raise AlreadyReviewedError("This request has already been reviewed")
            if not correct_entry(cur, entry_id=entry_id, attendance=attendance, retroactive_request_id=request_id):
                raise NotFoundError("Work entry not found")

    def delete_for_user(self, user_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM retroactive_requests WHERE user_id=%s OR requested_by=%s",
                (int(user_id), int(user_id)),
            )
            return int(cur.rowcount)

    def clear_reviewer(self, user_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE retroactive_requests SET reviewed_by=NULL WHERE reviewed_by=%s", (int(user_id),))
            return int(cur.rowcount)
