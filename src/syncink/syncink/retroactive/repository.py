from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..attendance.model import RequestedAttendance
from ..core.enums import AttendanceKind, RequestStatus
from .model import RetroactiveRequest


class RetroactiveRequestRepository(Protocol):
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
        raise NotImplementedError

    def get_by_id(self, request_id: int) -> Optional[RetroactiveRequest]:
        raise NotImplementedError

    def get_pending_for_entry(self, entry_id: int) -> Optional[RetroactiveRequest]:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        status: Optional[RequestStatus] = None,
        user_id: Optional[int] = None,
    ) -> Sequence[RetroactiveRequest]:
        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        reviewed_by: Optional[int],
        reviewed_at: datetime,
        review_comments: Optional[str] = None,
    ) -> bool:
        """Move a pending request to a terminal status.

        Returns False when the request is missing or no longer pending.
        """

        raise NotImplementedError

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
        """Approve a pending request and overwrite its entry as one unit.

        Raises ``AlreadyReviewedError`` when the request is no longer pending and
        ``NotFoundError`` when the entry is gone; nothing is written in either case.
        """

        raise NotImplementedError

    def delete_for_user(self, user_id: int) -> int:
        """Remove requests owned or submitted by the user."""

        raise NotImplementedError

    def clear_reviewer(self, user_id: int) -> int:
        raise NotImplementedError
