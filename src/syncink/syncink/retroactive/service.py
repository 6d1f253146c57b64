from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from ..attendance.model import build_attendance
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import ensure_utc, now_utc
from ..common.validators import optional_text, require_non_negative
from ..core.constants import AUTO_APPROVAL_COMMENT
from ..core.enums import AttendanceKind, RequestStatus, Role
from ..core.exceptions import (
    AlreadyReviewedError,
    AuthorizationError,
    DuplicatePendingRequestError,
    EmptyReasonError,
    InvalidTargetError,
    NotFoundError,
    ValidationError,
)
from ..core.permissions import CAN_REQUEST_CORRECTION, CAN_REVIEW_REQUESTS, require
from ..settings.service import SettingsService
from .model import RetroactiveRequest
from .repository import RetroactiveRequestRepository

logger = logging.getLogger(__name__)

REQUESTABLE = {AttendanceKind.PRESENT, AttendanceKind.ABSENT}
DECISIONS = {RequestStatus.APPROVED, RequestStatus.REJECTED}


class RetroactiveRequestService:
    """Request/approval workflow for correcting auto-absent days."""

    def __init__(
        self,
        requests: RetroactiveRequestRepository,
        attendance: AttendanceRepository,
        settings: SettingsService,
    ):
        self._requests = requests
        self._attendance = attendance
        self._settings = settings

    def get_request(self, request_id: int) -> RetroactiveRequest:
        req = self._requests.get_by_id(int(request_id))
        if not req:
            raise NotFoundError("Retroactive request not found")
        return req

    def list_pending(self) -> Sequence[RetroactiveRequest]:
        return self._requests.list_requests(status=RequestStatus.PENDING)

    def list_for_user(self, user_id: int) -> Sequence[RetroactiveRequest]:
        return self._requests.list_requests(user_id=int(user_id))

    def create_request(
        self,
        *,
        current_role: Role,
        current_user_id: int,
        entry_id: int,
        reason: str,
        requested_attendance: AttendanceKind,
        requested_seconds_done: Optional[int] = None,
        requested_remarks: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> RetroactiveRequest:
        require(CAN_REQUEST_CORRECTION, current_role, "Only employees can request retroactive changes")

        settings = self._settings.get_settings()
        if not settings.allow_retroactive:
            raise ValidationError("Retroactive requests are disabled")

        entry = self._attendance.get_by_id(int(entry_id))
        if not entry:
            raise NotFoundError("Work entry not found")
        if entry.user_id != int(current_user_id):
            raise AuthorizationError("You can only request changes to your own entries")
        if entry.kind != AttendanceKind.AUTO_ABSENT:
            raise InvalidTargetError("Only auto-absent days can be corrected")
        if not reason or not reason.strip():
            raise EmptyReasonError("A reason is required")

        try:
            kind = AttendanceKind(requested_attendance)
        except ValueError:
            kind = None
        if kind not in REQUESTABLE:
            raise ValidationError("Requested attendance must be Present or Absent")

        if self._requests.get_pending_for_entry(entry.entry_id):
            raise DuplicatePendingRequestError("A request for this day is already pending")

        if kind == AttendanceKind.PRESENT:
            requested_seconds_done = require_non_negative(requested_seconds_done or 0, "Requested seconds")
            requested_remarks = optional_text(requested_remarks)
        requested = build_attendance(kind, requested_seconds_done, requested_remarks)

        now = ensure_utc(now or now_utc())
        request_id = self._requests.create_request(
            entry_id=entry.entry_id,
            user_id=entry.user_id,
            requested_by=int(current_user_id),
            request_date=now,
            reason=reason.strip(),
            original_attendance=entry.kind,
            requested=requested,
        )
        logger.info("Retroactive request %s created for entry %s", request_id, entry.entry_id)

        if not settings.retroactive_requires_approval:
            return self._decide(
                self.get_request(request_id),
                decision=RequestStatus.APPROVED,
                reviewer_id=None,
                comments=AUTO_APPROVAL_COMMENT,
                now=now,
            )
        return self.get_request(request_id)

    def review_request(
        self,
        *,
        current_role: Role,
        reviewer_id: int,
        request_id: int,
        decision: RequestStatus,
        comments: str = "",
        now: Optional[datetime] = None,
    ) -> RetroactiveRequest:
        require(CAN_REVIEW_REQUESTS, current_role, "Only managers and admins can review requests")

        req = self.get_request(request_id)
        if req.status != RequestStatus.PENDING:
            raise AlreadyReviewedError("This request has already been reviewed")

        try:
            decision = RequestStatus(decision)
        except ValueError:
            decision = None
        if decision not in DECISIONS:
            raise ValidationError("Decision must be approved or rejected")

        return self._decide(
            req,
            decision=decision,
            reviewer_id=int(reviewer_id),
            comments=comments,
            now=ensure_utc(now or now_utc()),
        )

    def approve_request(
        self,
        *,
        current_role: Role,
        reviewer_id: int,
        request_id: int,
        comments: str = "",
        now: Optional[datetime] = None,
    ) -> RetroactiveRequest:
        return self.review_request(
            current_role=current_role,
            reviewer_id=reviewer_id,
            request_id=request_id,
            decision=RequestStatus.APPROVED,
            comments=comments,
            now=now,
        )

    def reject_request(
        self,
        *,
        current_role: Role,
        reviewer_id: int,
        request_id: int,
        comments: str = "",
        now: Optional[datetime] = None,
    ) -> RetroactiveRequest:
        return self.review_request(
            current_role=current_role,
            reviewer_id=reviewer_id,
            request_id=request_id,
            decision=RequestStatus.REJECTED,
            comments=comments,
            now=now,
        )

    def _decide(
        self,
        req: RetroactiveRequest,
        *,
        decision: RequestStatus,
        reviewer_id: Optional[int],
        comments: Optional[str],
        now: datetime,
    ) -> RetroactiveRequest:
        # Both paths update only while the request is still pending, which
        # guards against double review.
        if decision == RequestStatus.APPROVED:
            self._requests.approve_and_apply(
                request_id=req.request_id,
                reviewed_by=reviewer_id,
                reviewed_at=now,
                review_comments=optional_text(comments),
                entry_id=req.entry_id,
                attendance=req.requested,
            )
        elif not self._requests.decide(
            request_id=req.request_id,
            status=decision,
            reviewed_by=reviewer_id,
            reviewed_at=now,
            review_comments=optional_text(comments),
        ):
            raise AlreadyReviewedError("This request has already been reviewed")

        logger.info("Retroactive request %s %s by %s", req.request_id, decision.value, reviewer_id)
        return self.get_request(req.request_id)
