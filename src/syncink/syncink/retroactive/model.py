from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..attendance.model import Present, RequestedAttendance
from ..core.enums import AttendanceKind, RequestStatus


@dataclass(frozen=True)
class RetroactiveRequest:
    """Proposed correction of one work entry.

    ``pending`` moves once to ``approved`` or ``rejected``; terminal requests
    are never mutated again.
    """

    request_id: int
    entry_id: int
    user_id: int
    requested_by: int
    request_date: datetime
    reason: str
    original_attendance: AttendanceKind
    requested: RequestedAttendance
    status: RequestStatus = RequestStatus.PENDING
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    review_comments: Optional[str] = None

    @property
    def requested_attendance(self) -> AttendanceKind:
        return self.requested.kind

    @property
    def requested_seconds_done(self) -> Optional[int]:
        if isinstance(self.requested, Present):
            return self.requested.seconds_done
        return None

    @property
    def requested_remarks(self) -> Optional[str]:
        if isinstance(self.requested, Present):
            return self.requested.remarks
        return None

    @property
    def is_terminal(self) -> bool:
        return self.status != RequestStatus.PENDING
