from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import ClassVar, Optional, Union

from ..core.enums import AttendanceKind
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class Present:
    """Attended day; the only variant carrying work output."""

    seconds_done: int = 0
    remarks: Optional[str] = None

    kind: ClassVar[AttendanceKind] = AttendanceKind.PRESENT


@dataclass(frozen=True)
class Absent:
    """Day reported as absent by the user."""

    kind: ClassVar[AttendanceKind] = AttendanceKind.ABSENT


@dataclass(frozen=True)
class AutoAbsent:
    """Day marked absent by the sweep after the deadline passed."""

    kind: ClassVar[AttendanceKind] = AttendanceKind.AUTO_ABSENT


Attendance = Union[Present, Absent, AutoAbsent]
RequestedAttendance = Union[Present, Absent]


def build_attendance(
    kind: AttendanceKind,
    seconds_done: Optional[int] = None,
    remarks: Optional[str] = None,
) -> Attendance:
    """Build the variant for ``kind``; seconds/remarks are dropped unless Present."""
    kind = AttendanceKind(kind)
    if kind == AttendanceKind.PRESENT:
        return Present(seconds_done=int(seconds_done or 0), remarks=remarks or None)
    if kind == AttendanceKind.ABSENT:
        return Absent()
    if kind == AttendanceKind.AUTO_ABSENT:
        return AutoAbsent()
    raise ValidationError(f"Unsupported attendance: {kind}")


@dataclass(frozen=True)
class WorkEntry:
    """Domain entity: one attendance record per user per calendar date."""

    entry_id: int
    user_id: int
    work_date: date
    attendance: Attendance
    created_at: datetime
    submitted_at: datetime
    is_late: bool = False
    retroactive_request_id: Optional[int] = None

    @property
    def kind(self) -> AttendanceKind:
        return self.attendance.kind

    @property
    def seconds_done(self) -> Optional[int]:
        if isinstance(self.attendance, Present):
            return self.attendance.seconds_done
        return None

    @property
    def remarks(self) -> Optional[str]:
        if isinstance(self.attendance, Present):
            return self.attendance.remarks
        return None
