from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Sequence

from ..common.datetime_utils import now_utc
from ..core.constants import MONTHLY_WINDOW_DAYS, WEEKLY_WINDOW_DAYS
from ..core.enums import AttendanceKind, Role
from ..core.exceptions import NotFoundError
from ..settings.service import SettingsService
from ..users.model import User
from ..users.repository import UserRepository
from .deadline import local_date
from .model import WorkEntry
from .repository import AttendanceRepository


@dataclass(frozen=True)
class UserStats:
    """Read-model: per-user aggregates, recomputed on demand."""

    user_id: int
    name: str
    email: str
    total_seconds: int
    present_days: int
    absent_days: int
    auto_absent_days: int
    last_activity: datetime
    weekly_average: int
    monthly_average: int
    on_time_submissions: int
    late_submissions: int


@dataclass(frozen=True)
class EntrySummary:
    """Read-model: totals over a date range (admin dashboard)."""

    start_date: date
    end_date: date
    entries: int
    total_seconds: int
    present: int
    absent: int
    auto_absent: int
    late: int


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def average_seconds(entries: Iterable[WorkEntry], *, start: date, end: date) -> int:
    """Mean seconds per Present entry dated within [start, end].

    Absent days do not lower the average; 0 when nothing qualifies.
    """
    seconds = [
        e.seconds_done or 0
        for e in entries
        if e.kind == AttendanceKind.PRESENT and start <= e.work_date <= end
    ]
    if not seconds:
        return 0
    return _round_half_up(sum(seconds) / len(seconds))


def build_user_stats(user: User, entries: Sequence[WorkEntry], *, today: date) -> UserStats:
    present = [e for e in entries if e.kind == AttendanceKind.PRESENT]
    return UserStats(
        user_id=user.user_id,
        name=user.name,
        email=user.email,
        total_seconds=sum(e.seconds_done or 0 for e in present),
        present_days=len(present),
        absent_days=sum(1 for e in entries if e.kind == AttendanceKind.ABSENT),
        auto_absent_days=sum(1 for e in entries if e.kind == AttendanceKind.AUTO_ABSENT),
        last_activity=user.last_activity,
        weekly_average=average_seconds(entries, start=today - timedelta(days=WEEKLY_WINDOW_DAYS), end=today),
        monthly_average=average_seconds(entries, start=today - timedelta(days=MONTHLY_WINDOW_DAYS), end=today),
        on_time_submissions=sum(1 for e in entries if not e.is_late and e.kind != AttendanceKind.AUTO_ABSENT),
        late_submissions=sum(1 for e in entries if e.is_late),
    )


class StatsService:
    def __init__(self, attendance: AttendanceRepository, users: UserRepository, settings: SettingsService):
        self._attendance = attendance
        self._users = users
        self._settings = settings

    def compute_user_stats(self, user_id: Optional[int] = None, *, now: Optional[datetime] = None) -> List[UserStats]:
        """Stats for one user, or for every employee when ``user_id`` is None."""
        today = local_date(now or now_utc(), self._settings.get_settings())

        if user_id is None:
            users = list(self._users.list_users(role=Role.EMPLOYEE))
        else:
            user = self._users.get_by_id(int(user_id))
            if not user:
                raise NotFoundError("User not found")
            users = [user]

        return [build_user_stats(u, self._attendance.list_for_user(u.user_id), today=today) for u in users]

    def summarize_entries(self, *, start_date: date, end_date: date) -> EntrySummary:
        entries = self._attendance.list_by_date_range(start_date=start_date, end_date=end_date)
        return EntrySummary(
            start_date=start_date,
            end_date=end_date,
            entries=len(entries),
            total_seconds=sum(e.seconds_done or 0 for e in entries),
            present=sum(1 for e in entries if e.kind == AttendanceKind.PRESENT),
            absent=sum(1 for e in entries if e.kind == AttendanceKind.ABSENT),
            auto_absent=sum(1 for e in entries if e.kind == AttendanceKind.AUTO_ABSENT),
            late=sum(1 for e in entries if e.is_late),
        )
