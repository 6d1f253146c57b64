from __future__ import annotations

import logging
from datetime import date, datetime
from typing import List, Optional, Sequence

from ..common.datetime_utils import ensure_utc, now_utc
from ..common.validators import optional_text, require_non_negative
from ..core.enums import AttendanceKind, Role
from ..core.exceptions import DuplicateEntryError, NotFoundError
from ..settings.service import SettingsService
from ..users.repository import UserRepository
from .deadline import deadline_for, is_submission_on_time, local_date
from .model import AutoAbsent, WorkEntry, build_attendance
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Use cases around the entry ledger: submissions and the auto-absent sweep."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        settings: SettingsService,
    ):
        self._attendance = attendance
        self._users = users
        self._settings = settings

    def today(self, *, now: Optional[datetime] = None) -> date:
        """Current calendar date in the configured time zone."""
        return local_date(now or now_utc(), self._settings.get_settings())

    def has_entry_for_date(self, user_id: int, work_date: date) -> bool:
        return self._attendance.get_for_user_and_date(int(user_id), work_date) is not None

    def get_entry(self, entry_id: int) -> WorkEntry:
        entry = self._attendance.get_by_id(int(entry_id))
        if not entry:
            raise NotFoundError("Work entry not found")
        return entry

    def list_entries_for_user(self, user_id: int) -> Sequence[WorkEntry]:
        return self._attendance.list_for_user(int(user_id))

    def list_entries(self, *, start_date: date, end_date: date, user_id: Optional[int] = None) -> Sequence[WorkEntry]:
        return self._attendance.list_by_date_range(
            start_date=start_date,
            end_date=end_date,
            user_id=int(user_id) if user_id is not None else None,
        )

    def submit_entry(
        self,
        *,
        user_id: int,
        work_date: date,
        attendance: AttendanceKind,
        seconds_done: Optional[int] = None,
        remarks: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> WorkEntry:
        now = ensure_utc(now or now_utc())
        kind = AttendanceKind(attendance)
        settings = self._settings.get_settings()

        if not self._users.get_by_id(int(user_id)):
            raise NotFoundError("User not found")
        if self.has_entry_for_date(user_id, work_date):
            raise DuplicateEntryError("An entry for this date has already been submitted")

        if kind == AttendanceKind.PRESENT:
            seconds_done = require_non_negative(seconds_done or 0, "Seconds done")
            remarks = optional_text(remarks)
        value = build_attendance(kind, seconds_done, remarks)
        is_late = kind != AttendanceKind.AUTO_ABSENT and not is_submission_on_time(now, settings)

        entry_id = self._attendance.create_entry(
            user_id=int(user_id),
            work_date=work_date,
            attendance=value,
            created_at=now,
            submitted_at=now,
            is_late=is_late,
        )
        logger.info("User %s submitted %s for %s (late=%s)", user_id, kind.value, work_date, is_late)
        return self.get_entry(entry_id)

    def run_auto_absent_sweep(self, *, as_of: Optional[datetime] = None) -> List[WorkEntry]:
        """Mark every employee without an entry for today as Auto-Absent.

        Does nothing until the deadline of the current day has passed. Safe to
        call repeatedly: only missing entries are created.
        """
        as_of = ensure_utc(as_of or now_utc())
        settings = self._settings.get_settings()
        if not settings.auto_absent_after_deadline:
            return []

        today = local_date(as_of, settings)
        if as_of <= deadline_for(today, settings):
            return []

        created: List[WorkEntry] = []
        for user in self._users.list_users(role=Role.EMPLOYEE):
            if self.has_entry_for_date(user.user_id, today):
                continue
            try:
                entry_id = self._attendance.create_entry(
                    user_id=user.user_id,
                    work_date=today,
                    attendance=AutoAbsent(),
                    created_at=as_of,
                    submitted_at=as_of,
                    is_late=False,
                )
            except DuplicateEntryError:
                # Submitted between the check and the insert.
                continue
            created.append(self.get_entry(entry_id))

        if created:
            logger.info("Auto-absent sweep for %s marked %s employees", today, len(created))
        return created
