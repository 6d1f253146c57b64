from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import Attendance, WorkEntry


class AttendanceRepository(Protocol):
    """Entry ledger. Entries are only mutated by approved retroactive requests."""

    def get_by_id(self, entry_id: int) -> Optional[WorkEntry]:
        raise NotImplementedError

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[WorkEntry]:
        raise NotImplementedError

    def list_for_user(self, user_id: int) -> Sequence[WorkEntry]:
        raise NotImplementedError

    def list_by_date_range(
        self,
        *,
        start_date: date,
        end_date: date,
        user_id: Optional[int] = None,
    ) -> Sequence[WorkEntry]:
        """Entries dated within [start_date, end_date], inclusive."""

        raise NotImplementedError

    def list_all(self) -> Sequence[WorkEntry]:
        raise NotImplementedError

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
        raise NotImplementedError

    def delete_for_user(self, user_id: int) -> int:
        raise NotImplementedError
