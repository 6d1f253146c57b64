from __future__ import annotations

import csv
import io
from datetime import date
from typing import Iterable, Mapping

from ..attendance.model import WorkEntry
from ..common.datetime_utils import iso_utc
from ..users.model import User

CSV_HEADER = (
    "Date",
    "User",
    "Email",
    "Attendance",
    "Seconds Done",
    "Remarks",
    "Submitted At",
    "Late Submission",
)


def export_entries_csv(entries: Iterable[WorkEntry], users: Mapping[int, User]) -> str:
    """Render work entries as CSV text, one row per entry.

    Entries of users missing from ``users`` are labelled ``Unknown``.
    """
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for e in entries:
        user = users.get(e.user_id)
        writer.writerow(
            [
                e.work_date.isoformat(),
                user.name if user else "Unknown",
                user.email if user else "Unknown",
                e.kind.value,
                e.seconds_done or 0,
                e.remarks or "",
                iso_utc(e.submitted_at) or "",
                "Yes" if e.is_late else "No",
            ]
        )
    return buf.getvalue()


def export_filename(today: date) -> str:
    return f"syncink-work-entries-{today.isoformat()}.csv"
