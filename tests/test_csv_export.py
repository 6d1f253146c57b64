import csv
import io
from datetime import date, datetime, timezone

from src.syncink.syncink.attendance.model import AutoAbsent, Present, WorkEntry
from src.syncink.syncink.core.enums import Role
from src.syncink.syncink.reports.csv_export import CSV_HEADER, export_entries_csv, export_filename
from src.syncink.syncink.users.model import User

UTC = timezone.utc


def _entry(entry_id, user_id, attendance, *, is_late=False):
    ts = datetime(2026, 3, 10, 18, 30, tzinfo=UTC)
    return WorkEntry(
        entry_id=entry_id,
        user_id=user_id,
        work_date=date(2026, 3, 10),
        attendance=attendance,
        created_at=ts,
        submitted_at=ts,
        is_late=is_late,
    )


def test_export_rows():
    john = User(
        user_id=1,
        name="John Doe",
        email="john@syncink.com",
        password_hash="x",
        role=Role.EMPLOYEE,
        created_at=datetime(2026, 1, 1, tzinfo=UTC),
    )
    entries = [
        _entry(1, 1, Present(3600, "Reviews, docs"), is_late=True),
        _entry(2, 9, AutoAbsent()),
    ]

    rows = list(csv.reader(io.StringIO(export_entries_csv(entries, {1: john}))))

    assert tuple(rows[0]) == CSV_HEADER
    assert rows[1] == [
        "2026-03-10",
        "John Doe",
        "john@syncink.com",
        "Present",
        "3600",
        "Reviews, docs",
        "2026-03-10T18:30:00Z",
        "Yes",
    ]
    assert rows[2][1:5] == ["Unknown", "Unknown", "Auto-Absent", "0"]
    assert rows[2][-1] == "No"


def test_export_filename():
    assert export_filename(date(2026, 3, 10)) == "syncink-work-entries-2026-03-10.csv"
