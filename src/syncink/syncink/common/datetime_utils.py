from __future__ import annotations

import re
from datetime import date, datetime, time, timezone
from typing import Optional

UTC = timezone.utc

_HHMM = re.compile(r"^\d{2}:\d{2}$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_hhmm(value: str) -> time:
    """Parse a zero-padded 24-hour HH:MM string into time."""
    value = value.strip()
    if not _HHMM.match(value):
        raise ValueError(f"Expected HH:MM, got {value!r}")
    return datetime.strptime(value, "%H:%M").time()


def format_hhmm(value: time) -> str:
    return value.strftime("%H:%M")


def now_utc() -> datetime:
    """Current time in UTC (timezone-aware).

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now(UTC)


def ensure_utc(dt: datetime) -> datetime:
    """Naive datetimes are treated as UTC; aware ones are converted."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def iso_utc(dt: Optional[datetime]) -> Optional[str]:
    """ISO-8601 with a trailing Z."""
    if dt is None:
        return None
    s = ensure_utc(dt).isoformat()
    if s.endswith("+00:00"):
        s = s[:-6] + "Z"
    return s
