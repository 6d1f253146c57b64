"""Deadline arithmetic.

All time-of-day comparisons go through these helpers so they share the
configured deadline and time zone.
"""

from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

from ..common.datetime_utils import ensure_utc
from ..settings.model import AttendanceSettings


def zone_of(settings: AttendanceSettings) -> ZoneInfo:
    return ZoneInfo(settings.time_zone)


def local_date(timestamp: datetime, settings: AttendanceSettings) -> date:
    """Calendar date of ``timestamp`` in the settings time zone."""
    return ensure_utc(timestamp).astimezone(zone_of(settings)).date()


def deadline_for(day: date, settings: AttendanceSettings) -> datetime:
    """Deadline instant for a calendar day."""
    return datetime.combine(day, settings.daily_deadline, tzinfo=zone_of(settings))


def is_submission_on_time(timestamp: datetime, settings: AttendanceSettings) -> bool:
    timestamp = ensure_utc(timestamp)
    return timestamp <= deadline_for(local_date(timestamp, settings), settings)
