"""JSON shapes returned by the API controllers."""

from __future__ import annotations

from ..attendance.model import WorkEntry
from ..attendance.stats import EntrySummary, UserStats
from ..common.datetime_utils import format_hhmm, iso_utc
from ..retroactive.model import RetroactiveRequest
from ..settings.model import AttendanceSettings
from ..users.model import User


def user_json(u: User) -> dict:
    return {
        "id": u.user_id,
        "name": u.name,
        "email": u.email,
        "role": u.role.value,
        "created_at": iso_utc(u.created_at),
        "last_login": iso_utc(u.last_login),
    }


def entry_json(e: WorkEntry) -> dict:
    data = {
        "id": e.entry_id,
        "user_id": e.user_id,
        "date": e.work_date.isoformat(),
        "attendance": e.kind.value,
        "created_at": iso_utc(e.created_at),
        "submitted_at": iso_utc(e.submitted_at),
        "is_late": e.is_late,
        "retroactive_request_id": e.retroactive_request_id,
    }
    if e.seconds_done is not None:
        data["seconds_done"] = e.seconds_done
        data["remarks"] = e.remarks
    return data


def request_json(r: RetroactiveRequest) -> dict:
    data = {
        "id": r.request_id,
        "entry_id": r.entry_id,
        "user_id": r.user_id,
        "requested_by": r.requested_by,
        "request_date": iso_utc(r.request_date),
        "reason": r.reason,
        "original_attendance": r.original_attendance.value,
        "requested_attendance": r.requested_attendance.value,
        "status": r.status.value,
        "reviewed_by": r.reviewed_by,
        "reviewed_at": iso_utc(r.reviewed_at),
        "review_comments": r.review_comments,
    }
    if r.requested_seconds_done is not None:
        data["requested_seconds_done"] = r.requested_seconds_done
        data["requested_remarks"] = r.requested_remarks
    return data


def settings_json(s: AttendanceSettings) -> dict:
    return {
        "daily_deadline": format_hhmm(s.daily_deadline),
        "time_zone": s.time_zone,
        "allow_retroactive": s.allow_retroactive,
        "retroactive_requires_approval": s.retroactive_requires_approval,
        "auto_absent_after_deadline": s.auto_absent_after_deadline,
    }


def stats_json(s: UserStats) -> dict:
    return {
        "id": s.user_id,
        "name": s.name,
        "email": s.email,
        "total_seconds": s.total_seconds,
        "present_days": s.present_days,
        "absent_days": s.absent_days,
        "auto_absent_days": s.auto_absent_days,
        "last_activity": iso_utc(s.last_activity),
        "weekly_average": s.weekly_average,
        "monthly_average": s.monthly_average,
        "on_time_submissions": s.on_time_submissions,
        "late_submissions": s.late_submissions,
    }


def summary_json(s: EntrySummary) -> dict:
    return {
        "start_date": s.start_date.isoformat(),
        "end_date": s.end_date.isoformat(),
        "entries": s.entries,
        "total_seconds": s.total_seconds,
        "present": s.present,
        "absent": s.absent,
        "auto_absent": s.auto_absent,
        "late": s.late,
    }
