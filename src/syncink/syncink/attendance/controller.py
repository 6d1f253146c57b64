from __future__ import annotations

from datetime import timedelta

from flask import Flask, Response, jsonify, request

from ..common.serializers import entry_json, stats_json, summary_json
from ..common.web import (
    current_role,
    current_user_id,
    json_body,
    login_required,
    optional_int,
    parse_date_arg,
    roles_required,
)
from ..container import Container
from ..core.constants import WEEKLY_WINDOW_DAYS
from ..core.enums import AttendanceKind
from ..core.exceptions import ValidationError
from ..core.permissions import CAN_VIEW_TEAM, is_allowed
from ..reports.csv_export import export_entries_csv, export_filename

USER_CHOICES = {AttendanceKind.PRESENT, AttendanceKind.ABSENT}


def register(app: Flask, container: Container) -> None:
    def _date_range():
        today = container.attendance_service.today()
        end = parse_date_arg(request.args.get("end"), "End date", today)
        start = parse_date_arg(request.args.get("start"), "Start date", end - timedelta(days=WEEKLY_WINDOW_DAYS))
        if end < start:
            raise ValidationError("End date must be on or after the start date")
        return start, end

    @app.route("/api/entries", methods=["POST"], endpoint="submit_entry")
    @login_required
    def submit_entry():
        data = json_body()
        try:
            kind = AttendanceKind(data.get("attendance", ""))
        except ValueError:
            kind = None
        if kind not in USER_CHOICES:
            raise ValidationError("Attendance must be Present or Absent")

        entry = container.attendance_service.submit_entry(
            user_id=current_user_id(),
            work_date=container.attendance_service.today(),
            attendance=kind,
            seconds_done=data.get("seconds_done"),
            remarks=data.get("remarks"),
        )
        return jsonify({"success": True, "entry": entry_json(entry)}), 201

    @app.route("/api/entries/today", methods=["GET"], endpoint="today_status")
    @login_required
    def today_status():
        today = container.attendance_service.today()
        submitted = container.attendance_service.has_entry_for_date(current_user_id(), today)
        return jsonify({"success": True, "date": today.isoformat(), "submitted": submitted})

    @app.route("/api/entries", methods=["GET"], endpoint="list_entries")
    @login_required
    def list_entries():
        start, end = _date_range()
        if is_allowed(CAN_VIEW_TEAM, current_role()):
            user_id = optional_int(request.args.get("user_id"), "User id")
        else:
            user_id = current_user_id()

        entries = container.attendance_service.list_entries(start_date=start, end_date=end, user_id=user_id)
        return jsonify({"success": True, "entries": [entry_json(e) for e in entries]})

    @app.route("/api/attendance/sweep", methods=["POST"], endpoint="run_sweep")
    @roles_required(CAN_VIEW_TEAM)
    def run_sweep():
        created = container.attendance_service.run_auto_absent_sweep()
        return jsonify({"success": True, "created": [entry_json(e) for e in created]})

    @app.route("/api/stats", methods=["GET"], endpoint="user_stats")
    @login_required
    def user_stats():
        if is_allowed(CAN_VIEW_TEAM, current_role()):
            user_id = optional_int(request.args.get("user_id"), "User id")
        else:
            user_id = current_user_id()

        stats = container.stats_service.compute_user_stats(user_id)
        return jsonify({"success": True, "stats": [stats_json(s) for s in stats]})

    @app.route("/api/admin/summary", methods=["GET"], endpoint="entry_summary")
    @roles_required(CAN_VIEW_TEAM)
    def entry_summary():
        start, end = _date_range()
        summary = container.stats_service.summarize_entries(start_date=start, end_date=end)
        return jsonify({"success": True, "summary": summary_json(summary)})

    @app.route("/api/admin/entries/export.csv", methods=["GET"], endpoint="export_entries")
    @roles_required(CAN_VIEW_TEAM)
    def export_entries():
        start, end = _date_range()
        entries = container.attendance_service.list_entries(start_date=start, end_date=end)
        users = {u.user_id: u for u in container.user_service.list_users()}

        body = export_entries_csv(entries, users)
        filename = export_filename(container.attendance_service.today())
        return Response(
            body,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
