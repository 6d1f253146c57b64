from __future__ import annotations

from flask import Flask, jsonify

from ..common.serializers import entry_json, request_json
from ..common.web import current_role, current_user_id, json_body, login_required, optional_int, roles_required
from ..container import Container
from ..core.enums import AttendanceKind
from ..core.exceptions import ValidationError
from ..core.permissions import CAN_REVIEW_REQUESTS, is_allowed


def register(app: Flask, container: Container) -> None:
    @app.route("/api/retroactive-requests", methods=["GET"], endpoint="list_retroactive_requests")
    @login_required
    def list_retroactive_requests():
        if is_allowed(CAN_REVIEW_REQUESTS, current_role()):
            pending = container.retroactive_service.list_pending()
            return jsonify({"success": True, "requests": [request_json(r) for r in pending]})

        user_id = current_user_id()
        mine = container.retroactive_service.list_for_user(user_id)
        eligible = [
            e
            for e in container.attendance_service.list_entries_for_user(user_id)
            if e.kind == AttendanceKind.AUTO_ABSENT
        ]
        return jsonify(
            {
                "success": True,
                "requests": [request_json(r) for r in mine],
                "eligible_entries": [entry_json(e) for e in eligible],
            }
        )

    @app.route("/api/retroactive-requests", methods=["POST"], endpoint="create_retroactive_request")
    @login_required
    def create_retroactive_request():
        data = json_body()
        entry_id = optional_int(data.get("entry_id"), "Entry id")
        if entry_id is None:
            raise ValidationError("Entry id is required")

        req = container.retroactive_service.create_request(
            current_role=current_role(),
            current_user_id=current_user_id(),
            entry_id=entry_id,
            reason=data.get("reason", ""),
            requested_attendance=data.get("requested_attendance", ""),
            requested_seconds_done=data.get("requested_seconds_done"),
            requested_remarks=data.get("requested_remarks"),
        )
        return jsonify({"success": True, "request": request_json(req)}), 201

    @app.route(
        "/api/retroactive-requests/<int:request_id>/review",
        methods=["POST"],
        endpoint="review_retroactive_request",
    )
    @roles_required(CAN_REVIEW_REQUESTS)
    def review_retroactive_request(request_id: int):
        data = json_body()
        req = container.retroactive_service.review_request(
            current_role=current_role(),
            reviewer_id=current_user_id(),
            request_id=request_id,
            decision=data.get("decision", ""),
            comments=data.get("comments", ""),
        )
        return jsonify({"success": True, "request": request_json(req)})
