from __future__ import annotations

from flask import Flask, jsonify

from ..common.serializers import settings_json
from ..common.web import current_role, json_body, login_required, roles_required
from ..container import Container
from ..core.permissions import CAN_MANAGE_SETTINGS


def register(app: Flask, container: Container) -> None:
    @app.route("/api/settings", methods=["GET"], endpoint="get_settings")
    @login_required
    def get_settings():
        return jsonify({"success": True, "settings": settings_json(container.settings_service.get_settings())})

    @app.route("/api/settings", methods=["PUT"], endpoint="update_settings")
    @roles_required(CAN_MANAGE_SETTINGS)
    def update_settings():
        data = json_body()
        updated = container.settings_service.update_settings(
            current_role=current_role(),
            daily_deadline=data.get("daily_deadline"),
            time_zone=data.get("time_zone"),
            allow_retroactive=data.get("allow_retroactive"),
            retroactive_requires_approval=data.get("retroactive_requires_approval"),
            auto_absent_after_deadline=data.get("auto_absent_after_deadline"),
        )
        return jsonify({"success": True, "settings": settings_json(updated)})
