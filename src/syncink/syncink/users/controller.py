from __future__ import annotations

import logging

from flask import Flask, jsonify, request, session

from ..common.serializers import user_json
from ..common.web import current_role, fail, json_body, login_required, roles_required
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..core.permissions import CAN_MANAGE_USERS

logger = logging.getLogger(__name__)


def _parse_role(value, default=None):
    if value is None:
        return default
    try:
        return Role(value)
    except ValueError:
        raise ValidationError("Unknown role")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        user = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))
        if not user:
            return fail("Invalid email or password", 401)

        session.clear()
        session.permanent = bool(data.get("remember_me"))
        session["user_id"] = user.user_id
        session["name"] = user.name
        session["role"] = user.role.value

        # Session start is one of the points where the host runs the sweep.
        try:
            container.attendance_service.run_auto_absent_sweep()
        except Exception:
            # Do not block login if the sweep fails; the next trigger retries.
            logger.exception("Auto-absent sweep failed at login for user %s", user.user_id)

        return jsonify({"success": True, "user": user_json(user)})

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        user = container.user_service.get_user(int(session["user_id"]))
        return jsonify({"success": True, "user": user_json(user)})

    @app.route("/api/users", methods=["GET"], endpoint="list_users")
    @roles_required(CAN_MANAGE_USERS)
    def list_users():
        role = _parse_role(request.args.get("role"))
        users = container.user_service.list_users(role=role)
        return jsonify({"success": True, "users": [user_json(u) for u in users]})

    @app.route("/api/users", methods=["POST"], endpoint="create_user")
    @roles_required(CAN_MANAGE_USERS)
    def create_user():
        data = json_body()
        user = container.user_service.create_user(
            current_role=current_role(),
            name=data.get("name", ""),
            email=data.get("email", ""),
            password=data.get("password", ""),
            role=_parse_role(data.get("role"), Role.EMPLOYEE),
        )
        return jsonify({"success": True, "user": user_json(user)}), 201

    @app.route("/api/users/<int:user_id>", methods=["GET"], endpoint="get_user")
    @roles_required(CAN_MANAGE_USERS)
    def get_user(user_id: int):
        return jsonify({"success": True, "user": user_json(container.user_service.get_user(user_id))})

    @app.route("/api/users/<int:user_id>", methods=["PUT"], endpoint="update_user")
    @roles_required(CAN_MANAGE_USERS)
    def update_user(user_id: int):
        data = json_body()
        user = container.user_service.update_user(
            current_role=current_role(),
            user_id=user_id,
            name=data.get("name"),
            email=data.get("email"),
            password=data.get("password"),
            role=_parse_role(data.get("role")),
        )
        return jsonify({"success": True, "user": user_json(user)})

    @app.route("/api/users/<int:user_id>", methods=["DELETE"], endpoint="delete_user")
    @roles_required(CAN_MANAGE_USERS)
    def delete_user(user_id: int):
        container.user_service.delete_user(current_role=current_role(), user_id=user_id)
        return jsonify({"success": True})
