"""Shared Flask helpers: session guards, request parsing and error mapping."""

from __future__ import annotations

import logging
from datetime import date
from functools import wraps
from typing import Mapping, Optional

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import (
    AlreadyReviewedError,
    AuthorizationError,
    DomainError,
    DuplicateEntryError,
    DuplicatePendingRequestError,
    NotFoundError,
    ValidationError,
)
from ..core.permissions import is_allowed
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)

# Most specific first.
ERROR_STATUS = (
    (DuplicateEntryError, 409),
    (DuplicatePendingRequestError, 409),
    (AlreadyReviewedError, 409),
    (NotFoundError, 404),
    (AuthorizationError, 403),
    (ValidationError, 400),
    (DomainError, 400),
)


def status_for(error: DomainError) -> int:
    for cls, status in ERROR_STATUS:
        if isinstance(error, cls):
            return status
    return 400


def fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("Please sign in to continue", 401)
        return view(*args, **kwargs)

    return wrapper


def roles_required(table: Mapping[Role, bool]):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return fail("Please sign in to continue", 401)
            if not is_allowed(table, current_role()):
                return fail("You do not have permission for this action", 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator


def current_role() -> Role:
    return Role(session["role"])


def current_user_id() -> int:
    return int(session["user_id"])


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def parse_date_arg(value: Optional[str], field_name: str, default: Optional[date] = None) -> date:
    if not value:
        if default is None:
            raise ValidationError(f"{field_name} is required")
        return default
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"{field_name} must use the YYYY-MM-DD format")


def optional_int(value, field_name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a whole number")


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        return fail(str(e), status_for(e))

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return fail(e.description or e.name, e.code or 500)
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        if bool(app.config.get("DEBUG", False)):
            return fail(f"Internal error: {e}", 500)
        return fail("Internal error", 500)
