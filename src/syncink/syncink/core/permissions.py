"""Role based permission tables.

Every table lists each ``Role`` member so a new role cannot be added without
deciding its permissions (``tests/test_permissions.py`` checks coverage).
"""

from __future__ import annotations

from typing import Mapping

from .enums import Role
from .exceptions import AuthorizationError

CAN_REVIEW_REQUESTS: Mapping[Role, bool] = {
    Role.ADMIN: True,
    Role.MANAGER: True,
    Role.EMPLOYEE: False,
}

CAN_REQUEST_CORRECTION: Mapping[Role, bool] = {
    Role.ADMIN: False,
    Role.MANAGER: False,
    Role.EMPLOYEE: True,
}

CAN_MANAGE_USERS: Mapping[Role, bool] = {
    Role.ADMIN: True,
    Role.MANAGER: False,
    Role.EMPLOYEE: False,
}

CAN_MANAGE_SETTINGS: Mapping[Role, bool] = {
    Role.ADMIN: True,
    Role.MANAGER: False,
    Role.EMPLOYEE: False,
}

CAN_VIEW_TEAM: Mapping[Role, bool] = {
    Role.ADMIN: True,
    Role.MANAGER: True,
    Role.EMPLOYEE: False,
}

ALL_TABLES = (
    CAN_REVIEW_REQUESTS,
    CAN_REQUEST_CORRECTION,
    CAN_MANAGE_USERS,
    CAN_MANAGE_SETTINGS,
    CAN_VIEW_TEAM,
)


def is_allowed(table: Mapping[Role, bool], role: Role) -> bool:
    return table[Role(role)]


def require(table: Mapping[Role, bool], role: Role, message: str = "You do not have permission for this action") -> None:
    if not is_allowed(table, role):
        raise AuthorizationError(message)
