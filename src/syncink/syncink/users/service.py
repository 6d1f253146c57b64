from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_utc
from ..common.validators import normalize_email, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import NotFoundError, ValidationError
from ..core.permissions import CAN_MANAGE_USERS, require
from ..retroactive.repository import RetroactiveRequestRepository
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)

DEFAULT_USERS = (
    ("Admin User", "admin@syncink.com", "admin123", Role.ADMIN),
    ("John Doe", "john@syncink.com", "john123", Role.EMPLOYEE),
    ("Jane Smith", "jane@syncink.com", "jane123", Role.EMPLOYEE),
)


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, email: str, password: str, *, now: Optional[datetime] = None) -> Optional[User]:
        """Return the user on a match, ``None`` otherwise.

        A failed login is a normal negative result, not an error.
        """
        try:
            email = normalize_email(email)
        except ValidationError:
            return None

        user = self._users.get_by_email(email)
        if not user:
            return None

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder or corrupted hashes
            ok = False
        if not ok:
            return None

        when = now or now_utc()
        self._users.set_last_login(user.user_id, when)
        return replace(user, last_login=when)


class UserService:
    """Use case: manage users (admin)."""

    def __init__(
        self,
        users: UserRepository,
        entries: AttendanceRepository,
        requests: RetroactiveRequestRepository,
    ):
        self._users = users
        self._entries = entries
        self._requests = requests

    def get_user(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user

    def list_users(self, *, role: Optional[Role] = None) -> Sequence[User]:
        return self._users.list_users(role=role)

    def create_user(
        self,
        *,
        current_role: Role,
        name: str,
        email: str,
        password: str,
        role: Role = Role.EMPLOYEE,
        now: Optional[datetime] = None,
    ) -> User:
        require(CAN_MANAGE_USERS, current_role, "Only administrators can manage users")
        return self._create(name=name, email=email, password=password, role=role, now=now)

    def _create(self, *, name: str, email: str, password: str, role: Role, now: Optional[datetime]) -> User:
        name = require_non_empty(name, "Name")
        email = normalize_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        role = Role(role)

        if self._users.get_by_email(email):
            raise ValidationError("Email is already registered")

        user_id = self._users.create_user(
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
            created_at=now or now_utc(),
        )
        logger.info("Created user %s (%s)", user_id, role.value)
        return self.get_user(user_id)

    def update_user(
        self,
        *,
        current_role: Role,
        user_id: int,
        name: Optional[str] = None,
        email: Optional[str] = None,
        password: Optional[str] = None,
        role: Optional[Role] = None,
    ) -> User:
        require(CAN_MANAGE_USERS, current_role, "Only administrators can manage users")

        user = self.get_user(user_id)
        changes: dict = {}
        if name is not None:
            changes["name"] = require_non_empty(name, "Name")
        if email is not None:
            new_email = normalize_email(email)
            other = self._users.get_by_email(new_email)
            if other and other.user_id != user.user_id:
                raise ValidationError("Email is already registered")
            changes["email"] = new_email
        if password:
            require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
            changes["password_hash"] = generate_password_hash(password)
        if role is not None:
            changes["role"] = Role(role)

        updated = replace(user, **changes)
        if not self._users.update_user(updated):
            raise ValidationError("Updating the user failed")
        return updated

    def delete_user(self, *, current_role: Role, user_id: int) -> None:
        """Delete a user together with every record that references them."""
        require(CAN_MANAGE_USERS, current_role, "Only administrators can manage users")

        user = self.get_user(user_id)
        removed_requests = self._requests.delete_for_user(user.user_id)
        self._requests.clear_reviewer(user.user_id)
        removed_entries = self._entries.delete_for_user(user.user_id)

        if not self._users.delete_by_id(user.user_id):
            raise ValidationError("Deleting the user failed")
        logger.info(
            "Deleted user %s with %s entries and %s retroactive requests",
            user.user_id,
            removed_entries,
            removed_requests,
        )

    def ensure_default_users(self) -> Sequence[User]:
        """Seed the demo accounts when the directory is empty."""
        if self._users.list_users():
            return []
        created = [
            self._create(name=name, email=email, password=password, role=role, now=None)
            for name, email, password, role in DEFAULT_USERS
        ]
        logger.info("Seeded %s default users", len(created))
        return created
