from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Plain data object (no DB access code). ``password_hash`` is a salted
    werkzeug hash, never the raw password.
    """

    user_id: int
    name: str
    email: str
    password_hash: str
    role: Role
    created_at: datetime
    last_login: Optional[datetime] = None

    @property
    def last_activity(self) -> datetime:
        return self.last_login or self.created_at
