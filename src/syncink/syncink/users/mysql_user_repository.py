from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_db_datetime, to_db_datetime
from .model import User
from .repository import UserRepository

_USER_COLUMNS = "user_id, name, email, password_hash, role, created_at, last_login"


def _to_user(row: Dict[str, Any]) -> User:
    return User(
        user_id=int(row["user_id"]),
        name=row["name"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        created_at=from_db_datetime(row["created_at"]),
        last_login=from_db_datetime(row.get("last_login")),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def list_users(self, *, role: Optional[Role] = None) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            if role is None:
                cur.execute(f"SELECT {_USER_COLUMNS} FROM users ORDER BY user_id")
            else:
                cur.execute(
                    f"SELECT {_USER_COLUMNS} FROM users WHERE role=%s ORDER BY user_id",
                    (Role(role).value,),
                )
            return [_to_user(r) for r in fetchall(cur)]

    def create_user(
        self,
        *,
        name: str,
        email: str,
        password_hash: str,
        role: Role,
        created_at: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(name, email, password_hash, role, created_at)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (name, email, password_hash, Role(role).value, to_db_datetime(created_at)),
            )
            return int(cur.lastrowid)

    def update_user(self, user: User) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE users
                SET name=%s, email=%s, password_hash=%s, role=%s
                WHERE user_id=%s
                """,
                (user.name, user.email, user.password_hash, user.role.value, user.user_id),
            )
            if cur.rowcount > 0:
                return True
            # rowcount is 0 when no column changed
            cur.execute("SELECT user_id FROM users WHERE user_id=%s", (user.user_id,))
            return fetchone(cur) is not None

    def set_last_login(self, user_id: int, when: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET last_login=%s WHERE user_id=%s", (to_db_datetime(when), int(user_id)))
            return cur.rowcount > 0

    def delete_by_id(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE user_id=%s", (int(user_id),))
            return cur.rowcount > 0
