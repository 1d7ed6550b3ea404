from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

USER_COLUMNS = "user_id, first_name, last_name, email, password_hash, role, position, is_active, created_at, updated_at"


def row_to_user(row: dict, *, prefix: str = "") -> User:
    return User(
        user_id=int(row[f"{prefix}user_id"]),
        first_name=row[f"{prefix}first_name"],
        last_name=row[f"{prefix}last_name"],
        email=row[f"{prefix}email"],
        password_hash=row.get(f"{prefix}password_hash") or "",
        role=Role(row[f"{prefix}role"]),
        position=row.get(f"{prefix}position"),
        is_active=bool(row.get(f"{prefix}is_active", True)),
        created_at=row.get(f"{prefix}created_at"),
        updated_at=row.get(f"{prefix}updated_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {USER_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return row_to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {USER_COLUMNS} FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            return row_to_user(row) if row else None

    def create_user(
        self,
        *,
        first_name: str,
        last_name: str,
        email: str,
        password_hash: str,
        role: Role,
        position: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(first_name, last_name, email, password_hash, role, position, is_active)
                VALUES(%s,%s,%s,%s,%s,%s,1)
                """,
                (first_name, last_name, email, password_hash, role.value, position),
            )
            return int(cur.lastrowid)

    def update_profile(self, user_id: int, *, first_name: str, last_name: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET first_name=%s, last_name=%s WHERE user_id=%s",
                (first_name, last_name, int(user_id)),
            )
            return cur.rowcount > 0

    def update_password_hash(self, user_id: int, *, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET password_hash=%s WHERE user_id=%s", (password_hash, int(user_id)))
            return cur.rowcount > 0

    def update_role(self, user_id: int, *, role: Role) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT user_id FROM users WHERE user_id=%s", (int(user_id),))
            if not fetchone(cur):
                return False
            cur.execute("UPDATE users SET role=%s WHERE user_id=%s", (role.value, int(user_id)))
            return True

    def list_all(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {USER_COLUMNS} FROM users ORDER BY last_name, first_name")
            return [row_to_user(r) for r in fetchall(cur)]
