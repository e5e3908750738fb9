from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

_USER_COLUMNS = "user_id, full_name, username, password_hash, role, total_days, used_days, is_active"


def _to_user(r: dict) -> User:
    return User(
        user_id=int(r["user_id"]),
        full_name=r["full_name"],
        username=r["username"],
        password_hash=r["password_hash"],
        role=Role(r["role"]),
        total_days=int(r.get("total_days") or 0),
        used_days=int(r.get("used_days") or 0),
        is_active=bool(r.get("is_active", 1)),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            r = fetchone(cur)
            return _to_user(r) if r else None

    def get_by_username(self, username: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE username=%s", (username,))
            r = fetchone(cur)
            return _to_user(r) if r else None

    def create_user(
        self,
        *,
        full_name: str,
        username: str,
        password_hash: str,
        role: Role,
        total_days: int,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(full_name, username, password_hash, role, total_days, used_days)
                VALUES(%s,%s,%s,%s,%s,0)
                """,
                (full_name, username, password_hash, role.value, int(total_days)),
            )
            return int(cur.lastrowid)

    def delete_by_id(self, user_id: int) -> bool:
        # vacation_requests rows are removed by ON DELETE CASCADE.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE user_id=%s", (int(user_id),))
            return cur.rowcount > 0

    def set_total_days(self, user_id: int, *, total_days: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE users SET total_days=%s
                WHERE user_id=%s AND role=%s AND used_days <= %s
                """,
                (int(total_days), int(user_id), Role.EMPLOYEE.value, int(total_days)),
            )
            return cur.rowcount > 0

    def list_admin_view(self) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, full_name, username, role, total_days, used_days, is_active
                FROM users
                ORDER BY role, full_name
                """
            )
            out: list[dict] = []
            for r in fetchall(cur):
                total = int(r.get("total_days") or 0)
                used = int(r.get("used_days") or 0)
                out.append(
                    {
                        "user_id": int(r["user_id"]),
                        "full_name": r["full_name"],
                        "username": r["username"],
                        "role": r["role"],
                        "total_days": total,
                        "used_days": used,
                        "remaining_days": total - used,
                        "is_active": bool(r["is_active"]),
                    }
                )
            return out
