from __future__ import annotations

from typing import Optional

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Balance
from .repository import BalanceRepository


class MySQLBalanceRepository(BalanceRepository):
    """Balance counters live on the ``users`` row."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_balance(self, user_id: int) -> Optional[Balance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, total_days, used_days
                FROM users
                WHERE user_id=%s AND role=%s
                FOR UPDATE
                """,
                (int(user_id), Role.EMPLOYEE.value),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Balance(
                user_id=int(r["user_id"]),
                total_days=int(r["total_days"]),
                used_days=int(r["used_days"]),
            )

    def add_used_days(self, user_id: int, days: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE users
                SET used_days = used_days + %s
                WHERE user_id=%s AND role=%s AND used_days + %s <= total_days
                """,
                (int(days), int(user_id), Role.EMPLOYEE.value, int(days)),
            )
            return cur.rowcount > 0

    def subtract_used_days(self, user_id: int, days: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE users
                SET used_days = GREATEST(used_days - %s, 0)
                WHERE user_id=%s AND role=%s
                """,
                (int(days), int(user_id), Role.EMPLOYEE.value),
            )
            return cur.rowcount > 0

    def reset_all(self, total_days: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET total_days=%s, used_days=0 WHERE role=%s",
                (int(total_days), Role.EMPLOYEE.value),
            )
            return int(cur.rowcount)
