from __future__ import annotations

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Policy
from .repository import PolicyRepository


class MySQLPolicyRepository(PolicyRepository):
    """Stores the policy in the singleton ``settings`` row (id=1)."""

    def __init__(self, conn_factory: DatabaseConnection, *, fallback: Policy | None = None):
        self._conn_factory = conn_factory
        self._fallback = fallback or Policy()

    def get(self) -> Policy:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT exclude_weekends, default_vacation_days FROM settings WHERE id=1")
            r = fetchone(cur)
            if not r:
                return self._fallback
            return Policy(
                exclude_weekends=bool(r["exclude_weekends"]),
                default_vacation_days=int(r["default_vacation_days"]),
            )

    def save(self, policy: Policy) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO settings(id, exclude_weekends, default_vacation_days)
                VALUES(1,%s,%s)
                ON DUPLICATE KEY UPDATE
                    exclude_weekends=VALUES(exclude_weekends),
                    default_vacation_days=VALUES(default_vacation_days)
                """,
                (1 if policy.exclude_weekends else 0, int(policy.default_vacation_days)),
            )
