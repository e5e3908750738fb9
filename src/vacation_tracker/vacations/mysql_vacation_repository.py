from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Sequence

from ..core.enums import RequestStatus, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import VacationRequest
from .repository import VacationRepository

_REQUEST_COLUMNS = """
    r.request_id, r.user_id, r.start_date, r.end_date, r.business_days,
    r.reason, r.status, r.created_at, r.reviewed_by, r.reviewed_at, r.rejection_reason
"""


def _to_request(r: dict) -> VacationRequest:
    return VacationRequest(
        request_id=int(r["request_id"]),
        user_id=int(r["user_id"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        business_days=int(r["business_days"]),
        status=RequestStatus(r["status"]),
        created_at=r["created_at"],
        reason=r.get("reason"),
        reviewed_by=r.get("reviewed_by"),
        reviewed_at=r.get("reviewed_at"),
        rejection_reason=r.get("rejection_reason"),
    )


def _to_row(r: dict) -> dict:
    return {
        "request_id": int(r["request_id"]),
        "user_id": int(r["user_id"]),
        "full_name": r["full_name"],
        "username": r["username"],
        "start_date": r["start_date"].strftime("%Y-%m-%d"),
        "end_date": r["end_date"].strftime("%Y-%m-%d"),
        "business_days": int(r["business_days"]),
        "reason": r.get("reason") or "",
        "status": r["status"],
        "created_at": r["created_at"].strftime("%Y-%m-%d %H:%M"),
    }


class MySQLVacationRepository(VacationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        user_id: int,
        start_date: date,
        end_date: date,
        business_days: int,
        reason: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO vacation_requests(user_id, start_date, end_date, business_days, reason, status)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(user_id), start_date, end_date, int(business_days), reason, RequestStatus.PENDING.value),
            )
            return int(cur.lastrowid)

    def get(self, *, request_id: int) -> Optional[VacationRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_REQUEST_COLUMNS} FROM vacation_requests r WHERE r.request_id=%s",
                (int(request_id),),
            )
            r = fetchone(cur)
            return _to_request(r) if r else None

    def list_for_user(
        self,
        *,
        user_id: int,
        statuses: Optional[Iterable[RequestStatus]] = None,
        year: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[VacationRequest]:
        clauses = ["r.user_id=%s"]
        params: list[object] = [int(user_id)]

        if statuses is not None:
            values = [s.value for s in statuses]
            if not values:
                return []
            clauses.append(f"r.status IN ({','.join(['%s'] * len(values))})")
            params.extend(values)
        if year is not None:
            clauses.append("YEAR(r.start_date)=%s")
            params.append(int(year))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_REQUEST_COLUMNS}
                FROM vacation_requests r
                WHERE {where}
                ORDER BY r.start_date DESC, r.request_id DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def find_overlapping(
        self,
        *,
        user_id: int,
        start_date: date,
        end_date: date,
        statuses: Iterable[RequestStatus],
        excluding_request_id: Optional[int] = None,
    ) -> Optional[VacationRequest]:
        values = [s.value for s in statuses]
        if not values:
            return None

        clauses = [
            "r.user_id=%s",
            f"r.status IN ({','.join(['%s'] * len(values))})",
            "r.start_date <= %s",
            "r.end_date >= %s",
        ]
        params: list[object] = [int(user_id), *values, end_date, start_date]
        if excluding_request_id is not None:
            clauses.append("r.request_id <> %s")
            params.append(int(excluding_request_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_REQUEST_COLUMNS}
                FROM vacation_requests r
                WHERE {' AND '.join(clauses)}
                ORDER BY r.start_date ASC, r.request_id ASC
                LIMIT 1
                """,
                tuple(params),
            )
            r = fetchone(cur)
            return _to_request(r) if r else None

    def list_by_status(self, *, status: RequestStatus, limit: int = 500) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_REQUEST_COLUMNS}, u.full_name, u.username
                FROM vacation_requests r
                JOIN users u ON u.user_id = r.user_id
                WHERE r.status=%s
                ORDER BY r.created_at ASC
                LIMIT %s
                """,
                (status.value, int(limit)),
            )
            return [_to_row(r) for r in fetchall(cur)]

    def list_team(self, *, first_day: date, last_day: date) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_REQUEST_COLUMNS}, u.full_name, u.username
                FROM vacation_requests r
                JOIN users u ON u.user_id = r.user_id
                WHERE r.status=%s AND r.start_date <= %s AND r.end_date >= %s
                ORDER BY r.start_date ASC, u.full_name ASC
                """,
                (RequestStatus.APPROVED.value, last_day, first_day),
            )
            return [_to_row(r) for r in fetchall(cur)]

    def decide(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        reviewed_by: int,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE vacation_requests
                SET status=%s, reviewed_by=%s, reviewed_at=NOW(), rejection_reason=%s
                WHERE request_id=%s AND status=%s
                """,
                (status.value, int(reviewed_by), rejection_reason, int(request_id), RequestStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def delete(self, *, request_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM vacation_requests WHERE request_id=%s", (int(request_id),))
            return cur.rowcount > 0

    def delete_all_for_employees(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                DELETE r FROM vacation_requests r
                JOIN users u ON u.user_id = r.user_id
                WHERE u.role=%s
                """,
                (Role.EMPLOYEE.value,),
            )
            return int(cur.rowcount)
