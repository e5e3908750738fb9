from __future__ import annotations

import itertools
import threading
import time
from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from vacation_tracker.balances.model import Balance
from vacation_tracker.container import assemble
from vacation_tracker.core.enums import RequestStatus, Role
from vacation_tracker.policy.model import Policy
from vacation_tracker.users.model import User
from vacation_tracker.vacations.model import VacationRequest
from vacation_tracker.vacations.overlap import ranges_overlap

# Sunday; every June 2025 date used in the tests lies in the future.
TODAY = date(2025, 6, 1)


class InMemoryDB:
    """Shared state behind the fake repositories (users carry the balance columns)."""

    def __init__(self):
        self.users: dict[int, User] = {}
        self.requests: dict[int, VacationRequest] = {}
        self.policy = Policy()
        self.read_delay = 0.0
        self._user_ids = itertools.count(1)
        self._request_ids = itertools.count(1)
        self._ids_guard = threading.Lock()

    def next_user_id(self) -> int:
        with self._ids_guard:
            return next(self._user_ids)

    def next_request_id(self) -> int:
        with self._ids_guard:
            return next(self._request_ids)

    def add_user(
        self,
        *,
        role: Role = Role.EMPLOYEE,
        username: Optional[str] = None,
        password: Optional[str] = None,
        total_days: int = 25,
        used_days: int = 0,
    ) -> int:
        user_id = self.next_user_id()
        self.users[user_id] = User(
            user_id=user_id,
            full_name=f"User {user_id}",
            username=username or f"user{user_id}",
            password_hash=generate_password_hash(password) if password else "CHANGE_ME",
            role=role,
            total_days=total_days if role == Role.EMPLOYEE else 0,
            used_days=used_days if role == Role.EMPLOYEE else 0,
        )
        return user_id

    def add_request(
        self,
        *,
        user_id: int,
        start_date: date,
        end_date: date,
        business_days: int,
        status: RequestStatus = RequestStatus.PENDING,
    ) -> int:
        request_id = self.next_request_id()
        self.requests[request_id] = VacationRequest(
            request_id=request_id,
            user_id=user_id,
            start_date=start_date,
            end_date=end_date,
            business_days=business_days,
            status=status,
            created_at=datetime(2025, 5, 20, 9, 0),
        )
        return request_id

    def approved_days(self, user_id: int) -> int:
        return sum(
            r.business_days
            for r in self.requests.values()
            if r.user_id == user_id and r.status == RequestStatus.APPROVED
        )


def _row(db: InMemoryDB, r: VacationRequest) -> dict:
    user = db.users[r.user_id]
    return {
        "request_id": r.request_id,
        "user_id": r.user_id,
        "full_name": user.full_name,
        "username": user.username,
        "start_date": r.start_date.strftime("%Y-%m-%d"),
        "end_date": r.end_date.strftime("%Y-%m-%d"),
        "business_days": r.business_days,
        "reason": r.reason or "",
        "status": r.status.value,
        "created_at": r.created_at.strftime("%Y-%m-%d %H:%M"),
    }


class FakeUserRepo:
    def __init__(self, db: InMemoryDB):
        self._db = db

    def get_by_id(self, user_id):
        return self._db.users.get(int(user_id))

    def get_by_username(self, username):
        return next((u for u in self._db.users.values() if u.username == username), None)

    def create_user(self, *, full_name, username, password_hash, role, total_days):
        user_id = self._db.next_user_id()
        self._db.users[user_id] = User(
            user_id=user_id,
            full_name=full_name,
            username=username,
            password_hash=password_hash,
            role=role,
            total_days=int(total_days),
        )
        return user_id

    def delete_by_id(self, user_id):
        if self._db.users.pop(int(user_id), None) is None:
            return False
        for rid in [rid for rid, r in self._db.requests.items() if r.user_id == int(user_id)]:
            del self._db.requests[rid]
        return True

    def set_total_days(self, user_id, *, total_days):
        user = self._db.users.get(int(user_id))
        if not user or user.role != Role.EMPLOYEE or user.used_days > total_days:
            return False
        self._db.users[user.user_id] = replace(user, total_days=int(total_days))
        return True

    def list_admin_view(self):
        return [
            {
                "user_id": u.user_id,
                "full_name": u.full_name,
                "username": u.username,
                "role": u.role.value,
                "total_days": u.total_days,
                "used_days": u.used_days,
                "remaining_days": u.remaining_days,
                "is_active": u.is_active,
            }
            for u in self._db.users.values()
        ]


class FakeBalanceRepo:
    def __init__(self, db: InMemoryDB):
        self._db = db

    def _employee(self, user_id):
        user = self._db.users.get(int(user_id))
        return user if user and user.role == Role.EMPLOYEE else None

    def get_balance(self, user_id):
        user = self._employee(user_id)
        if not user:
            return None
        return Balance(user_id=user.user_id, total_days=user.total_days, used_days=user.used_days)

    def add_used_days(self, user_id, days):
        user = self._employee(user_id)
        if not user or user.used_days + days > user.total_days:
            return False
        self._db.users[user.user_id] = replace(user, used_days=user.used_days + days)
        return True

    def subtract_used_days(self, user_id, days):
        user = self._employee(user_id)
        if not user:
            return False
        self._db.users[user.user_id] = replace(user, used_days=max(user.used_days - days, 0))
        return True

    def reset_all(self, total_days):
        affected = 0
        for user in list(self._db.users.values()):
            if user.role == Role.EMPLOYEE:
                self._db.users[user.user_id] = replace(user, total_days=int(total_days), used_days=0)
                affected += 1
        return affected


class FakePolicyRepo:
    def __init__(self, db: InMemoryDB):
        self._db = db

    def get(self):
        return self._db.policy

    def save(self, policy):
        self._db.policy = policy


class FakeVacationRepo:
    def __init__(self, db: InMemoryDB):
        self._db = db

    def create(self, *, user_id, start_date, end_date, business_days, reason):
        request_id = self._db.next_request_id()
        self._db.requests[request_id] = VacationRequest(
            request_id=request_id,
            user_id=int(user_id),
            start_date=start_date,
            end_date=end_date,
            business_days=int(business_days),
            status=RequestStatus.PENDING,
            created_at=datetime(2025, 6, 1, 10, 0),
            reason=reason,
        )
        return request_id

    def get(self, *, request_id):
        return self._db.requests.get(int(request_id))

    def list_for_user(self, *, user_id, statuses=None, year=None, limit=200):
        wanted = set(statuses) if statuses is not None else None
        items = [
            r
            for r in self._db.requests.values()
            if r.user_id == int(user_id)
            and (wanted is None or r.status in wanted)
            and (year is None or r.start_date.year == int(year))
        ]
        items.sort(key=lambda r: (r.start_date, r.request_id), reverse=True)
        return items[:limit]

    def find_overlapping(self, *, user_id, start_date, end_date, statuses, excluding_request_id=None):
        wanted = set(statuses)
        candidates = list(self._db.requests.values())
        if self._db.read_delay:
            # Widens the read-then-write window for the race tests.
            time.sleep(self._db.read_delay)
        matches = [
            r
            for r in candidates
            if r.user_id == int(user_id)
            and r.status in wanted
            and (excluding_request_id is None or r.request_id != int(excluding_request_id))
            and ranges_overlap(start_date, end_date, r.start_date, r.end_date)
        ]
        return min(matches, key=lambda r: (r.start_date, r.request_id), default=None)

    def list_by_status(self, *, status, limit=500):
        items = sorted(
            (r for r in self._db.requests.values() if r.status == status),
            key=lambda r: r.created_at,
        )
        return [_row(self._db, r) for r in items[:limit]]

    def list_team(self, *, first_day, last_day):
        items = [
            r
            for r in self._db.requests.values()
            if r.status == RequestStatus.APPROVED and r.start_date <= last_day and r.end_date >= first_day
        ]
        items.sort(key=lambda r: r.start_date)
        return [_row(self._db, r) for r in items]

    def decide(self, *, request_id, status, reviewed_by, rejection_reason=None):
        req = self._db.requests.get(int(request_id))
        if not req or req.status != RequestStatus.PENDING:
            return False
        self._db.requests[req.request_id] = replace(
            req,
            status=status,
            reviewed_by=int(reviewed_by),
            reviewed_at=datetime(2025, 6, 1, 11, 0),
            rejection_reason=rejection_reason,
        )
        return True

    def delete(self, *, request_id):
        return self._db.requests.pop(int(request_id), None) is not None

    def delete_all_for_employees(self):
        doomed = [
            rid
            for rid, r in self._db.requests.items()
            if self._db.users.get(r.user_id) and self._db.users[r.user_id].role == Role.EMPLOYEE
        ]
        for rid in doomed:
            del self._db.requests[rid]
        return len(doomed)


class RecordingDispatcher:
    def __init__(self, *, fail: bool = False):
        self.events = []
        self.fail = fail

    def publish(self, event):
        if self.fail:
            raise ConnectionError("mail relay unreachable")
        self.events.append(event)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def db() -> InMemoryDB:
    return InMemoryDB()


@pytest.fixture
def dispatcher() -> RecordingDispatcher:
    return RecordingDispatcher()


@pytest.fixture
def container(db, dispatcher):
    return assemble(
        users_repo=FakeUserRepo(db),
        balances_repo=FakeBalanceRepo(db),
        policies_repo=FakePolicyRepo(db),
        vacations_repo=FakeVacationRepo(db),
        dispatcher=dispatcher,
        clock=lambda: TODAY,
    )


@pytest.fixture
def service(container):
    return container.vacation_service


@pytest.fixture
def admin(db) -> int:
    return db.add_user(role=Role.ADMIN, username="admin")


@pytest.fixture
def employee(db) -> int:
    return db.add_user(username="alice", total_days=25)
