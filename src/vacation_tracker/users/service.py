from __future__ import annotations

import logging
from dataclasses import dataclass

from werkzeug.security import check_password_hash, generate_password_hash

from ..balances.ledger import BalanceLedger
from ..balances.model import Balance
from ..common.guards import storage_guard
from ..common.locks import UserLocks
from ..common.validators import require_min_length, require_non_empty, require_non_negative_int
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, Forbidden, NotFound, ValidationError
from ..policy.store import PolicyStore
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: int
    full_name: str
    role: Role


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, username: str, password: str) -> SessionUser:
        if not isinstance(username, str) or not isinstance(password, str):
            raise AuthenticationError()

        with storage_guard("load user"):
            user = self._users.get_by_username(username.strip())
        if not user or not user.is_active:
            raise AuthenticationError()

        try:
            ok = check_password_hash(user.password_hash, password)
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError()

        return SessionUser(user_id=user.user_id, full_name=user.full_name, role=user.role)


class UserService:
    """Use case: manage employees and their allowances (admin)."""

    def __init__(
        self,
        users: UserRepository,
        ledger: BalanceLedger,
        policy: PolicyStore,
        *,
        locks: UserLocks | None = None,
    ):
        self._users = users
        self._ledger = ledger
        self._policy = policy
        self._locks = locks or UserLocks()

    @staticmethod
    def _require_admin(current_role: Role) -> None:
        if current_role != Role.ADMIN:
            raise Forbidden("Administrator privileges required")

    def _get_user(self, user_id: int) -> User:
        with storage_guard("load user"):
            user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFound("User")
        return user

    def create_employee(
        self,
        *,
        current_role: Role,
        full_name: str,
        username: str,
        password: str,
        total_days: int | None = None,
    ) -> int:
        self._require_admin(current_role)

        full_name = require_non_empty(full_name, "Full name")
        username = require_non_empty(username, "Username")
        require_min_length(password, "Password", 6)

        if total_days is None:
            total_days = self._policy.get().default_vacation_days
        total_days = require_non_negative_int(total_days, "Total days")

        with storage_guard("create user"):
            if self._users.get_by_username(username):
                raise ValidationError("Username already exists")

            user_id = self._users.create_user(
                full_name=full_name,
                username=username,
                password_hash=generate_password_hash(password),
                role=Role.EMPLOYEE,
                total_days=total_days,
            )

        logger.info("Employee created", extra={"event": "user_created", "user_id": user_id})
        return user_id

    def list_admin_view(self):
        with storage_guard("list users"):
            return self._users.list_admin_view()

    def get_profile(self, *, user_id: int) -> dict:
        user = self._get_user(user_id)
        profile = {
            "user_id": user.user_id,
            "full_name": user.full_name,
            "username": user.username,
            "role": user.role.value,
        }
        if user.role == Role.EMPLOYEE:
            balance = self._ledger.get(user.user_id)
            profile.update(
                total_days=balance.total_days,
                used_days=balance.used_days,
                remaining_days=balance.remaining_days,
            )
        return profile

    def update_total_days(self, *, current_role: Role, user_id: int, total_days: int) -> Balance:
        self._require_admin(current_role)
        total_days = require_non_negative_int(total_days, "Total days")

        user = self._get_user(user_id)
        if user.role != Role.EMPLOYEE:
            raise ValidationError("Only employees have a vacation balance")

        with self._locks.for_user(user.user_id):
            balance = self._ledger.get(user.user_id)
            if total_days < balance.used_days:
                raise ValidationError(f"Total days cannot be lower than the {balance.used_days} days already used")
            with storage_guard("update balance"):
                ok = self._users.set_total_days(user.user_id, total_days=total_days)
            if not ok:
                raise ValidationError("Updating the balance failed")
            updated = self._ledger.get(user.user_id)

        logger.info(
            "Total days set to %s",
            total_days,
            extra={"event": "balance_updated", "user_id": user.user_id},
        )
        return updated

    def delete_user(self, *, current_role: Role, user_id: int) -> None:
        self._require_admin(current_role)

        user = self._get_user(user_id)
        if user.role == Role.ADMIN:
            raise ValidationError("Administrator accounts cannot be deleted")

        with self._locks.for_user(user.user_id), storage_guard("delete user"):
            if not self._users.delete_by_id(user.user_id):
                raise NotFound("User")

        logger.info("User deleted", extra={"event": "user_deleted", "user_id": user.user_id})
