from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Note: plain data object (no DB access code). ``total_days``/``used_days`` are
    only meaningful for employees.
    """

    user_id: int
    full_name: str
    username: str
    password_hash: str
    role: Role
    total_days: int = 0
    used_days: int = 0
    is_active: bool = True

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def remaining_days(self) -> int:
        return self.total_days - self.used_days
