from __future__ import annotations

from typing import Optional, Protocol

from .model import Balance


class BalanceRepository(Protocol):
    """Per-employee total/used day counters."""

    def get_balance(self, user_id: int) -> Optional[Balance]:
        """Return the employee's balance, or None for unknown users and admins.

        Implementations backed by a transactional store should lock the row
        for the rest of the enclosing transaction.
        """

        raise NotImplementedError

    def add_used_days(self, user_id: int, days: int) -> bool:
        """Increase used days. Returns False if that would exceed total days."""

        raise NotImplementedError

    def subtract_used_days(self, user_id: int, days: int) -> bool:
        """Decrease used days, floored at zero."""

        raise NotImplementedError

    def reset_all(self, total_days: int) -> int:
        """Set every employee to ``total_days`` with zero used. Returns rows affected."""

        raise NotImplementedError
