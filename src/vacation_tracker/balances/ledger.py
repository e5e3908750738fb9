from __future__ import annotations

import logging

from ..common.guards import storage_guard
from ..core.exceptions import InsufficientBalance, NotFound
from .model import Balance
from .repository import BalanceRepository

logger = logging.getLogger(__name__)


class BalanceLedger:
    """Total/used vacation-day bookkeeping for employees.

    The ledger does not serialize callers; the lifecycle holds the per-user lock
    around check-then-act sequences and guarantees ``commit`` runs once per request.
    """

    def __init__(self, balances: BalanceRepository):
        self._balances = balances

    def get(self, user_id: int) -> Balance:
        with storage_guard("load balance"):
            balance = self._balances.get_balance(int(user_id))
        if balance is None:
            raise NotFound("Employee balance")
        return balance

    def remaining(self, user_id: int) -> int:
        return self.get(user_id).remaining_days

    def reserve(self, user_id: int, days: int) -> Balance:
        """Check that ``days`` fit in the remaining balance. Does not mutate anything.

        Pending requests do not consume days; this is advisory at submission time.
        """
        balance = self.get(user_id)
        if int(days) > balance.remaining_days:
            raise InsufficientBalance(requested=int(days), available=balance.remaining_days)
        return balance

    def commit(self, user_id: int, days: int) -> None:
        with storage_guard("commit vacation days"):
            ok = self._balances.add_used_days(int(user_id), int(days))
        if not ok:
            # Re-read to tell a missing employee apart from a full balance.
            balance = self.get(user_id)
            raise InsufficientBalance(requested=int(days), available=balance.remaining_days)
        logger.info(
            "Committed %s days",
            days,
            extra={"event": "ledger_commit", "user_id": int(user_id), "business_days": int(days)},
        )

    def release(self, user_id: int, days: int) -> None:
        with storage_guard("release vacation days"):
            ok = self._balances.subtract_used_days(int(user_id), int(days))
        if not ok:
            raise NotFound("Employee balance")
        logger.info(
            "Released %s days",
            days,
            extra={"event": "ledger_release", "user_id": int(user_id), "business_days": int(days)},
        )

    def reset_all(self, new_total: int) -> int:
        with storage_guard("reset balances"):
            affected = self._balances.reset_all(int(new_total))
        logger.info(
            "Reset balances to %s days",
            new_total,
            extra={"event": "ledger_reset", "affected": affected},
        )
        return affected
