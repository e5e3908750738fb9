from __future__ import annotations

from contextlib import nullcontext
from typing import ContextManager, Protocol


class TransactionManager(Protocol):
    """Anything that can run a block as one storage transaction."""

    def transaction(self) -> ContextManager[None]:
        raise NotImplementedError


class NoTransactions(TransactionManager):
    """For stores without transactions; per-user locks alone serialize writers."""

    def transaction(self) -> ContextManager[None]:
        return nullcontext()
