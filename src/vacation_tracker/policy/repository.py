from __future__ import annotations

from typing import Protocol

from .model import Policy


class PolicyRepository(Protocol):
    def get(self) -> Policy:
        raise NotImplementedError

    def save(self, policy: Policy) -> None:
        raise NotImplementedError
