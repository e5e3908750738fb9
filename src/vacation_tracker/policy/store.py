from __future__ import annotations

import logging
import threading
from dataclasses import replace

from ..common.guards import storage_guard
from ..common.validators import require_non_negative_int
from ..core.enums import Role
from ..core.exceptions import Forbidden
from .model import Policy
from .repository import PolicyRepository

logger = logging.getLogger(__name__)


class PolicyStore:
    """Read-mostly access to the process-wide policy.

    Every read goes to the repository, so a change made by one worker is seen by
    the next request handled anywhere. Existing requests are never recomputed.
    """

    def __init__(self, policies: PolicyRepository):
        self._policies = policies
        self._write_lock = threading.Lock()

    def get(self) -> Policy:
        with storage_guard("load policy"):
            return self._policies.get()

    def set(self, *, current_role: Role, exclude_weekends: bool) -> Policy:
        return self._update(current_role, exclude_weekends=bool(exclude_weekends))

    def set_default_vacation_days(self, *, current_role: Role, days: int) -> Policy:
        return self._update(
            current_role,
            default_vacation_days=require_non_negative_int(days, "Default vacation days"),
        )

    def _update(self, current_role: Role, **changes) -> Policy:
        if current_role != Role.ADMIN:
            raise Forbidden("Only administrators can change the policy")

        with self._write_lock, storage_guard("save policy"):
            policy = replace(self._policies.get(), **changes)
            self._policies.save(policy)

        logger.info("Policy updated: %s", changes, extra={"event": "policy_updated"})
        return policy
