from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Balance:
    user_id: int
    total_days: int
    used_days: int

    @property
    def remaining_days(self) -> int:
        return self.total_days - self.used_days
