from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import DEFAULT_VACATION_DAYS


@dataclass(frozen=True)
class Policy:
    """Process-wide vacation policy (single record)."""

    exclude_weekends: bool = True
    default_vacation_days: int = DEFAULT_VACATION_DAYS
