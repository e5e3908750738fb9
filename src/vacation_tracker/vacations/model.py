from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import RequestStatus


@dataclass(frozen=True)
class VacationRequest:
    """A date-range request against an employee's balance.

    Dates are inclusive. ``business_days`` is fixed at submission under the policy
    in effect then; only ``status`` and the review fields change afterwards.
    """

    request_id: int
    user_id: int
    start_date: date
    end_date: date
    business_days: int
    status: RequestStatus
    created_at: datetime
    reason: Optional[str] = None
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.status == RequestStatus.PENDING

    @property
    def is_approved(self) -> bool:
        return self.status == RequestStatus.APPROVED

    def to_dict(self) -> dict:
        return {
            "request_id": self.request_id,
            "user_id": self.user_id,
            "start_date": self.start_date.strftime("%Y-%m-%d"),
            "end_date": self.end_date.strftime("%Y-%m-%d"),
            "business_days": self.business_days,
            "status": self.status.value,
            "reason": self.reason,
            "created_at": self.created_at.strftime("%Y-%m-%d %H:%M"),
            "reviewed_by": self.reviewed_by,
            "reviewed_at": self.reviewed_at.strftime("%Y-%m-%d %H:%M") if self.reviewed_at else None,
            "rejection_reason": self.rejection_reason,
        }
