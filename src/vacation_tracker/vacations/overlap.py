from __future__ import annotations

from datetime import date
from typing import Optional

from ..core.enums import RequestStatus
from .model import VacationRequest
from .repository import VacationRepository

BLOCKING_STATUSES = (RequestStatus.PENDING, RequestStatus.APPROVED)


def ranges_overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    """Inclusive interval overlap: sharing a single boundary day counts."""
    return a_start <= b_end and b_start <= a_end


class OverlapDetector:
    """Checks a proposed range against the user's pending and approved requests."""

    def __init__(self, vacations: VacationRepository):
        self._vacations = vacations

    def find_conflict(
        self,
        user_id: int,
        start: date,
        end: date,
        excluding_request_id: Optional[int] = None,
    ) -> Optional[VacationRequest]:
        # Must see every blocking request, not a capped history page.
        return self._vacations.find_overlapping(
            user_id=int(user_id),
            start_date=start,
            end_date=end,
            statuses=BLOCKING_STATUSES,
            excluding_request_id=excluding_request_id,
        )

    def has_overlap(
        self,
        user_id: int,
        start: date,
        end: date,
        excluding_request_id: Optional[int] = None,
    ) -> bool:
        return self.find_conflict(user_id, start, end, excluding_request_id) is not None
