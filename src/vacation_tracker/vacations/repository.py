from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import RequestStatus
from .model import VacationRequest


class VacationRepository(Protocol):
    def create(
        self,
        *,
        user_id: int,
        start_date: date,
        end_date: date,
        business_days: int,
        reason: Optional[str],
    ) -> int:
        """Insert a pending request and return its id."""

        raise NotImplementedError

    def get(self, *, request_id: int) -> Optional[VacationRequest]:
        raise NotImplementedError

    def list_for_user(
        self,
        *,
        user_id: int,
        statuses: Optional[Iterable[RequestStatus]] = None,
        year: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[VacationRequest]:
        """Newest first. ``year`` matches the start date's year."""

        raise NotImplementedError

    def find_overlapping(
        self,
        *,
        user_id: int,
        start_date: date,
        end_date: date,
        statuses: Iterable[RequestStatus],
        excluding_request_id: Optional[int] = None,
    ) -> Optional[VacationRequest]:
        """First request of ``user_id`` in ``statuses`` sharing a day with ``[start_date, end_date]``.

        Searches all of the user's requests; no paging applies.
        """

        raise NotImplementedError

    def list_by_status(self, *, status: RequestStatus, limit: int = 500) -> Sequence[dict]:
        """Return UI rows (joined with user)."""

        raise NotImplementedError

    def list_team(self, *, first_day: date, last_day: date) -> Sequence[dict]:
        """Approved requests intersecting ``[first_day, last_day]``, joined with user."""

        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        reviewed_by: int,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        """Move a pending request to ``status``. False if it is no longer pending."""

        raise NotImplementedError

    def delete(self, *, request_id: int) -> bool:
        raise NotImplementedError

    def delete_all_for_employees(self) -> int:
        raise NotImplementedError
