from __future__ import annotations

import calendar
import logging
from contextlib import contextmanager
from datetime import date
from typing import Callable, Iterator, Optional, Sequence

from ..balances.ledger import BalanceLedger
from ..common.datetime_utils import today_local
from ..common.guards import storage_guard
from ..common.locks import UserLocks
from ..common.validators import optional_max_length, require_non_negative_int
from ..core.constants import DEFAULT_HISTORY_LIMIT, DEFAULT_PENDING_LIMIT, MAX_REASON_LENGTH, MAX_TEAM_YEAR, MIN_TEAM_YEAR
from ..core.enums import RequestStatus, ReviewDecision, Role
from ..core.exceptions import (
    AlreadyReviewed,
    Forbidden,
    InvalidDateRange,
    NotFound,
    OverlappingRequest,
    PastDate,
    ValidationError,
)
from ..database.transactions import NoTransactions, TransactionManager
from ..notifications.dispatcher import LoggingNotificationDispatcher, NotificationDispatcher
from ..notifications.events import BalancesReset, LifecycleEvent, RequestCreated, RequestReviewed
from ..policy.store import PolicyStore
from ..users.model import User
from ..users.repository import UserRepository
from .model import VacationRequest
from .overlap import OverlapDetector
from .repository import VacationRepository
from .workdays import business_days

logger = logging.getLogger(__name__)


class VacationService:
    """Use case: the vacation request lifecycle.

    pending -> approved | rejected, each exactly once. Create, review and cancel for
    one employee run under that employee's lock (and one storage transaction when
    the store has them); the bulk reset runs exclusively against all of them.
    Notifications are sent after the state change and never affect the result.
    """

    def __init__(
        self,
        vacations: VacationRepository,
        users: UserRepository,
        ledger: BalanceLedger,
        policy: PolicyStore,
        *,
        locks: UserLocks | None = None,
        transactions: TransactionManager | None = None,
        dispatcher: NotificationDispatcher | None = None,
        clock: Callable[[], date] = today_local,
    ):
        self._vacations = vacations
        self._users = users
        self._ledger = ledger
        self._policy = policy
        self._overlaps = OverlapDetector(vacations)
        self._locks = locks or UserLocks()
        self._transactions = transactions or NoTransactions()
        self._dispatcher = dispatcher or LoggingNotificationDispatcher()
        self._clock = clock

    # -------- helpers --------
    @contextmanager
    def _serialized(self, user_id: int, action: str) -> Iterator[None]:
        with storage_guard(action), self._locks.for_user(user_id), self._transactions.transaction():
            yield

    def _emit(self, event: LifecycleEvent) -> None:
        try:
            self._dispatcher.publish(event)
        except Exception:
            logger.exception("Notification dispatch failed for %s", event.name, extra={"event": "notify_failed"})

    def _get_user(self, user_id: int) -> User:
        with storage_guard("load user"):
            user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFound("User")
        return user

    def _require_admin(self, user_id: int) -> User:
        user = self._get_user(user_id)
        if user.role != Role.ADMIN:
            raise Forbidden("Administrator privileges required")
        return user

    def _load(self, request_id: int) -> VacationRequest:
        with storage_guard("load vacation request"):
            req = self._vacations.get(request_id=int(request_id))
        if not req:
            raise NotFound("Vacation request")
        return req

    # -------- lifecycle --------
    def create_request(
        self,
        *,
        user_id: int,
        start_date: date,
        end_date: date,
        reason: Optional[str] = None,
    ) -> VacationRequest:
        user = self._get_user(user_id)
        if user.role != Role.EMPLOYEE:
            raise Forbidden("Only employees can submit vacation requests")

        reason = optional_max_length(reason, "Reason", MAX_REASON_LENGTH)

        if end_date < start_date:
            raise InvalidDateRange()
        if start_date < self._clock():
            raise PastDate()

        with self._serialized(user.user_id, "create vacation request"):
            # Locks the employee row for the rest of the transaction.
            self._ledger.get(user.user_id)

            policy = self._policy.get()
            days = business_days(start_date, end_date, policy.exclude_weekends)
            if days == 0:
                raise InvalidDateRange("Selected dates contain no business days")

            conflict = self._overlaps.find_conflict(user.user_id, start_date, end_date)
            if conflict:
                raise OverlappingRequest(conflict.request_id)

            self._ledger.reserve(user.user_id, days)

            request_id = self._vacations.create(
                user_id=user.user_id,
                start_date=start_date,
                end_date=end_date,
                business_days=days,
                reason=reason,
            )
            created = self._vacations.get(request_id=request_id)

        logger.info(
            "Vacation request created",
            extra={"event": "request_created", "request_id": request_id, "user_id": user.user_id, "business_days": days},
        )
        self._emit(
            RequestCreated(
                request_id=request_id,
                user_id=user.user_id,
                start_date=start_date,
                end_date=end_date,
                business_days=days,
            )
        )
        return created

    def review_request(
        self,
        *,
        request_id: int,
        reviewer_id: int,
        decision,
        reason: Optional[str] = None,
    ) -> VacationRequest:
        """Approve or reject a pending request. Only a rejection may carry a ``reason``."""
        try:
            decision = ReviewDecision(decision)
        except ValueError:
            raise ValidationError("Decision must be 'approve' or 'reject'")

        reason = optional_max_length(reason, "Rejection reason", MAX_REASON_LENGTH)
        if reason and decision is ReviewDecision.APPROVE:
            raise ValidationError("A reason can only be given when rejecting")

        reviewer = self._require_admin(reviewer_id)
        owner_id = self._load(request_id).user_id

        with self._serialized(owner_id, "review vacation request"):
            self._ledger.get(owner_id)
            req = self._vacations.get(request_id=int(request_id))
            if not req:
                raise NotFound("Vacation request")
            if not req.is_pending:
                raise AlreadyReviewed(req.status)

            if decision is ReviewDecision.APPROVE:
                # Several pending requests may each fit alone but not together.
                conflict = self._overlaps.find_conflict(
                    req.user_id, req.start_date, req.end_date, excluding_request_id=req.request_id
                )
                if conflict:
                    raise OverlappingRequest(conflict.request_id)
                self._ledger.reserve(req.user_id, req.business_days)

            status = decision.resulting_status
            if not self._vacations.decide(
                request_id=req.request_id,
                status=status,
                reviewed_by=reviewer.user_id,
                rejection_reason=reason,
            ):
                current = self._vacations.get(request_id=req.request_id)
                raise AlreadyReviewed(current.status if current else req.status)

            if status is RequestStatus.APPROVED:
                self._ledger.commit(req.user_id, req.business_days)

            reviewed = self._vacations.get(request_id=req.request_id)

        logger.info(
            "Vacation request %s",
            status.value,
            extra={
                "event": "request_reviewed",
                "request_id": req.request_id,
                "user_id": req.user_id,
                "reviewer_id": reviewer.user_id,
                "status": status.value,
            },
        )
        self._emit(
            RequestReviewed(
                request_id=req.request_id,
                user_id=req.user_id,
                status=status,
                reviewed_by=reviewer.user_id,
                reason=reason,
            )
        )
        return reviewed

    def approve(self, *, request_id: int, reviewer_id: int) -> VacationRequest:
        return self.review_request(request_id=request_id, reviewer_id=reviewer_id, decision=ReviewDecision.APPROVE)

    def reject(self, *, request_id: int, reviewer_id: int, reason: Optional[str] = None) -> VacationRequest:
        return self.review_request(
            request_id=request_id,
            reviewer_id=reviewer_id,
            decision=ReviewDecision.REJECT,
            reason=reason,
        )

    def cancel_request(self, *, request_id: int, user_id: int) -> None:
        """Employee withdraws their own pending request."""
        req = self._load(request_id)
        if req.user_id != int(user_id):
            raise Forbidden("You can only cancel your own requests")

        with self._serialized(req.user_id, "cancel vacation request"):
            current = self._vacations.get(request_id=req.request_id)
            if not current:
                raise NotFound("Vacation request")
            if not current.is_pending:
                raise AlreadyReviewed(current.status, "Only pending requests may be cancelled")
            self._vacations.delete(request_id=current.request_id)

        logger.info(
            "Vacation request cancelled",
            extra={"event": "request_cancelled", "request_id": req.request_id, "user_id": req.user_id},
        )

    def admin_cancel(self, *, request_id: int, admin_id: int) -> VacationRequest:
        """Administrator removes any request; approved days go back to the balance."""
        self._require_admin(admin_id)
        owner_id = self._load(request_id).user_id

        with self._serialized(owner_id, "cancel vacation request"):
            current = self._vacations.get(request_id=int(request_id))
            if not current:
                raise NotFound("Vacation request")
            self._vacations.delete(request_id=current.request_id)
            if current.is_approved:
                self._ledger.release(current.user_id, current.business_days)

        logger.info(
            "Vacation request removed by administrator",
            extra={
                "event": "request_admin_cancelled",
                "request_id": current.request_id,
                "user_id": current.user_id,
                "reviewer_id": int(admin_id),
                "status": current.status.value,
            },
        )
        return current

    def reset_balances(
        self,
        *,
        admin_id: int,
        new_total: Optional[int] = None,
        clear_history: bool = False,
        confirmed: bool = False,
    ) -> int:
        """Year-end reset: every employee gets ``new_total`` days and zero used.

        With ``clear_history`` all employee requests are deleted as well; that cannot
        be undone, so the caller must pass ``confirmed=True``.
        """
        self._require_admin(admin_id)
        if clear_history and not confirmed:
            raise ValidationError("Clearing vacation history requires explicit confirmation")

        if new_total is None:
            total = self._policy.get().default_vacation_days
        else:
            total = require_non_negative_int(new_total, "New total")

        with storage_guard("reset balances"), self._locks.exclusive(), self._transactions.transaction():
            if clear_history:
                removed = self._vacations.delete_all_for_employees()
                logger.info("Removed %s vacation requests", removed, extra={"event": "history_cleared"})
            affected = self._ledger.reset_all(total)

        self._emit(BalancesReset(new_total=total, clear_history=bool(clear_history), employees_affected=affected))
        return affected

    # -------- queries --------
    def get_request(self, *, request_id: int, caller_id: int) -> VacationRequest:
        req = self._load(request_id)
        if req.user_id != int(caller_id) and self._get_user(caller_id).role != Role.ADMIN:
            raise Forbidden("You can only view your own requests")
        return req

    def list_my_requests(
        self,
        *,
        user_id: int,
        status: Optional[RequestStatus] = None,
        year: Optional[int] = None,
    ) -> Sequence[VacationRequest]:
        with storage_guard("list vacation requests"):
            return self._vacations.list_for_user(
                user_id=int(user_id),
                statuses=[status] if status is not None else None,
                year=year,
                limit=DEFAULT_HISTORY_LIMIT,
            )

    def list_pending(self) -> Sequence[dict]:
        with storage_guard("list pending requests"):
            return self._vacations.list_by_status(status=RequestStatus.PENDING, limit=DEFAULT_PENDING_LIMIT)

    def list_team(self, *, month: int, year: int) -> Sequence[dict]:
        if not 1 <= int(month) <= 12:
            raise ValidationError("Month must be between 1 and 12")
        if not MIN_TEAM_YEAR <= int(year) <= MAX_TEAM_YEAR:
            raise ValidationError("Invalid year")

        last = calendar.monthrange(int(year), int(month))[1]
        with storage_guard("list team vacations"):
            return self._vacations.list_team(
                first_day=date(int(year), int(month), 1),
                last_day=date(int(year), int(month), last),
            )
