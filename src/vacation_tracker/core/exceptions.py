from __future__ import annotations

from typing import Any, Optional


class AppError(Exception):
    """Base for errors rendered to callers.

    ``code`` is stable and meant for callers to branch on; the message is for humans.
    """

    code = "APP_ERROR"
    default_message = "Request failed"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)

    def details(self) -> dict[str, Any]:
        return {}


class DomainError(AppError):
    """Base exception for business rule violations."""

    code = "DOMAIN_ERROR"
    default_message = "Business rule violated"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "VALIDATION_ERROR"
    default_message = "Invalid input"


class InvalidDateRange(ValidationError):
    """End date before start date, or a range with zero business days."""

    code = "INVALID_DATE_RANGE"
    default_message = "End date must be on or after start date"


class PastDate(ValidationError):
    code = "DATE_IN_PAST"
    default_message = "Start date cannot be in the past"


class OverlappingRequest(DomainError):
    code = "OVERLAPPING_REQUEST"
    default_message = "Request overlaps with an existing vacation"

    def __init__(self, conflicting_request_id: Optional[int] = None):
        self.conflicting_request_id = conflicting_request_id
        super().__init__()

    def details(self) -> dict[str, Any]:
        if self.conflicting_request_id is None:
            return {}
        return {"conflicting_request_id": self.conflicting_request_id}


class InsufficientBalance(DomainError):
    code = "INSUFFICIENT_BALANCE"

    def __init__(self, requested: int, available: int):
        self.requested = int(requested)
        self.available = int(available)
        super().__init__(
            f"Insufficient vacation balance: requested {self.requested} days, {self.available} available"
        )

    @property
    def shortfall(self) -> int:
        return max(self.requested - self.available, 0)

    def details(self) -> dict[str, Any]:
        return {"requested": self.requested, "available": self.available, "shortfall": self.shortfall}


class AlreadyReviewed(DomainError):
    """Raised when a decided request is reviewed or cancelled again."""

    code = "ALREADY_REVIEWED"

    def __init__(self, status, message: Optional[str] = None):
        self.status = status
        value = getattr(status, "value", status)
        super().__init__(message or f"Request has already been {value}")

    def details(self) -> dict[str, Any]:
        return {"status": getattr(self.status, "value", self.status)}


class NotFound(DomainError):
    code = "NOT_FOUND"

    def __init__(self, resource: str = "resource"):
        self.resource = resource
        super().__init__(f"{resource} not found")

    def details(self) -> dict[str, Any]:
        return {"resource": self.resource}


class Forbidden(DomainError):
    """Raised when a user lacks permission for an action."""

    code = "FORBIDDEN"
    default_message = "You are not allowed to perform this action"


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    code = "INVALID_CREDENTIALS"
    default_message = "Invalid username or password"


class InternalError(AppError):
    """Unexpected failure from a dependency (storage, transport).

    Not a DomainError; the underlying exception is chained as ``__cause__``.
    """

    code = "INTERNAL_ERROR"
    default_message = "Internal error"
