"""Notification intents emitted by the vacation lifecycle.

Delivery (email, chat, ...) belongs to whoever subscribes; these are plain values.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import RequestStatus


@dataclass(frozen=True, kw_only=True)
class LifecycleEvent:
    occurred_at: datetime = field(default_factory=datetime.now, compare=False)

    @property
    def name(self) -> str:
        return type(self).__name__

    def to_dict(self) -> dict:
        payload = asdict(self)
        for key, value in payload.items():
            if isinstance(value, (date, datetime)):
                payload[key] = value.isoformat()
            elif isinstance(value, RequestStatus):
                payload[key] = value.value
        payload["event"] = self.name
        return payload


@dataclass(frozen=True, kw_only=True)
class RequestCreated(LifecycleEvent):
    request_id: int
    user_id: int
    start_date: date
    end_date: date
    business_days: int


@dataclass(frozen=True, kw_only=True)
class RequestReviewed(LifecycleEvent):
    request_id: int
    user_id: int
    status: RequestStatus
    reviewed_by: int
    reason: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class BalancesReset(LifecycleEvent):
    new_total: int
    clear_history: bool
    employees_affected: int
