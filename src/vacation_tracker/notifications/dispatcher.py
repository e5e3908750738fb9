from __future__ import annotations

import logging
from typing import Protocol

from .events import LifecycleEvent

logger = logging.getLogger(__name__)


class NotificationDispatcher(Protocol):
    """Receives lifecycle events and owns delivery. May fail independently."""

    def publish(self, event: LifecycleEvent) -> None:
        raise NotImplementedError


class LoggingNotificationDispatcher(NotificationDispatcher):
    """Default dispatcher: records intents in the application log."""

    def publish(self, event: LifecycleEvent) -> None:
        logger.info("Notification intent %s", event.name, extra=event.to_dict())
