from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from ..core.exceptions import DomainError, InternalError

logger = logging.getLogger(__name__)


@contextmanager
def storage_guard(action: str) -> Iterator[None]:
    """Re-raise unexpected dependency failures as InternalError.

    Business errors and already-wrapped failures pass through untouched.
    """
    try:
        yield
    except (DomainError, InternalError):
        raise
    except Exception as exc:
        logger.exception("Failed to %s", action, extra={"event": "internal_error"})
        raise InternalError(f"Failed to {action}") from exc
