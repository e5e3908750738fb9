from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator


class UserLocks:
    """Per-user mutexes plus a global barrier for bulk balance rewrites.

    ``for_user`` sections run concurrently for different users and one at a time
    for the same user. ``exclusive`` waits until no ``for_user`` section is active
    and holds new ones off until it finishes (writers are preferred).
    """

    def __init__(self):
        self._registry_guard = threading.Lock()
        self._locks: dict[int, threading.Lock] = {}
        self._cond = threading.Condition()
        self._active = 0
        self._writer = False

    def _lock_for(self, user_id: int) -> threading.Lock:
        with self._registry_guard:
            lock = self._locks.get(int(user_id))
            if lock is None:
                lock = threading.Lock()
                self._locks[int(user_id)] = lock
            return lock

    @contextmanager
    def for_user(self, user_id: int) -> Iterator[None]:
        with self._cond:
            while self._writer:
                self._cond.wait()
            self._active += 1
        try:
            with self._lock_for(user_id):
                yield
        finally:
            with self._cond:
                self._active -= 1
                if self._active == 0:
                    self._cond.notify_all()

    @contextmanager
    def exclusive(self) -> Iterator[None]:
        with self._cond:
            while self._writer:
                self._cond.wait()
            self._writer = True
            while self._active:
                self._cond.wait()
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()
