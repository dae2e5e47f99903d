"""Per-group mutual exclusion for aggregate read-modify-write cycles."""

import threading
from contextlib import contextmanager
from typing import Dict, Iterator


class GroupLocks:
    """
    Registry of one lock per group id.

    Every operation that loads, mutates and saves a group runs inside
    ``hold(group_id)`` so two writers on the same group cannot interleave.
    Operations on different groups never block each other.
    """

    def __init__(self) -> None:
        self._locks: Dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, group_id: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(group_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[group_id] = lock
            return lock

    @contextmanager
    def hold(self, group_id: str) -> Iterator[None]:
        """Context manager holding the lock of a group."""
        lock = self._lock_for(group_id)
        with lock:
            yield

    def __len__(self) -> int:
        with self._registry_lock:
            return len(self._locks)
