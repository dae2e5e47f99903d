"""In-memory key-value store."""

import copy
import threading
from typing import Optional, List, Dict, Any

from .base import DatabaseInterface


class MemoryDatabase(DatabaseInterface):
    """
    Thread-safe dictionary store.

    Records are deep-copied on the way in and out so callers never share
    mutable state with the store, mirroring a real serialize/deserialize
    round trip.
    """

    def __init__(self) -> None:
        self._records: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.RLock()

    def initialize(self) -> None:
        """Nothing to set up."""
        pass

    def close(self) -> None:
        """Nothing to release; records survive until clear_all()."""
        pass

    def health_check(self) -> bool:
        return True

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            record = self._records.get(key)
            return copy.deepcopy(record) if record is not None else None

    def set(self, key: str, record: Dict[str, Any]) -> None:
        with self._lock:
            self._records[key] = copy.deepcopy(record)

    def get_by_prefix(self, prefix: str) -> List[Dict[str, Any]]:
        with self._lock:
            return [
                copy.deepcopy(self._records[key])
                for key in sorted(self._records)
                if key.startswith(prefix)
            ]

    def clear_all(self) -> None:
        with self._lock:
            self._records.clear()
