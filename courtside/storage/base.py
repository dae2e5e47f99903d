"""
Abstract base class defining the key-value store interface.

All store implementations must inherit from this class and implement
all abstract methods. This ensures consistent behavior across backends.
"""

from abc import ABC, abstractmethod
from typing import Optional, List, Dict, Any


class DatabaseInterface(ABC):
    """
    Abstract interface for session record storage.

    Records are opaque JSON-serializable dictionaries addressed by string keys.
    Keys carry a kind prefix ("group:", "match:") so related records can be
    listed with a prefix scan.

    Methods should be thread-safe where applicable.
    """

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    @abstractmethod
    def initialize(self) -> None:
        """
        Initialize the store connection and schema.

        Called once when the store is first created.
        Should create the key-value table if it doesn't exist.
        Should be idempotent (safe to call multiple times).
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """
        Close connections and clean up resources.

        Should be called when the application shuts down.
        """
        pass

    @abstractmethod
    def health_check(self) -> bool:
        """
        Check if the store is reachable.

        Returns:
            True if the store is accessible, False otherwise
        """
        pass

    # =========================================================================
    # KEY-VALUE OPERATIONS
    # =========================================================================

    @abstractmethod
    def get(self, key: str) -> Optional[Dict[str, Any]]:
        """
        Get a single record.

        Args:
            key: Record key

        Returns:
            The stored record, or None if the key is absent

        Raises:
            QueryError: If the read fails
        """
        pass

    @abstractmethod
    def set(self, key: str, record: Dict[str, Any]) -> None:
        """
        Insert or replace a record.

        Args:
            key: Record key
            record: JSON-serializable dictionary

        Raises:
            QueryError: If the write fails. A failed write must never be
                reported as success.
        """
        pass

    @abstractmethod
    def get_by_prefix(self, prefix: str) -> List[Dict[str, Any]]:
        """
        Get all records whose key starts with a prefix.

        Args:
            prefix: Key prefix, e.g. "group:"

        Returns:
            List of records ordered by key ascending
        """
        pass

    # =========================================================================
    # MAINTENANCE
    # =========================================================================

    @abstractmethod
    def clear_all(self) -> None:
        """
        Delete every record.

        Used for testing. Does not drop the table, just data.
        """
        pass
