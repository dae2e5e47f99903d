"""
SQLite key-value storage for session records.

Provides local storage with:
- Atomic transactions for data safety
- Concurrent read access via WAL mode
- Connection per thread

This is the SQLite implementation of the DatabaseInterface.
"""

import sqlite3
import json
from contextlib import contextmanager
from pathlib import Path
from typing import Optional, Iterator, List, Dict, Any
import threading

from .base import DatabaseInterface
from .exceptions import QueryError, SchemaError
from .. import config


def like_prefix(prefix: str) -> str:
    """Build a LIKE pattern matching keys that start with prefix."""
    escaped = prefix.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')
    return escaped + '%'


class SQLiteDatabase(DatabaseInterface):
    """
    SQLite database for session record storage.
    Thread-safe with connection per thread.

    Implements the DatabaseInterface abstract base class.
    """

    SCHEMA_VERSION = 1

    def __init__(self, db_path: str = "data/courtside.db", table: Optional[str] = None):
        """
        Create SQLite database instance.

        Args:
            db_path: Path to the SQLite database file
            table: Key-value table name (defaults to config.KV_TABLE)
        """
        self.db_path = Path(db_path)
        self.table = table or config.KV_TABLE
        self._local = threading.local()
        self._initialized = False

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def initialize(self) -> None:
        """Initialize the database connection and schema."""
        if self._initialized:
            return

        # Ensure parent directory exists
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            self._init_schema()
        except sqlite3.Error as e:
            raise SchemaError(f"Failed to initialize SQLite schema: {e}")
        self._initialized = True

    def close(self) -> None:
        """Close database connections and clean up resources."""
        if hasattr(self._local, 'conn') and self._local.conn is not None:
            self._local.conn.close()
            self._local.conn = None

    def health_check(self) -> bool:
        """Check if the database connection is healthy."""
        try:
            conn = self._get_connection()
            conn.execute("SELECT 1")
            return True
        except Exception:
            return False

    # =========================================================================
    # CONNECTION MANAGEMENT
    # =========================================================================

    def _get_connection(self) -> sqlite3.Connection:
        """Get thread-local database connection."""
        if not hasattr(self._local, 'conn') or self._local.conn is None:
            self._local.conn = sqlite3.connect(
                str(self.db_path),
                check_same_thread=False,
                timeout=30.0
            )
            self._local.conn.row_factory = sqlite3.Row
            # Enable WAL mode for better concurrent access
            self._local.conn.execute("PRAGMA journal_mode=WAL")
            self._local.conn.execute("PRAGMA synchronous=NORMAL")
        return self._local.conn

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Context manager for database transactions."""
        conn = self._get_connection()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise

    def _init_schema(self) -> None:
        """Initialize database schema."""
        with self.transaction() as conn:
            conn.executescript(f'''
                -- Metadata table
                CREATE TABLE IF NOT EXISTS metadata (
                    key TEXT PRIMARY KEY,
                    value TEXT,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                );

                -- Session records (groups, matches)
                CREATE TABLE IF NOT EXISTS {self.table} (
                    key TEXT PRIMARY KEY,
                    value JSON NOT NULL,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                );
            ''')

            conn.execute(
                "INSERT OR REPLACE INTO metadata (key, value) VALUES (?, ?)",
                ('schema_version', str(self.SCHEMA_VERSION))
            )

    # =========================================================================
    # KEY-VALUE OPERATIONS
    # =========================================================================

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        """Get a record by key."""
        try:
            conn = self._get_connection()
            row = conn.execute(
                f"SELECT value FROM {self.table} WHERE key = ?", (key,)
            ).fetchone()
        except sqlite3.Error as e:
            raise QueryError(f"Failed to read {key}: {e}")
        if row is None:
            return None
        return json.loads(row['value'])

    def set(self, key: str, record: Dict[str, Any]) -> None:
        """Insert or replace a record."""
        try:
            with self.transaction() as conn:
                conn.execute(f'''
                    INSERT OR REPLACE INTO {self.table} (key, value, updated_at)
                    VALUES (?, ?, CURRENT_TIMESTAMP)
                ''', (key, json.dumps(record, ensure_ascii=False)))
        except sqlite3.Error as e:
            raise QueryError(f"Failed to write {key}: {e}")

    def get_by_prefix(self, prefix: str) -> List[Dict[str, Any]]:
        """Get all records whose key starts with prefix, ordered by key."""
        try:
            conn = self._get_connection()
            rows = conn.execute(
                f"SELECT value FROM {self.table} WHERE key LIKE ? ESCAPE '\\' ORDER BY key",
                (like_prefix(prefix),)
            ).fetchall()
        except sqlite3.Error as e:
            raise QueryError(f"Failed to scan prefix {prefix}: {e}")
        return [json.loads(row['value']) for row in rows]

    # =========================================================================
    # MAINTENANCE
    # =========================================================================

    def clear_all(self) -> None:
        """Delete all records from the database."""
        with self.transaction() as conn:
            conn.execute(f"DELETE FROM {self.table}")

