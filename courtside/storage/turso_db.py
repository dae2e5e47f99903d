"""
Turso key-value storage for session records.

Provides cloud-hosted SQLite-compatible storage using Turso's libSQL.
Key differences from local SQLite:
- Connection via URL + auth token
- No executescript() - execute statements individually
- Row access via index (row[0]) instead of dict key

Requires: pip install libsql-experimental
"""

import os
import json
import threading
from typing import Optional, List, Dict, Any

from .base import DatabaseInterface
from .exceptions import ConfigurationError, ConnectionError, QueryError
from .sqlite_db import like_prefix
from .. import config


class TursoDatabase(DatabaseInterface):
    """
    Turso cloud database implementation.

    Uses libSQL for SQLite-compatible cloud storage with edge replicas.
    A single connection is shared, so statements are serialized with a lock.
    """

    SCHEMA_VERSION = 1

    def __init__(self, table: Optional[str] = None):
        """
        Create Turso database instance.

        Reads configuration from environment variables:
        - TURSO_DATABASE_URL: Database URL (e.g., libsql://your-db.turso.io)
        - TURSO_AUTH_TOKEN: Authentication token
        """
        self._url = os.environ.get('TURSO_DATABASE_URL')
        self._token = os.environ.get('TURSO_AUTH_TOKEN')
        self.table = table or config.KV_TABLE
        self._conn = None
        self._lock = threading.Lock()
        self._initialized = False

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def initialize(self) -> None:
        """Initialize the database connection and schema."""
        if self._initialized:
            return

        if not self._url:
            raise ConfigurationError(
                "TURSO_DATABASE_URL environment variable is required for Turso backend"
            )
        if not self._token:
            raise ConfigurationError(
                "TURSO_AUTH_TOKEN environment variable is required for Turso backend"
            )

        self._init_schema()
        self._initialized = True

    def _get_connection(self):
        """Get or create database connection."""
        if self._conn is None:
            try:
                import libsql_experimental as libsql
            except ImportError:
                raise ConfigurationError(
                    "libsql-experimental package not installed. "
                    "Install with: pip install libsql-experimental"
                )

            try:
                self._conn = libsql.connect(
                    self._url,
                    auth_token=self._token
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Turso: {e}")

        return self._conn

    def close(self) -> None:
        """Close database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def health_check(self) -> bool:
        """Check if the database connection is healthy."""
        try:
            conn = self._get_connection()
            conn.execute("SELECT 1")
            return True
        except Exception:
            return False

    def _init_schema(self) -> None:
        """Initialize database schema."""
        conn = self._get_connection()

        # Execute each statement individually (no executescript in libsql)
        statements = [
            '''CREATE TABLE IF NOT EXISTS metadata (
                key TEXT PRIMARY KEY,
                value TEXT,
                updated_at TEXT DEFAULT CURRENT_TIMESTAMP
            )''',
            f'''CREATE TABLE IF NOT EXISTS {self.table} (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TEXT DEFAULT CURRENT_TIMESTAMP
            )''',
        ]

        with self._lock:
            for stmt in statements:
                conn.execute(stmt)
            conn.execute(
                "INSERT OR REPLACE INTO metadata (key, value) VALUES (?, ?)",
                ('schema_version', str(self.SCHEMA_VERSION))
            )
            conn.commit()

    # =========================================================================
    # KEY-VALUE OPERATIONS
    # =========================================================================

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        """Get a record by key."""
        conn = self._get_connection()
        try:
            with self._lock:
                row = conn.execute(
                    f"SELECT value FROM {self.table} WHERE key = ?", (key,)
                ).fetchone()
        except Exception as e:
            raise QueryError(f"Failed to read {key}: {e}")
        if row is None:
            return None
        return json.loads(row[0])

    def set(self, key: str, record: Dict[str, Any]) -> None:
        """Insert or replace a record."""
        conn = self._get_connection()
        try:
            with self._lock:
                conn.execute(f'''
                    INSERT OR REPLACE INTO {self.table} (key, value, updated_at)
                    VALUES (?, ?, CURRENT_TIMESTAMP)
                ''', (key, json.dumps(record, ensure_ascii=False)))
                conn.commit()
        except Exception as e:
            raise QueryError(f"Failed to write {key}: {e}")

    def get_by_prefix(self, prefix: str) -> List[Dict[str, Any]]:
        """Get all records whose key starts with prefix, ordered by key."""
        conn = self._get_connection()
        try:
            with self._lock:
                rows = conn.execute(
                    f"SELECT value FROM {self.table} WHERE key LIKE ? ESCAPE '\\' ORDER BY key",
                    (like_prefix(prefix),)
                ).fetchall()
        except Exception as e:
            raise QueryError(f"Failed to scan prefix {prefix}: {e}")
        return [json.loads(row[0]) for row in rows]

    # =========================================================================
    # MAINTENANCE
    # =========================================================================

    def clear_all(self) -> None:
        """Delete all records from the database."""
        conn = self._get_connection()
        with self._lock:
            conn.execute(f"DELETE FROM {self.table}")
            conn.commit()
