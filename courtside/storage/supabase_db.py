"""
Supabase key-value storage for session records.

Provides PostgreSQL-based cloud storage using Supabase's REST API.
Key differences from SQLite:
- Uses supabase-py client library (REST API)
- upsert() instead of INSERT OR REPLACE
- like() for prefix scans
- value column is jsonb, so records round-trip without json.dumps
- initialize() verifies the table exists (doesn't create it)

Requires: pip install supabase
The table must be created first:

    CREATE TABLE kv_store (key TEXT PRIMARY KEY, value JSONB NOT NULL);
"""

import os
from typing import Optional, List, Dict, Any

from .base import DatabaseInterface
from .exceptions import ConfigurationError, ConnectionError, QueryError
from .sqlite_db import like_prefix
from .. import config


class SupabaseDatabase(DatabaseInterface):
    """
    Supabase cloud database implementation.

    Uses PostgreSQL via Supabase's REST API.
    Implements the DatabaseInterface abstract base class.
    """

    def __init__(self, table: Optional[str] = None):
        """
        Create Supabase database instance.

        Reads configuration from environment variables:
        - SUPABASE_URL: Project URL (e.g., https://your-project.supabase.co)
        - SUPABASE_KEY: Service role key (the key-value table is server-side only)
        """
        self._url = os.environ.get('SUPABASE_URL')
        self._key = os.environ.get('SUPABASE_KEY')
        self.table = table or config.KV_TABLE
        self._client = None
        self._initialized = False

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def initialize(self) -> None:
        """Initialize the database connection and verify schema."""
        if self._initialized:
            return

        if not self._url:
            raise ConfigurationError(
                "SUPABASE_URL environment variable is required for Supabase backend"
            )
        if not self._key:
            raise ConfigurationError(
                "SUPABASE_KEY environment variable is required for Supabase backend"
            )

        client = self._get_client()
        try:
            client.table(self.table).select('key').limit(1).execute()
        except Exception as e:
            raise ConnectionError(
                f"Failed to connect to Supabase or table '{self.table}' missing. "
                f"Error: {e}"
            )

        self._initialized = True

    def _get_client(self):
        """Get or create Supabase client."""
        if self._client is None:
            try:
                from supabase import create_client
            except ImportError:
                raise ConfigurationError(
                    "supabase package not installed. "
                    "Install with: pip install supabase"
                )

            try:
                self._client = create_client(self._url, self._key)
            except Exception as e:
                raise ConnectionError(f"Failed to create Supabase client: {e}")

        return self._client

    def close(self) -> None:
        """Close database connection (no-op for Supabase REST API)."""
        # REST API doesn't maintain persistent connections
        self._client = None

    def health_check(self) -> bool:
        """Check if the database connection is healthy."""
        try:
            client = self._get_client()
            client.table(self.table).select('key').limit(1).execute()
            return True
        except Exception:
            return False

    # =========================================================================
    # KEY-VALUE OPERATIONS
    # =========================================================================

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        """Get a record by key."""
        client = self._get_client()
        try:
            response = (
                client.table(self.table)
                .select('value')
                .eq('key', key)
                .limit(1)
                .execute()
            )
        except Exception as e:
            raise QueryError(f"Failed to read {key}: {e}")
        if not response.data:
            return None
        return response.data[0]['value']

    def set(self, key: str, record: Dict[str, Any]) -> None:
        """Insert or replace a record."""
        client = self._get_client()
        try:
            client.table(self.table).upsert(
                {'key': key, 'value': record}, on_conflict='key'
            ).execute()
        except Exception as e:
            raise QueryError(f"Failed to write {key}: {e}")

    def get_by_prefix(self, prefix: str) -> List[Dict[str, Any]]:
        """Get all records whose key starts with prefix, ordered by key."""
        client = self._get_client()
        try:
            response = (
                client.table(self.table)
                .select('key, value')
                .like('key', like_prefix(prefix))
                .order('key')
                .execute()
            )
        except Exception as e:
            raise QueryError(f"Failed to scan prefix {prefix}: {e}")
        return [row['value'] for row in response.data or []]

    # =========================================================================
    # MAINTENANCE
    # =========================================================================

    def clear_all(self) -> None:
        """Delete all records from the table."""
        client = self._get_client()
        # Supabase requires a filter for delete; key is never empty
        client.table(self.table).delete().neq('key', '').execute()
