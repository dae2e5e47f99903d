"""
Storage module for session records.

Provides a unified key-value interface over multiple backends:
- Memory (tests, throwaway local runs)
- SQLite (local development, self-hosted)
- Turso (cloud SQLite)
- Supabase (PostgreSQL key-value table)

Usage:
    from courtside.storage import get_database

    db = get_database()  # Uses DB_TYPE env var
    group = db.get('group:1700000000000:abc123xyz')
"""

from .base import DatabaseInterface
from .factory import get_database, reset_database
from .exceptions import (
    DatabaseError,
    ConnectionError,
    ConfigurationError,
    SchemaError,
    QueryError
)

__all__ = [
    'DatabaseInterface',
    'get_database',
    'reset_database',
    'DatabaseError',
    'ConnectionError',
    'ConfigurationError',
    'SchemaError',
    'QueryError'
]
