"""
Factory function to create the appropriate store implementation.

Reads configuration from environment variables to determine which
backend to use.
"""

import logging
import os
from typing import Optional

from .base import DatabaseInterface
from .exceptions import ConfigurationError
from .. import config

logger = logging.getLogger(__name__)


# Singleton instance
_db_instance: Optional[DatabaseInterface] = None


def get_database() -> DatabaseInterface:
    """
    Get or create the store instance.

    Uses the DB_TYPE environment variable to determine which implementation:
    - "sqlite" (default): Local SQLite database
    - "memory": In-process dictionary
    - "turso": Turso cloud database
    - "supabase": Supabase PostgreSQL key-value table

    Additional environment variables per type:
    - SQLite: DATA_DIR or RAILWAY_VOLUME_MOUNT_PATH, or uses "data" directory
    - Turso: TURSO_DATABASE_URL, TURSO_AUTH_TOKEN
    - Supabase: SUPABASE_URL, SUPABASE_KEY

    Returns:
        DatabaseInterface implementation

    Raises:
        ConfigurationError: If required env vars are missing
    """
    global _db_instance

    if _db_instance is not None:
        return _db_instance

    db_type = os.environ.get('DB_TYPE', 'sqlite').lower()
    logger.info(f"Database type: {db_type}")

    if db_type == 'sqlite':
        from .sqlite_db import SQLiteDatabase

        db_path = os.path.join(config.get_data_dir(), config.SQLITE_FILENAME)
        _db_instance = SQLiteDatabase(db_path=db_path)

    elif db_type == 'memory':
        from .memory_db import MemoryDatabase
        _db_instance = MemoryDatabase()

    elif db_type == 'turso':
        from .turso_db import TursoDatabase
        _db_instance = TursoDatabase()

    elif db_type == 'supabase':
        from .supabase_db import SupabaseDatabase
        _db_instance = SupabaseDatabase()

    else:
        raise ConfigurationError(
            f"Unknown DB_TYPE: {db_type}. "
            f"Valid options: sqlite, memory, turso, supabase"
        )

    # Initialize the store
    _db_instance.initialize()

    return _db_instance


def reset_database() -> None:
    """
    Reset the store singleton.

    Used for testing or when switching configurations.
    """
    global _db_instance
    if _db_instance is not None:
        _db_instance.close()
        _db_instance = None
