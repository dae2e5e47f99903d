"""
Application configuration.

Loads settings from environment variables with sensible defaults.
"""

import os


def _get_int(key: str, default: int) -> int:
    """Get integer from environment variable."""
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_bool(key: str, default: bool) -> bool:
    """Get boolean from environment variable."""
    value = os.environ.get(key)
    if value is None:
        return default
    return value.lower() in ('true', '1', 'yes')


def _get_str(key: str, default: str) -> str:
    """Get string from environment variable."""
    return os.environ.get(key, default)


def get_data_dir() -> str:
    """
    Resolve the data directory.

    Priority: DATA_DIR > RAILWAY_VOLUME_MOUNT_PATH > /app/data (container) > data (local)
    """
    return (
        os.environ.get('DATA_DIR') or
        os.environ.get('RAILWAY_VOLUME_MOUNT_PATH') or
        ('/app/data' if os.path.exists('/app') else 'data')
    )


# =============================================================================
# SERVER SETTINGS
# =============================================================================
PORT = _get_int('PORT', 8000)
HOST = _get_str('HOST', '0.0.0.0')

# Comma separated list, "*" allows any origin
CORS_ORIGINS = _get_str('CORS_ORIGINS', '*')

# =============================================================================
# STORAGE SETTINGS
# =============================================================================
# Backend: sqlite (default), memory, turso, supabase
DB_TYPE = _get_str('DB_TYPE', 'sqlite')

DATA_DIR = get_data_dir()
SQLITE_FILENAME = _get_str('SQLITE_FILENAME', 'courtside.db')

# Key-value table shared by the sqlite, turso and supabase backends
KV_TABLE = _get_str('KV_TABLE', 'kv_store')

SUPABASE_URL = _get_str('SUPABASE_URL', '')
SUPABASE_KEY = _get_str('SUPABASE_KEY', '')

# =============================================================================
# AUTH SETTINGS
# =============================================================================
# Resolver: static (default, token map below) or supabase
AUTH_TYPE = _get_str('AUTH_TYPE', 'static')

# "token:user_id,token2:user_id2"
AUTH_STATIC_TOKENS = _get_str('AUTH_STATIC_TOKENS', '')

# How long a resolved credential is remembered (in seconds)
AUTH_CACHE_TTL_SECONDS = _get_int('AUTH_CACHE_TTL_SECONDS', 300)
AUTH_TIMEOUT_SECONDS = _get_int('AUTH_TIMEOUT_SECONDS', 10)

# =============================================================================
# MATCHMAKING
# =============================================================================
DEFAULT_PREFER_SAME_LEVEL = _get_bool('DEFAULT_PREFER_SAME_LEVEL', True)

# =============================================================================
# LOGGING
# =============================================================================
LOG_LEVEL = _get_str('LOG_LEVEL', 'INFO')
