"""
Custom exceptions for the storage layer.

These exceptions provide clear error categories for key-value store operations:
- DatabaseError: Base exception for all store errors
- ConnectionError: Connection failures
- ConfigurationError: Missing or invalid configuration
- SchemaError: Table initialization issues
- QueryError: Read or write failures
"""


class DatabaseError(Exception):
    """Base exception for all store errors."""
    pass


class ConnectionError(DatabaseError):
    """Failed to connect to the store."""
    pass


class ConfigurationError(DatabaseError):
    """Missing or invalid store configuration."""
    pass


class SchemaError(DatabaseError):
    """Error creating or verifying the key-value table."""
    pass


class QueryError(DatabaseError):
    """Error reading or writing a record."""
    pass
