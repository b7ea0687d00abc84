"""Database package initialization.

This module exposes the public interface of the database package.
"""

from typing import Optional

from .db_core import (
    Database,
    DatabaseConfig,
    DatabaseError,
    ConnectionError,
    SessionError,
)
from .operations import with_retry
from .repository import EventRepository, SqlAlchemyEventRepository, UPDATABLE_FIELDS

_database: Optional[Database] = None


def get_database() -> Database:
    """Return the process-wide database, creating it on first use."""
    global _database
    if _database is None:
        _database = Database()
    return _database


__all__ = [
    # Core database classes
    'Database',
    'DatabaseConfig',
    'get_database',

    # Exceptions
    'DatabaseError',
    'ConnectionError',
    'SessionError',

    # Storage
    'EventRepository',
    'SqlAlchemyEventRepository',
    'UPDATABLE_FIELDS',

    # Utilities
    'with_retry',
]
