"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Currently implements a local SQLite file as the backend.
"""

from ledger.services.storage.interface import (
    ConnectionError,
    NotFoundError,
    PreferenceStorageInterface,
    RecordStorageInterface,
    StorageError,
)
from ledger.services.storage.client import get_engine, session_scope
from ledger.services.storage.sqlite import (
    SQLitePreferenceStorage,
    SQLiteRecordStorage,
)

__all__ = [
    # Interfaces
    "PreferenceStorageInterface",
    "RecordStorageInterface",
    # Exceptions
    "ConnectionError",
    "NotFoundError",
    "StorageError",
    # SQLite implementation
    "SQLitePreferenceStorage",
    "SQLiteRecordStorage",
    "get_engine",
    "session_scope",
]
