"""Services package."""

from ledger.services.storage import (
    ConnectionError,
    NotFoundError,
    PreferenceStorageInterface,
    RecordStorageInterface,
    SQLitePreferenceStorage,
    SQLiteRecordStorage,
    StorageError,
    get_engine,
    session_scope,
)

__all__ = [
    # Storage services
    "ConnectionError",
    "NotFoundError",
    "PreferenceStorageInterface",
    "RecordStorageInterface",
    "SQLitePreferenceStorage",
    "SQLiteRecordStorage",
    "StorageError",
    "get_engine",
    "session_scope",
]
