"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep the record store decoupled from the database
2. Use failing or recording fakes for testing
3. Swap SQLite for another local backend later

The interface is intentionally small: the record store only ever looks
records up by their date keys or by their creation timestamp.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ledger.models.record import RawRecord


class RecordStorageInterface(ABC):
    """
    Abstract interface for durable record storage.

    Every mutation is committed before the method returns.
    Failures are raised as StorageError.
    """

    @abstractmethod
    def query_by_date_key(self, year_month: str, day: str) -> list[RawRecord]:
        """
        Get all records created on one day.

        Args:
            year_month: Month key, e.g. "2024-12"
            day: Day key, e.g. "05"

        Returns:
            Matching records in insertion order
        """
        pass

    @abstractmethod
    def query_all(self) -> list[RawRecord]:
        """
        Get every stored record.

        Callers must not rely on the order.
        """
        pass

    @abstractmethod
    def insert(self, raw: RawRecord) -> None:
        """
        Store a new record.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def update(self, timestamp: datetime, amount: Decimal, comment: str) -> None:
        """
        Change the amount and comment of the record created at `timestamp`.

        Raises:
            NotFoundError: If no record has that timestamp
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def delete(self, timestamp: datetime) -> None:
        """
        Remove the record created at `timestamp`.

        Raises:
            NotFoundError: If no record has that timestamp
            StorageError: If the write fails
        """
        pass


class PreferenceStorageInterface(ABC):
    """Key/value blob storage for UI preferences."""

    @abstractmethod
    def get_bytes(self, key: str) -> Optional[bytes]:
        """Return the stored blob, or None if the key was never written."""
        pass

    @abstractmethod
    def set_bytes(self, key: str, value: bytes) -> None:
        """Store (or replace) the blob under `key`."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class ConnectionError(StorageError):
    """Could not open the storage backend."""
    pass
