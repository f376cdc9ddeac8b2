"""
SQLite Storage Implementation

DESIGN DECISION: A single local SQLite file holds every record and the
UI preferences. The ledger is single-user and offline, so there is no
server to configure and the file doubles as the backup.

TRADEOFFS:
- One writer at a time (fine: the record store is the only writer)
- No retries: a failed write is reported and the caller decides

The implementation follows the abstract interface, so the record store
never imports SQLAlchemy.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import delete, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from ledger.models.record import RawRecord
from ledger.services.storage.client import session_scope
from ledger.services.storage.interface import (
    NotFoundError,
    PreferenceStorageInterface,
    RecordStorageInterface,
    StorageError,
)
from ledger.services.storage.tables import PreferenceRow, RecordRow


def _row_to_raw(row: RecordRow) -> RawRecord:
    return RawRecord(
        year_month=row.year_month,
        day=row.day,
        timestamp=row.timestamp,
        is_income=row.is_income,
        amount=row.amount,
        comment=row.comment,
    )


class SQLiteRecordStorage(RecordStorageInterface):
    """
    SQLite implementation of record storage.

    Records are looked up by their creation timestamp, which is unique.
    """

    def __init__(self, engine: Engine):
        self._engine = engine

    def query_by_date_key(self, year_month: str, day: str) -> list[RawRecord]:
        """Get all records created on one day, oldest first."""
        stmt = (
            select(RecordRow)
            .where(RecordRow.year_month == year_month, RecordRow.day == day)
            .order_by(RecordRow.pk)
        )
        try:
            with session_scope(self._engine) as session:
                return [_row_to_raw(row) for row in session.scalars(stmt)]
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to query records for {year_month}-{day}: {e}")

    def query_all(self) -> list[RawRecord]:
        """Get every record, ordered by timestamp."""
        stmt = select(RecordRow).order_by(RecordRow.timestamp)
        try:
            with session_scope(self._engine) as session:
                return [_row_to_raw(row) for row in session.scalars(stmt)]
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to query records: {e}")

    def insert(self, raw: RawRecord) -> None:
        row = RecordRow(
            year_month=raw.year_month,
            day=raw.day,
            timestamp=raw.timestamp,
            is_income=raw.is_income,
            amount=raw.amount,
            comment=raw.comment,
        )
        try:
            with session_scope(self._engine) as session:
                session.add(row)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to insert record {raw.timestamp.isoformat()}: {e}")

    def update(self, timestamp: datetime, amount: Decimal, comment: str) -> None:
        stmt = (
            update(RecordRow)
            .where(RecordRow.timestamp == timestamp)
            .values(amount=amount, comment=comment)
        )
        try:
            with session_scope(self._engine) as session:
                result = session.execute(stmt)
                if result.rowcount == 0:
                    raise NotFoundError(f"Record not found: {timestamp.isoformat()}")
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to update record {timestamp.isoformat()}: {e}")

    def delete(self, timestamp: datetime) -> None:
        stmt = delete(RecordRow).where(RecordRow.timestamp == timestamp)
        try:
            with session_scope(self._engine) as session:
                result = session.execute(stmt)
                if result.rowcount == 0:
                    raise NotFoundError(f"Record not found: {timestamp.isoformat()}")
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to delete record {timestamp.isoformat()}: {e}")


class SQLitePreferenceStorage(PreferenceStorageInterface):
    """Preference blobs in the same database file as the records."""

    def __init__(self, engine: Engine):
        self._engine = engine

    def get_bytes(self, key: str) -> Optional[bytes]:
        try:
            with session_scope(self._engine) as session:
                row = session.get(PreferenceRow, key)
                return row.value if row else None
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to read preference {key}: {e}")

    def set_bytes(self, key: str, value: bytes) -> None:
        try:
            with session_scope(self._engine) as session:
                session.merge(PreferenceRow(key=key, value=value))
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to write preference {key}: {e}")
