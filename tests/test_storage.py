"""Tests for the SQLite storage implementation."""

import threading

import pytest
from datetime import datetime
from decimal import Decimal

from sqlalchemy import create_engine

from ledger.services.storage import (
    ConnectionError,
    NotFoundError,
    SQLitePreferenceStorage,
    SQLiteRecordStorage,
    StorageError,
    get_engine,
)
from tests.helpers import make_raw


class TestRecordStorage:
    """Tests for SQLiteRecordStorage."""

    def test_query_by_date_key(self, record_storage):
        """Test that only the requested day is returned, oldest first."""
        record_storage.insert(make_raw(datetime(2024, 12, 5, 9), True, "10.00", "salary"))
        record_storage.insert(make_raw(datetime(2024, 12, 5, 18), False, "3.50", "coffee"))
        record_storage.insert(make_raw(datetime(2024, 12, 6, 9), False, "1.00"))
        record_storage.insert(make_raw(datetime(2024, 11, 5, 9), False, "2.00"))

        rows = record_storage.query_by_date_key("2024-12", "05")

        assert [r.comment for r in rows] == ["salary", "coffee"]
        assert rows[1].amount == Decimal("3.50")
        assert rows[1].is_income is False

    def test_query_all_is_ordered_by_timestamp(self, record_storage):
        """Test that rows come back in timestamp order whatever the insert order."""
        moments = [datetime(2024, 12, 1), datetime(2024, 10, 1), datetime(2024, 11, 1)]
        for moment in moments:
            record_storage.insert(make_raw(moment, False, "1"))

        assert [r.timestamp for r in record_storage.query_all()] == sorted(moments)

    def test_amount_is_stored_exactly(self, record_storage):
        """Test that decimals survive the round trip unchanged."""
        record_storage.insert(make_raw(datetime(2024, 12, 5), True, "0.1"))
        record_storage.insert(make_raw(datetime(2024, 12, 6), True, "123456789.123"))

        amounts = [r.amount for r in record_storage.query_all()]
        assert amounts == [Decimal("0.1"), Decimal("123456789.123")]

    def test_update_by_timestamp(self, record_storage):
        """Test changing amount and comment."""
        moment = datetime(2024, 12, 5, 12)
        record_storage.insert(make_raw(moment, True, "12.34", "lunch"))

        record_storage.update(moment, Decimal("15.00"), "dinner")

        (row,) = record_storage.query_all()
        assert row.amount == Decimal("15.00")
        assert row.comment == "dinner"
        assert row.is_income is True

    def test_update_missing_record(self, record_storage):
        """Test that updating an unknown timestamp raises NotFoundError."""
        with pytest.raises(NotFoundError):
            record_storage.update(datetime(2024, 1, 1), Decimal("1"), "")

    def test_delete_by_timestamp(self, record_storage):
        """Test removing one record."""
        keep, drop = datetime(2024, 12, 5, 9), datetime(2024, 12, 5, 10)
        record_storage.insert(make_raw(keep, True, "1"))
        record_storage.insert(make_raw(drop, True, "2"))

        record_storage.delete(drop)

        assert [r.timestamp for r in record_storage.query_all()] == [keep]

    def test_delete_missing_record(self, record_storage):
        """Test that deleting an unknown timestamp raises NotFoundError."""
        with pytest.raises(NotFoundError):
            record_storage.delete(datetime(2024, 1, 1))

    def test_duplicate_timestamp_is_a_storage_error(self, record_storage):
        """Test that the unique timestamp is enforced."""
        moment = datetime(2024, 12, 5)
        record_storage.insert(make_raw(moment, True, "1"))
        with pytest.raises(StorageError):
            record_storage.insert(make_raw(moment, False, "2"))

    def test_missing_table_is_a_storage_error(self, tmp_path):
        """Test that database errors are wrapped."""
        bare = create_engine(f"sqlite:///{tmp_path / 'bare.db'}")
        storage = SQLiteRecordStorage(bare)
        with pytest.raises(StorageError):
            storage.query_all()
        bare.dispose()


class TestPreferenceStorage:
    """Tests for SQLitePreferenceStorage."""

    def test_missing_key(self, engine):
        """Test reading a key that was never written."""
        assert SQLitePreferenceStorage(engine).get_bytes("plusButtonPosition") is None

    def test_set_and_replace(self, engine):
        """Test that a second write replaces the first."""
        storage = SQLitePreferenceStorage(engine)
        storage.set_bytes("plusButtonPosition", b"first")
        storage.set_bytes("plusButtonPosition", b"second")
        assert storage.get_bytes("plusButtonPosition") == b"second"


class TestEngine:
    """Tests for engine creation."""

    def test_creates_parent_directory(self, tmp_path):
        """Test that the database directory is created on demand."""
        path = tmp_path / "nested" / "dir" / "ledger.db"
        engine = get_engine(f"sqlite:///{path}")
        assert path.parent.is_dir()
        engine.dispose()

    def test_unopenable_database(self, tmp_path):
        """Test that a directory in place of the file raises ConnectionError."""
        target = tmp_path / "taken"
        target.mkdir()
        with pytest.raises(ConnectionError):
            get_engine(f"sqlite:///{target}")

    @pytest.mark.parametrize("database_url", ["sqlite://", "sqlite:///:memory:"])
    def test_in_memory_database_is_shared_across_threads(self, database_url):
        """Test that a write from another thread is visible to the creating thread."""
        engine = get_engine(database_url)
        storage = SQLiteRecordStorage(engine)

        writer = threading.Thread(
            target=storage.insert,
            args=(make_raw(datetime(2024, 12, 5, 9), True, "10.00", "salary"),),
        )
        writer.start()
        writer.join()

        assert [raw.comment for raw in storage.query_all()] == ["salary"]
        engine.dispose()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
