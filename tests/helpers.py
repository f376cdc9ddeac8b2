"""Test helpers: a ticking clock, storage fakes and row builders."""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

from ledger.models.record import RawRecord, day_key, year_month_key
from ledger.services.storage import (
    PreferenceStorageInterface,
    RecordStorageInterface,
    SQLiteRecordStorage,
    StorageError,
)


class TickingClock:
    """Returns a fixed instant, one second later on every call."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now = current + timedelta(seconds=1)
        return current


class CountingRecordStorage(SQLiteRecordStorage):
    """SQLite storage that counts reads."""

    def __init__(self, engine):
        super().__init__(engine)
        self.day_queries = 0
        self.full_queries = 0

    def query_by_date_key(self, year_month, day):
        self.day_queries += 1
        return super().query_by_date_key(year_month, day)

    def query_all(self):
        self.full_queries += 1
        return super().query_all()


class FlakyRecordStorage(SQLiteRecordStorage):
    """SQLite storage whose calls fail while `broken` is set."""

    def __init__(self, engine):
        super().__init__(engine)
        self.broken = False

    def _check(self):
        if self.broken:
            raise StorageError("disk I/O error")

    def query_by_date_key(self, year_month, day):
        self._check()
        return super().query_by_date_key(year_month, day)

    def query_all(self):
        self._check()
        return super().query_all()

    def insert(self, raw):
        self._check()
        super().insert(raw)

    def update(self, timestamp, amount, comment):
        self._check()
        super().update(timestamp, amount, comment)

    def delete(self, timestamp):
        self._check()
        super().delete(timestamp)


class FailingRecordStorage(RecordStorageInterface):
    """Every call fails the way a broken database would."""

    def query_by_date_key(self, year_month, day):
        raise StorageError("disk I/O error")

    def query_all(self):
        raise StorageError("disk I/O error")

    def insert(self, raw):
        raise StorageError("disk I/O error")

    def update(self, timestamp, amount, comment):
        raise StorageError("disk I/O error")

    def delete(self, timestamp):
        raise StorageError("disk I/O error")


class RecordingPreferenceStorage(PreferenceStorageInterface):
    """In-memory blob storage that remembers every write."""

    def __init__(self, initial: Optional[dict[str, bytes]] = None, broken: bool = False):
        self.values: dict[str, bytes] = dict(initial or {})
        self.writes: list[tuple[str, bytes]] = []
        self.broken = broken

    def get_bytes(self, key):
        if self.broken:
            raise StorageError("preferences unavailable")
        return self.values.get(key)

    def set_bytes(self, key, value):
        if self.broken:
            raise StorageError("preferences unavailable")
        self.writes.append((key, value))
        self.values[key] = value


def make_raw(moment: datetime, is_income: bool, amount: str, comment: str = "") -> RawRecord:
    return RawRecord(
        year_month=year_month_key(moment),
        day=day_key(moment),
        timestamp=moment,
        is_income=is_income,
        amount=Decimal(amount),
        comment=comment,
    )
