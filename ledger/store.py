"""
Record Store

The single source of truth for the records currently held in memory, and
the only component that talks to the durable store on their behalf.

Two views are kept:
- Today: the records created on the current day, ordered by id
- Total: every record, grouped into month buckets, ordered by timestamp

DESIGN DECISION: Writes are optimistic. Every mutation is applied in memory
first and then written durably. A failed write is logged and NOT rolled
back, so memory and disk may diverge until the next full reload. Nothing
here ever raises a storage error to the caller.

DESIGN DECISION: The two views are synchronized explicitly. Adding,
editing or deleting a record in one view applies the same change to the
other view when it is loaded. Changes made while the total view is still
being classified are replayed once the classification is published.
"""

import asyncio
import itertools
from bisect import bisect_left
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional, Sequence

import structlog

from ledger.models.record import (
    DATE_FORMAT,
    RawRecord,
    Record,
    Statistics,
    day_key,
    year_month_key,
)
from ledger.queries.classifier import classify
from ledger.queries.locator import NOT_FOUND, SortedRecords, by_id, by_timestamp, locate
from ledger.services.storage import RecordStorageInterface, StorageError


def _sort_and_classify(records: list[Record]) -> list[SortedRecords]:
    """Runs on a worker thread; only touches its own snapshot."""
    records.sort(key=by_timestamp)
    return [SortedRecords(by_timestamp, bucket) for bucket in classify(records)]


def _bucket_month(bucket: SortedRecords) -> str:
    return bucket[0].year_month


class RecordStore:
    """
    In-memory ledger state, bridged to a durable store.

    All methods are meant to be called from one thread (the event loop
    driving the UI). `load_total` is the only coroutine: it hands the month
    classification to a worker thread and publishes the result back on the
    loop.
    """

    def __init__(
        self,
        storage: RecordStorageInterface,
        *,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize the record store.

        Args:
            storage: Durable store backing every record
            clock: Source of "now" for new records and for today's date keys
        """
        self._storage = storage
        self._clock = clock
        self._logger = structlog.get_logger(__name__)

        # Ids are only unique within this store instance
        self._ids = itertools.count()

        self._today = SortedRecords(by_id)
        self._today_loaded = False
        self._is_today_view = True

        self._buckets: list[SortedRecords] = []
        self._total_loaded = False
        self._is_loading = False
        # Bumped on unload so a classification finishing late is discarded
        self._generation = 0
        self._deferred: list[Callable[[], None]] = []

    # =========================================================================
    # STATE
    # =========================================================================

    @property
    def today_records(self) -> list[Record]:
        return self._today.to_list()

    @property
    def classified_records(self) -> list[list[Record]]:
        return [bucket.to_list() for bucket in self._buckets]

    @property
    def is_loading(self) -> bool:
        """True while the total view is being classified."""
        return self._is_loading

    @property
    def is_today_view(self) -> bool:
        return self._is_today_view

    @property
    def record_count(self) -> int:
        """Rows in the active view: records for today, month buckets for total."""
        if self._is_today_view:
            return len(self._today)
        return len(self._buckets)

    @property
    def today_label(self) -> str:
        return self._clock().strftime(DATE_FORMAT)

    # =========================================================================
    # LOADING
    # =========================================================================

    def load_today(self) -> None:
        """
        Load the records created today.

        A no-op if today's batch is already loaded. On a storage failure the
        list stays empty and the next call tries again.
        """
        self._is_today_view = True
        if self._today_loaded:
            return

        now = self._clock()
        year_month, day = year_month_key(now), day_key(now)
        try:
            rows = self._storage.query_by_date_key(year_month, day)
        except StorageError as e:
            self._logger.warning(
                "today_load_failed",
                year_month=year_month,
                day=day,
                error=str(e),
            )
            return

        self._today = SortedRecords(by_id)
        for raw in rows:
            self._today.append(Record.from_raw(next(self._ids), raw))
        self._today_loaded = True
        self._logger.debug("today_loaded", count=len(self._today))

    def unload_today(self) -> None:
        """Drop today's records from memory. Durable storage is untouched."""
        self._is_today_view = False
        self._today.clear()
        self._today_loaded = False

    async def load_total(self) -> None:
        """
        Load every record and group it by month.

        The durable read happens synchronously. Sorting and classification
        run on a worker thread while `is_loading` is True; the buckets and
        the flag are then published together. If `unload_total` ran in the
        meantime, the result is discarded.
        """
        if self._total_loaded:
            return

        try:
            rows = self._storage.query_all()
        except StorageError as e:
            self._logger.warning("total_load_failed", error=str(e))
            return

        self._total_loaded = True
        generation = self._generation
        snapshot = [Record.from_raw(next(self._ids), raw) for raw in rows]

        self._is_loading = True
        try:
            buckets = await asyncio.to_thread(_sort_and_classify, snapshot)
        except BaseException:
            if generation == self._generation:
                self._is_loading = False
                self._total_loaded = False
                self._deferred.clear()
            raise

        if generation != self._generation:
            self._logger.info("stale_classification_discarded", generation=generation)
            return

        self._buckets = buckets
        self._is_loading = False

        deferred, self._deferred = self._deferred, []
        for change in deferred:
            change()
        self._logger.debug("total_loaded", records=len(snapshot), months=len(self._buckets))

    def unload_total(self) -> None:
        """Drop the month buckets from memory and abandon any classification in flight."""
        self._generation += 1
        self._buckets = []
        self._total_loaded = False
        self._is_loading = False
        self._deferred.clear()

    # =========================================================================
    # MUTATIONS
    # =========================================================================

    def add_record(
        self,
        is_income: bool,
        amount: Decimal,
        comment: str = "",
    ) -> Record:
        """
        Create a record now, show it in today's list and persist it.

        Raises:
            pydantic.ValidationError: If the amount is negative
        """
        record = Record(
            id=next(self._ids),
            timestamp=self._clock(),
            is_income=is_income,
            amount=amount,
            comment=comment,
        )
        self._today.append(record)
        self._sync_total(lambda: self._insert_into_total(record))

        try:
            self._storage.insert(RawRecord.from_record(record))
        except StorageError as e:
            self._log_write_failure("insert", record.timestamp, e)
        return record

    def delete_record(self, record_id: int) -> bool:
        """
        Delete a record from the today view.

        Returns:
            True if the durable delete succeeded
        """
        index = self._today.index_of(record_id)
        if index == NOT_FOUND:
            self._logger.warning("record_not_found", view="today", record_id=record_id)
            return False

        record = self._today.remove_at(index)
        self._sync_total(lambda: self._remove_from_total(record.timestamp))
        return self._delete_durable(record.timestamp)

    def delete_total_record(self, record: Record) -> bool:
        """
        Delete a record from the total view.

        The record is matched by equality within its month bucket.

        Returns:
            True if the durable delete succeeded
        """
        position = self._find_in_total(record)
        if position is None:
            self._logger.warning(
                "record_not_found",
                view="total",
                timestamp=record.timestamp.isoformat(),
            )
            return False

        bucket_index, index = position
        self._remove_bucket_item(bucket_index, index)
        if self._today_loaded:
            self._remove_from_today(record.timestamp)
        return self._delete_durable(record.timestamp)

    def edit_record(self, record_id: int, amount: Decimal, comment: str) -> bool:
        """
        Change the amount and comment of a record in the today view.

        Raises:
            pydantic.ValidationError: If the amount is negative

        Returns:
            True if the durable update succeeded
        """
        record = self._today.get(record_id)
        if record is None:
            self._logger.warning("record_not_found", view="today", record_id=record_id)
            return False

        record.amount = amount
        record.comment = comment
        self._sync_total(lambda: self._mirror_edit(self._total_copy(record.timestamp), record))
        return self._update_durable(record)

    def edit_total_record(self, record: Record, amount: Decimal, comment: str) -> bool:
        """
        Change the amount and comment of a record in the total view.

        Raises:
            pydantic.ValidationError: If the amount is negative

        Returns:
            True if the durable update succeeded
        """
        position = self._find_in_total(record)
        if position is None:
            self._logger.warning(
                "record_not_found",
                view="total",
                timestamp=record.timestamp.isoformat(),
            )
            return False

        bucket_index, index = position
        target = self._buckets[bucket_index][index]
        target.amount = amount
        target.comment = comment
        if self._today_loaded:
            self._mirror_edit(self._today_copy(target.timestamp), target)
        return self._update_durable(target)

    # =========================================================================
    # STATISTICS
    # =========================================================================

    def today_statistics(self) -> Statistics:
        """Income and expense totals for today's records."""
        return Statistics.of(self._today)

    def month_statistics(self, bucket: Sequence[Record]) -> Statistics:
        """Income and expense totals for one month bucket."""
        return Statistics.of(bucket)

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _sync_total(self, change: Callable[[], None]) -> None:
        """Apply a change to the total view now, later, or not at all."""
        if self._is_loading:
            self._deferred.append(change)
        elif self._total_loaded:
            change()

    def _bucket_index(self, year_month: str) -> int:
        return locate(self._buckets, year_month, _bucket_month)

    def _find_in_total(self, record: Record) -> Optional[tuple[int, int]]:
        bucket_index = self._bucket_index(record.year_month)
        if bucket_index == NOT_FOUND:
            return None
        bucket = self._buckets[bucket_index]
        index = bucket.index_of(record.timestamp)
        if index == NOT_FOUND or bucket[index] != record:
            return None
        return bucket_index, index

    def _total_copy(self, timestamp: datetime) -> Optional[Record]:
        bucket_index = self._bucket_index(year_month_key(timestamp))
        if bucket_index == NOT_FOUND:
            return None
        return self._buckets[bucket_index].get(timestamp)

    def _today_copy(self, timestamp: datetime) -> Optional[Record]:
        # Today is ordered by id, so a timestamp lookup is a scan
        return next((r for r in self._today if r.timestamp == timestamp), None)

    def _insert_into_total(self, record: Record) -> None:
        month = record.year_month
        bucket_index = self._bucket_index(month)
        if bucket_index != NOT_FOUND:
            self._buckets[bucket_index].insert(record)
            return
        position = bisect_left(self._buckets, month, key=_bucket_month)
        self._buckets.insert(position, SortedRecords(by_timestamp, [record]))

    def _remove_from_total(self, timestamp: datetime) -> None:
        bucket_index = self._bucket_index(year_month_key(timestamp))
        if bucket_index == NOT_FOUND:
            return
        index = self._buckets[bucket_index].index_of(timestamp)
        if index != NOT_FOUND:
            self._remove_bucket_item(bucket_index, index)

    def _remove_bucket_item(self, bucket_index: int, index: int) -> None:
        bucket = self._buckets[bucket_index]
        bucket.remove_at(index)
        if not bucket:
            del self._buckets[bucket_index]

    def _remove_from_today(self, timestamp: datetime) -> None:
        record = self._today_copy(timestamp)
        if record is not None:
            self._today.pop_key(record.id)

    @staticmethod
    def _mirror_edit(copy: Optional[Record], source: Record) -> None:
        if copy is not None and copy is not source:
            copy.amount = source.amount
            copy.comment = source.comment

    def _delete_durable(self, timestamp: datetime) -> bool:
        try:
            self._storage.delete(timestamp)
        except StorageError as e:
            self._log_write_failure("delete", timestamp, e)
            return False
        return True

    def _update_durable(self, record: Record) -> bool:
        try:
            self._storage.update(record.timestamp, record.amount, record.comment)
        except StorageError as e:
            self._log_write_failure("update", record.timestamp, e)
            return False
        return True

    def _log_write_failure(self, operation: str, timestamp: datetime, error: Exception) -> None:
        self._logger.warning(
            "record_write_failed",
            operation=operation,
            timestamp=timestamp.isoformat(),
            error=str(error),
        )
