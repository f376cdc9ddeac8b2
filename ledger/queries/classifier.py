"""
Month Classification

Groups a timestamp-sorted sequence of records into contiguous buckets that
share a month key. This is a single linear scan: a new bucket starts
whenever the key differs from the previous record's. Non-contiguous runs of
the same month are NOT merged, so the input must already be sorted.

The function is pure and touches nothing but its input, which is what lets
the record store run it on a worker thread.
"""

from typing import Callable, Iterable

from ledger.models.record import Record


def month_of(record: Record) -> str:
    return record.year_month


def classify(
    records: Iterable[Record],
    key: Callable[[Record], str] = month_of,
) -> list[list[Record]]:
    """
    Split records into runs sharing the same key.

    Returns:
        Non-empty buckets in order of first appearance
    """
    buckets: list[list[Record]] = []
    current: list[Record] = []
    current_key = None

    for record in records:
        record_key = key(record)
        if current and record_key != current_key:
            buckets.append(current)
            current = []
        current_key = record_key
        current.append(record)

    if current:
        buckets.append(current)

    return buckets
