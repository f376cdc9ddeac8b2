"""Record classification and lookup package."""

from ledger.queries.classifier import classify, month_of
from ledger.queries.locator import (
    NOT_FOUND,
    SortedRecords,
    by_id,
    by_timestamp,
    locate,
)

__all__ = [
    "NOT_FOUND",
    "SortedRecords",
    "by_id",
    "by_timestamp",
    "classify",
    "locate",
    "month_of",
]
