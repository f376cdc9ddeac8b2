"""
Record Lookup

Edits and deletes address a record by key: the today view by its id, the
total view by its creation timestamp. Both collections are kept sorted on
that key so a lookup is a binary search instead of a scan.

DESIGN DECISION: The ordering is owned by SortedRecords, not by the
callers. Appending a record out of order fails loudly instead of silently
breaking later lookups.
"""

from bisect import bisect_left
from typing import Any, Callable, Iterator, Optional, Sequence

from ledger.models.record import Record


NOT_FOUND = -1

KeyFunc = Callable[[Record], Any]


def by_id(record: Record) -> int:
    return record.id


def by_timestamp(record: Record):
    return record.timestamp


def locate(items: Sequence[Any], target: Any, key: Callable[[Any], Any]) -> int:
    """
    Binary search for the record whose key equals `target`.

    `items` must be sorted ascending by `key` with no duplicate keys.

    Returns:
        The index of the match, or NOT_FOUND
    """
    index = bisect_left(items, target, key=key)
    if index < len(items) and key(items[index]) == target:
        return index
    return NOT_FOUND


class SortedRecords:
    """A list of records kept in ascending order of `key`."""

    def __init__(self, key: KeyFunc, records: Optional[Sequence[Record]] = None):
        self._key = key
        self._items: list[Record] = sorted(records or [], key=key)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Record]:
        return iter(self._items)

    def __getitem__(self, index: int) -> Record:
        return self._items[index]

    def __bool__(self) -> bool:
        return bool(self._items)

    def __repr__(self) -> str:
        return f"SortedRecords({self._items!r})"

    def append(self, record: Record) -> None:
        """
        Add a record whose key is greater than every key held.

        Raises:
            ValueError: If the record would break the ordering
        """
        if self._items and self._key(record) <= self._key(self._items[-1]):
            raise ValueError(
                f"Record key {self._key(record)!r} is not greater than "
                f"{self._key(self._items[-1])!r}"
            )
        self._items.append(record)

    def insert(self, record: Record) -> int:
        """Place a record at its sorted position and return that index."""
        index = bisect_left(self._items, self._key(record), key=self._key)
        self._items.insert(index, record)
        return index

    def index_of(self, target: Any) -> int:
        return locate(self._items, target, self._key)

    def get(self, target: Any) -> Optional[Record]:
        index = self.index_of(target)
        return None if index == NOT_FOUND else self._items[index]

    def remove_at(self, index: int) -> Record:
        return self._items.pop(index)

    def pop_key(self, target: Any) -> Optional[Record]:
        """Remove and return the record with key `target`, if present."""
        index = self.index_of(target)
        if index == NOT_FOUND:
            return None
        return self._items.pop(index)

    def clear(self) -> None:
        self._items.clear()

    def to_list(self) -> list[Record]:
        return list(self._items)
