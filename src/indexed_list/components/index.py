"""Index Map implementation.

Maps field values to the ascending positions that currently hold them.
Buckets are sortedcontainers.SortedList instances, so positions stay sorted
through every add, shift and reversal.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sortedcontainers import SortedList

from ..core.types import SELF_INDEX, IdentityKey, bucket_key

if TYPE_CHECKING:
    from collections.abc import Hashable, Iterable, Sequence

    from ..core.types import IndexKey, Position, Record

# Marker for records that carry no value under this map's key
_UNINDEXED = object()


class SimpleIndexMap:
    """In-memory value -> positions index for one key.

    Args:
        key: Field name, or SELF_INDEX to index records by identity

    Invariants:
        - Positions within a bucket are ascending and unique
        - Empty buckets are removed
        - Records missing the field are not indexed
    """

    def __init__(self, key: IndexKey):
        self.key = key
        self._buckets: dict[Hashable, SortedList] = {}

    def __repr__(self) -> str:
        return f"SimpleIndexMap({self.key!r}, {len(self._buckets)} values)"

    def _lookup_key(self, value: Any) -> Hashable:
        if self.key is SELF_INDEX:
            return IdentityKey(value)
        return bucket_key(value)

    def _record_key(self, record: Record) -> Any:
        if self.key is SELF_INDEX:
            return IdentityKey(record)
        if self.key not in record:
            return _UNINDEXED
        return bucket_key(record[self.key])

    def build(self, occupied: Iterable[tuple[Position, Record]]) -> None:
        """Discard all buckets and rebuild them from (position, record) pairs."""
        self._buckets = {}
        for position, record in occupied:
            self.add(position, record)

    def add(self, position: Position, record: Record) -> None:
        """Index record at position."""
        key = self._record_key(record)
        if key is _UNINDEXED:
            return
        bucket = self._buckets.get(key)
        if bucket is None:
            bucket = self._buckets[key] = SortedList()
        bucket.add(position)

    def discard(self, position: Position, record: Record) -> None:
        """Remove position from the bucket of record's value, if present."""
        key = self._record_key(record)
        if key is _UNINDEXED:
            return
        bucket = self._buckets.get(key)
        if bucket is None:
            return
        bucket.discard(position)
        if not bucket:
            del self._buckets[key]

    def shift(self, start: Position, delta: int) -> None:
        """Move every indexed position >= start by delta.

        A uniform shift keeps relative order, so each bucket only has its
        tail replaced.
        """
        if delta == 0:
            return
        for bucket in self._buckets.values():
            i = bucket.bisect_left(start)
            if i == len(bucket):
                continue
            moved = bucket[i:]
            del bucket[i:]
            bucket.update(pos + delta for pos in moved)

    def truncate(self, length: int) -> None:
        """Drop every indexed position >= length."""
        for key, bucket in list(self._buckets.items()):
            i = bucket.bisect_left(length)
            if i == len(bucket):
                continue
            del bucket[i:]
            if not bucket:
                del self._buckets[key]

    def reverse(self, length: int) -> None:
        """Map every indexed position p to length - 1 - p."""
        last = length - 1
        for key, bucket in self._buckets.items():
            self._buckets[key] = SortedList(last - pos for pos in bucket)

    def positions(self, value: Any) -> Sequence[Position]:
        """Return the ascending positions holding value (empty if none)."""
        return self._buckets.get(self._lookup_key(value), ())

    def first_from(self, value: Any, start: Position) -> Position:
        """Return the first position >= start holding value, or -1."""
        bucket = self._buckets.get(self._lookup_key(value))
        if bucket is None:
            return -1
        i = bucket.bisect_left(start)
        return bucket[i] if i < len(bucket) else -1

    def as_dict(self) -> dict[Hashable, list[Position]]:
        """Return a plain copy of all buckets, for inspection and comparison.

        Typed keys are unwrapped to their values; identity-matched values
        stay wrapped in IdentityKey.
        """
        return {
            key if isinstance(key, IdentityKey) else key[1]: list(bucket)
            for key, bucket in self._buckets.items()
        }
