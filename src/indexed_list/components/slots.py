"""Sorted slot store implementation.

Uses sortedcontainers.SortedDict to map positions to records, so holes are
simply positions without an entry.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sortedcontainers import SortedDict

if TYPE_CHECKING:
    from collections.abc import Iterator

    from ..core.types import Position, Record


class SimpleSlotStore:
    """Ordered, position-addressed storage holding records and holes.

    Invariants:
        - Every stored key is in range(len(self))
        - Keys are always maintained in ascending order
        - A hole is an in-range position with no stored key
    """

    def __init__(self):
        """Initialize empty store."""
        self._data: SortedDict = SortedDict()
        self._length: int = 0

    def __len__(self) -> int:
        return self._length

    def __iter__(self) -> Iterator[Record | None]:
        data = self._data
        for position in range(self._length):
            yield data.get(position)

    def get(self, position: Position) -> Record | None:
        """Return the record at position, or None for a hole."""
        return self._data.get(position)

    def is_hole(self, position: Position) -> bool:
        return position not in self._data

    def put(self, position: Position, record: Record | None) -> Record | None:
        """Store record at position, extending the length if needed.

        A None record turns the position into a hole. Returns the previous
        occupant (or None).
        """
        previous = self._data.pop(position, None)
        if record is not None:
            self._data[position] = record
        if position >= self._length:
            self._length = position + 1
        return previous

    def take(self, position: Position) -> Record | None:
        """Remove and return the occupant of position, leaving a hole."""
        return self._data.pop(position, None)

    def shift(self, start: Position, delta: int) -> None:
        """Move every occupied position >= start by delta.

        The length changes by delta as well. With a negative delta the
        positions in [start + delta, start) must already be holes.
        """
        if delta == 0:
            return
        if self._data.bisect_left(start) < len(self._data):
            self._data = SortedDict(
                (pos + delta if pos >= start else pos, record) for pos, record in self._data.items()
            )
        self._length = max(0, self._length + delta)

    def resize(self, length: int) -> None:
        """Set the length, dropping records at positions >= length."""
        for pos in list(self._data.irange(minimum=length)):
            del self._data[pos]
        self._length = length

    def reverse(self) -> None:
        """Reverse slot order in place."""
        last = self._length - 1
        self._data = SortedDict((last - pos, record) for pos, record in self._data.items())

    def occupied(self) -> Iterator[tuple[Position, Record]]:
        """Iterate (position, record) pairs in ascending position order."""
        yield from self._data.items()
