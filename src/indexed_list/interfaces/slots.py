"""Protocol definition for the slot store."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterator

    from ..core.types import Position, Record


class SlotStore(Protocol):
    """Position-addressed storage for records, with holes as absent slots."""

    def __len__(self) -> int:
        """Return the collection length, holes included."""
        ...

    def get(self, position: Position) -> Record | None:
        """Return the record at position, or None for a hole."""
        ...

    def is_hole(self, position: Position) -> bool:
        """Return True if position holds no record."""
        ...

    def put(self, position: Position, record: Record | None) -> Record | None:
        """Store record at position, extending the length if needed.

        A None record turns the position into a hole. Returns the previous
        occupant (or None).
        """
        ...

    def take(self, position: Position) -> Record | None:
        """Remove and return the occupant of position, leaving a hole."""
        ...

    def shift(self, start: Position, delta: int) -> None:
        """Move every occupied position >= start by delta."""
        ...

    def resize(self, length: int) -> None:
        """Set the length, dropping records at positions >= length."""
        ...

    def reverse(self) -> None:
        """Reverse slot order in place."""
        ...

    def occupied(self) -> Iterator[tuple[Position, Record]]:
        """Iterate (position, record) pairs in ascending position order."""
        ...
