"""Protocol definition for an Index Map."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from ..core.types import IndexKey, Position, Record


class IndexMap(Protocol):
    """Value -> ascending positions lookup for one index key."""

    key: IndexKey

    def build(self, occupied: Iterable[tuple[Position, Record]]) -> None:
        """Discard all buckets and rebuild them from (position, record) pairs."""
        ...

    def add(self, position: Position, record: Record) -> None:
        """Index record at position."""
        ...

    def discard(self, position: Position, record: Record) -> None:
        """Remove position from the bucket of record's value, if present."""
        ...

    def shift(self, start: Position, delta: int) -> None:
        """Move every indexed position >= start by delta."""
        ...

    def truncate(self, length: int) -> None:
        """Drop every indexed position >= length."""
        ...

    def reverse(self, length: int) -> None:
        """Map every indexed position p to length - 1 - p."""
        ...

    def positions(self, value: Any) -> Sequence[Position]:
        """Return the ascending positions holding value (empty if none)."""
        ...

    def first_from(self, value: Any, start: Position) -> Position:
        """Return the first position >= start holding value, or -1."""
        ...

    def as_dict(self) -> dict[Any, list[Position]]:
        """Return a plain copy of all buckets."""
        ...
