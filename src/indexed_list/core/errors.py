"""Exception hierarchy for the indexed list.

Defines all custom exceptions used throughout the implementation.
"""

from __future__ import annotations


class IndexedListError(Exception):
    """Base exception for all indexed list errors."""
    pass


class KeyNotIndexedError(IndexedListError):
    """Raised when a lookup or default-key change names a key with no index."""

    def __init__(self, key: object):
        super().__init__(f"Key is not indexed: {key!r}")
        self.key = key


class IndexDisabledError(IndexedListError):
    """Raised when an index based lookup runs while the index is disabled."""

    def __init__(self) -> None:
        super().__init__(
            "Index based operations cannot be used while index is disabled. "
            "Call enable_index() first."
        )


class MissingRecordError(IndexedListError):
    """Raised when a field patch targets a position holding no record."""

    def __init__(self, position: int):
        super().__init__(f"Cannot set field value of missing record at position {position}")
        self.position = position
