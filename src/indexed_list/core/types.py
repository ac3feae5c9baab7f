"""Common type definitions for the indexed list.

Defines fundamental types used across all components.
"""

from __future__ import annotations

from collections.abc import Hashable, MutableMapping
from enum import Enum
from typing import Any, Union


class SelfIndex(Enum):
    """Sentinel key for the index built over whole-record identity."""

    SELF = "self"

    def __repr__(self) -> str:
        return "SELF_INDEX"


SELF_INDEX = SelfIndex.SELF

# Core primitive types
Position = int
Record = MutableMapping[str, Any]
IndexKey = Union[str, SelfIndex]


class IdentityKey:
    """Hashable stand-in for a value that is matched by identity.

    Used for unhashable field values and for self-indexed records, so a
    bucket is found again only through the very same object.
    """

    __slots__ = ("obj",)

    def __init__(self, obj: Any):
        self.obj = obj

    def __hash__(self) -> int:
        return id(self.obj)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, IdentityKey) and other.obj is self.obj

    def __repr__(self) -> str:
        return f"IdentityKey({self.obj!r})"


def bucket_key(value: Any) -> Hashable:
    """Return the dictionary key a value is bucketed under.

    Hashable values compare by type and equality, so 1, 1.0 and True land
    in separate buckets; anything else compares by identity.
    """
    try:
        hash(value)
    except TypeError:
        return IdentityKey(value)
    return (type(value), value)
