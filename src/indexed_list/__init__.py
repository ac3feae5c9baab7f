"""Indexed List - ordered record collection with secondary indexes."""

from .core.config import IndexConfig
from .core.errors import (
    IndexedListError,
    KeyNotIndexedError,
    IndexDisabledError,
    MissingRecordError,
)
from .core.indexed_list import IndexedList
from .core.types import SELF_INDEX, IndexKey, Position, Record, SelfIndex

__all__ = [
    "IndexConfig",
    "IndexedListError",
    "KeyNotIndexedError",
    "IndexDisabledError",
    "MissingRecordError",
    "IndexedList",
    "SELF_INDEX",
    "SelfIndex",
    "IndexKey",
    "Position",
    "Record",
]
