"""IndexedList implementation - main public API.

Orchestrates the slot store and the index registry: every mutating
operation updates both in one step, patching the Index Maps incrementally
or rebuilding them when a range mutation touches too much of the
collection.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ..components.registry import IndexRegistry
from ..components.slots import SimpleSlotStore
from .config import IndexConfig
from .errors import MissingRecordError
from .types import SELF_INDEX

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator

    from .types import IndexKey, Position, Record

logger = logging.getLogger(__name__)


class IndexedList:
    """Ordered, possibly sparse list of records with secondary indexes.

    Args:
        records: Initial records; None entries become holes
        config: Index maintenance configuration

    Public API:
        - add_index(*keys) / add_self_index(): Register Index Maps
        - set_default_index(key): Key used when lookups omit one
        - disable_index() / enable_index(): Suspend and resume tracking
        - index_of / all_indexes_of / record_of / all_records_of / contains
        - append, extend, prepend, pop, popleft, splice, insert, set_at,
          delete, patch, resize, reverse, copy_within, fill

    Invariants:
        - While enabled, each position holding a record is indexed under
          that record's value for every registered key
        - Bucket positions are ascending
        - Holes are never indexed
    """

    def __init__(self, records: Iterable[Record | None] = (), *, config: IndexConfig | None = None):
        self.config = config if config is not None else IndexConfig()
        self._slots = SimpleSlotStore()
        self._registry = IndexRegistry()

        for position, record in enumerate(records):
            self._slots.put(position, record)

    @classmethod
    def from_iterable(
        cls,
        iterable: Iterable[Record | None],
        transform: Callable[[Record], Record] | None = None,
        *,
        config: IndexConfig | None = None,
    ) -> IndexedList:
        """Build a new IndexedList, optionally transforming each record.

        When iterable is itself an IndexedList, its registered keys, default
        key, enabled state and config carry over to the new instance.
        """
        source = iterable if isinstance(iterable, IndexedList) else None
        if config is None and source is not None:
            config = source.config

        records: Iterable[Record | None] = iterable
        if transform is not None:
            records = (transform(record) if record is not None else None for record in iterable)
        result = cls(records, config=config)

        if source is not None:
            for key in source._registry.keys:
                result._registry.register(key, result._slots)
            result._registry.default_key = source._registry.default_key
            if not source.index_enabled:
                result.disable_index()
        return result

    def copy(self) -> IndexedList:
        """Return a shallow copy sharing records but owning its own indexes."""
        return IndexedList.from_iterable(self)

    def __len__(self) -> int:
        return len(self._slots)

    def __iter__(self) -> Iterator[Record | None]:
        return iter(self._slots)

    def __getitem__(self, position: Position | slice) -> Record | None | list[Record | None]:
        if isinstance(position, slice):
            return self.to_list()[position]
        position = self._position(position)
        if position >= len(self._slots):
            raise IndexError("IndexedList index out of range")
        return self._slots.get(position)

    def __setitem__(self, position: Position, record: Record | None) -> None:
        self.set_at(position, record)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, IndexedList):
            return self.to_list() == other.to_list()
        if isinstance(other, list):
            return self.to_list() == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"IndexedList({self.to_list()!r})"

    def to_list(self) -> list[Record | None]:
        return list(self._slots)

    def is_hole(self, position: Position) -> bool:
        """Return True if position is in range and holds no record."""
        position = self._position(position)
        if position >= len(self._slots):
            raise IndexError("IndexedList index out of range")
        return self._slots.is_hole(position)

    def _position(self, position: Position) -> Position:
        """Normalize a single position; negative values count from the end."""
        if isinstance(position, bool) or not isinstance(position, int):
            raise TypeError(f"IndexedList positions must be integers, not {type(position).__name__}")
        if position < 0:
            position += len(self._slots)
            if position < 0:
                raise IndexError("IndexedList index out of range")
        return position

    def _relative(self, bound: int | None, default: int) -> int:
        """Normalize a range bound, clamping it to [0, len]."""
        length = len(self._slots)
        if bound is None:
            return default
        if bound < 0:
            return max(0, length + bound)
        return min(bound, length)

    @property
    def index_enabled(self) -> bool:
        return self._registry.enabled

    @property
    def indexed_keys(self) -> list[IndexKey]:
        return self._registry.keys

    @property
    def default_index(self) -> IndexKey | None:
        return self._registry.default_key

    def add_index(self, *keys: IndexKey) -> IndexedList:
        """Register an Index Map for each key; already indexed keys are skipped.

        The first key ever registered becomes the default lookup key.
        """
        for key in keys:
            self._registry.register(key, self._slots)
        return self

    def add_self_index(self) -> IndexedList:
        """Register an index over record identity."""
        return self.add_index(SELF_INDEX)

    def set_default_index(self, key: IndexKey) -> IndexedList:
        self._registry.set_default(key)
        return self

    def disable_index(self) -> IndexedList:
        """Stop tracking mutations until enable_index() rebuilds the maps."""
        self._registry.disable()
        return self

    def enable_index(self) -> IndexedList:
        self._registry.enable(self._slots)
        return self

    def rebuild_index(self) -> IndexedList:
        """Force a full rebuild of every Index Map."""
        self._registry.rebuild(self._slots)
        return self

    def index_of(self, value: Any, *, key: IndexKey | None = None, from_index: int = 0) -> int:
        """Return the first position >= from_index holding value, or -1.

        A negative from_index counts from the end and is clamped to 0.
        """
        index_map = self._registry.lookup(key)
        if from_index < 0:
            from_index = max(0, len(self._slots) + from_index)
        return index_map.first_from(value, from_index)

    def all_indexes_of(self, value: Any, *, key: IndexKey | None = None) -> list[Position]:
        return list(self._registry.lookup(key).positions(value))

    def record_of(self, value: Any, *, key: IndexKey | None = None, from_index: int = 0) -> Record | None:
        """Return the record at the first position index_of() finds, or None."""
        position = self.index_of(value, key=key, from_index=from_index)
        if position == -1:
            return None
        return self._slots.get(position)

    def all_records_of(self, value: Any, *, key: IndexKey | None = None) -> list[Record]:
        return [self._slots.get(position) for position in self._registry.lookup(key).positions(value)]

    def contains(self, value: Any, *, key: IndexKey | None = None) -> bool:
        return bool(self._registry.lookup(key).positions(value))

    def _assign(self, position: Position, record: Record | None) -> None:
        """Overwrite one slot, moving its index entries from the old record to the new."""
        previous = self._slots.put(position, record)
        if previous is not None:
            self._registry.discard(position, previous)
        if record is not None:
            self._registry.add(position, record)

    def _overwrite_range(self, start: Position, records: list[Record | None]) -> None:
        """Overwrite consecutive slots from start, rebuilding if the range is large."""
        if self._registry.active and self.config.exceeds_threshold(len(records), len(self._slots)):
            for offset, record in enumerate(records):
                self._slots.put(start + offset, record)
            logger.debug(f"Overwrite of {len(records)}/{len(self._slots)} slots, rebuilding index")
            self._registry.rebuild(self._slots)
            return

        for offset, record in enumerate(records):
            self._assign(start + offset, record)

    def append(self, record: Record | None) -> None:
        self._assign(len(self._slots), record)

    def extend(self, records: Iterable[Record | None]) -> None:
        for record in records:
            self.append(record)

    def prepend(self, *records: Record | None) -> None:
        """Insert records at the head, shifting existing positions up."""
        count = len(records)
        if count == 0:
            return
        self._slots.shift(0, count)
        self._registry.shift(0, count)
        for offset, record in enumerate(records):
            self._assign(offset, record)

    def pop(self) -> Record | None:
        """Remove and return the last slot's occupant (None for a hole)."""
        length = len(self._slots)
        if length == 0:
            raise IndexError("pop from empty IndexedList")
        record = self._slots.take(length - 1)
        if record is not None:
            self._registry.discard(length - 1, record)
        self._slots.resize(length - 1)
        return record

    def popleft(self) -> Record | None:
        """Remove and return the first slot's occupant, shifting the rest down."""
        if len(self._slots) == 0:
            raise IndexError("pop from empty IndexedList")
        record = self._slots.take(0)
        if record is not None:
            self._registry.discard(0, record)
        self._slots.shift(1, -1)
        self._registry.shift(1, -1)
        return record

    def splice(self, start: int, delete_count: int | None = None, *records: Record | None) -> list[Record | None]:
        """Delete delete_count slots at start and insert records in their place.

        Returns the removed occupants (None for holes). When the number of
        positions whose index entry changes exceeds the configured
        threshold, the Index Maps are rebuilt instead of patched.
        """
        length = len(self._slots)
        start = self._relative(start, 0)
        if delete_count is None:
            delete_count = length - start
        else:
            delete_count = min(max(delete_count, 0), length - start)

        inserted = len(records)
        delta = inserted - delete_count
        tail = length - start - delete_count
        touched = delete_count + inserted + (tail if delta else 0)

        rebuild = self._registry.active and self.config.exceeds_threshold(touched, length)
        track = self._registry.active and not rebuild

        removed: list[Record | None] = []
        for position in range(start, start + delete_count):
            record = self._slots.take(position)
            if track and record is not None:
                self._registry.discard(position, record)
            removed.append(record)

        self._slots.shift(start + delete_count, delta)
        if track:
            self._registry.shift(start + delete_count, delta)

        for offset, record in enumerate(records):
            self._slots.put(start + offset, record)
            if track and record is not None:
                self._registry.add(start + offset, record)

        if rebuild:
            logger.debug(f"Splice touched {touched}/{length} positions, rebuilding index")
            self._registry.rebuild(self._slots)
        return removed

    def insert(self, position: int, record: Record | None) -> None:
        self.splice(position, 0, record)

    def set_at(self, position: Position, record: Record | None) -> None:
        """Overwrite a slot; positions beyond the end extend the list with holes."""
        self._assign(self._position(position), record)

    def delete(self, position: Position) -> Record | None:
        """Turn a slot into a hole without shifting anything; return its occupant."""
        position = self._position(position)
        if position >= len(self._slots):
            raise IndexError("IndexedList index out of range")
        record = self._slots.take(position)
        if record is not None:
            self._registry.discard(position, record)
        return record

    def patch(self, position: Position, field: str, value: Any) -> None:
        """Set one field of the record at position, updating that field's index."""
        normalized = position + len(self._slots) if position < 0 else position
        record = self._slots.get(normalized) if normalized >= 0 else None
        if record is None:
            raise MissingRecordError(position)

        if not self._registry.enabled or field not in self._registry.keys:
            record[field] = value
            return

        # the same record object may occupy several slots after fill or copy_within
        holders = self._holders(record)
        keys = (field,)
        for holder in holders:
            self._registry.discard(holder, record, keys)
        record[field] = value
        for holder in holders:
            self._registry.add(holder, record, keys)

    def _holders(self, record: Record) -> list[Position]:
        """Return every position occupied by this very record object."""
        if SELF_INDEX in self._registry.keys:
            return list(self._registry.lookup(SELF_INDEX).positions(record))
        return [position for position, other in self._slots.occupied() if other is record]

    def resize(self, length: int) -> None:
        """Grow with holes or truncate to length."""
        if length < 0:
            raise ValueError(f"Invalid length: {length}")
        if length < len(self._slots):
            self._registry.truncate(length)
        self._slots.resize(length)

    def reverse(self) -> None:
        self._slots.reverse()
        self._registry.reverse(len(self._slots))

    def copy_within(self, target: int, start: int = 0, end: int | None = None) -> None:
        """Copy slots [start, end) onto the range beginning at target.

        Source occupants are captured before any target slot is written, so
        overlapping ranges copy correctly.
        """
        length = len(self._slots)
        target = self._relative(target, 0)
        start = self._relative(start, 0)
        end = self._relative(end, length)
        count = min(end - start, length - target)
        if count <= 0:
            return
        sources = [self._slots.get(start + offset) for offset in range(count)]
        self._overwrite_range(target, sources)

    def fill(self, record: Record | None, start: int = 0, end: int | None = None) -> None:
        """Assign record to every slot in [start, end)."""
        start = self._relative(start, 0)
        end = self._relative(end, len(self._slots))
        if end <= start:
            return
        self._overwrite_range(start, [record] * (end - start))
