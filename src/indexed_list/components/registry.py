"""Index registry implementation.

Owns the Index Maps of one collection, the default lookup key and the
enabled flag.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..core.errors import IndexDisabledError, KeyNotIndexedError
from .index import SimpleIndexMap

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ..core.types import IndexKey, Position, Record
    from ..interfaces.index import IndexMap
    from ..interfaces.slots import SlotStore

logger = logging.getLogger(__name__)


class IndexRegistry:
    """Registry of Index Maps keyed by field name or SELF_INDEX.

    Invariants:
        - While enabled, every map reflects the slot store exactly
        - While disabled, maps are neither read nor patched
        - Keys are never deregistered
    """

    def __init__(self) -> None:
        self._maps: dict[IndexKey, IndexMap] = {}
        self.default_key: IndexKey | None = None
        self.enabled: bool = True

    @property
    def keys(self) -> list[IndexKey]:
        """Registered keys in registration order."""
        return list(self._maps)

    @property
    def active(self) -> bool:
        """True if mutations must be reflected in the maps."""
        return self.enabled and bool(self._maps)

    def register(self, key: IndexKey, slots: SlotStore) -> bool:
        """Build and register a map for key; no-op if already registered.

        Returns True if a new map was created. The first registered key
        becomes the default key.
        """
        if key in self._maps:
            return False

        index_map = SimpleIndexMap(key)
        if self.enabled:
            index_map.build(slots.occupied())
        self._maps[key] = index_map
        if self.default_key is None:
            self.default_key = key
        logger.info(f"Registered index on {key!r} over {len(slots)} slots")
        return True

    def set_default(self, key: IndexKey) -> None:
        if key not in self._maps:
            raise KeyNotIndexedError(key)
        self.default_key = key

    def disable(self) -> None:
        self.enabled = False
        logger.info("Index disabled, mutations are no longer tracked")

    def enable(self, slots: SlotStore) -> None:
        """Rebuild every map from scratch and resume tracking."""
        self.rebuild(slots)
        self.enabled = True
        logger.info(f"Index enabled, rebuilt {len(self._maps)} maps")

    def rebuild(self, slots: SlotStore) -> None:
        for index_map in self._maps.values():
            index_map.build(slots.occupied())
        logger.debug(f"Rebuilt {len(self._maps)} index maps over {len(slots)} slots")

    def lookup(self, key: IndexKey | None = None) -> IndexMap:
        """Return the map for key (or the default key)."""
        if not self.enabled:
            raise IndexDisabledError()
        if key is None:
            key = self.default_key
        index_map = self._maps.get(key)
        if index_map is None:
            raise KeyNotIndexedError(key)
        return index_map

    def _targets(self, keys: Iterable[IndexKey] | None) -> Iterable[IndexMap]:
        if keys is None:
            return self._maps.values()
        return [self._maps[key] for key in keys if key in self._maps]

    def add(self, position: Position, record: Record, keys: Iterable[IndexKey] | None = None) -> None:
        """Index record at position in every map (or only the maps for keys)."""
        if not self.enabled:
            return
        for index_map in self._targets(keys):
            index_map.add(position, record)

    def discard(self, position: Position, record: Record, keys: Iterable[IndexKey] | None = None) -> None:
        if not self.enabled:
            return
        for index_map in self._targets(keys):
            index_map.discard(position, record)

    def shift(self, start: Position, delta: int) -> None:
        if not self.enabled:
            return
        for index_map in self._maps.values():
            index_map.shift(start, delta)

    def truncate(self, length: int) -> None:
        if not self.enabled:
            return
        for index_map in self._maps.values():
            index_map.truncate(length)

    def reverse(self, length: int) -> None:
        if not self.enabled:
            return
        for index_map in self._maps.values():
            index_map.reverse(length)
