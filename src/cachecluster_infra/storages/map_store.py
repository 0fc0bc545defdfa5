"""Key-addressed in-memory storage backed by an insertion-ordered dict."""

from __future__ import annotations

from collections.abc import Callable, Hashable, Mapping
from typing import Any, ClassVar, TypeVar

import structlog

from cachecluster_core.constants import DEFAULT_LIMIT
from cachecluster_core.interfaces.storage import BaseStorage
from cachecluster_core.merge import is_primitive, merge
from cachecluster_core.models.storage import FindResult, StorageConfig

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

logger = structlog.get_logger()


class MapStore(BaseStorage[K, V]):
    """Mapping of keys to entities, never larger than ``limit``.

    An insertion into a full store clears it first. Re-inserting a key moves
    it to the most recently written position. ``key_type`` converts the
    string keys of a persisted snapshot back into the store's key type.
    """

    export_type: ClassVar[type] = dict

    def __init__(
        self,
        limit: int = DEFAULT_LIMIT,
        config: StorageConfig | None = None,
        key_type: Callable[[str], K] = str,  # type: ignore[assignment]
    ) -> None:
        """Initialize an empty store."""
        super().__init__(limit, config)
        self._items: dict[K, V] = {}
        self._key_type = key_type

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def add_item(self, key: K, data: V) -> None:
        """Insert a value, clearing the store first when it is full."""
        if len(self._items) >= self.limit:
            logger.debug("storage_overflow_reset", backend="map", limit=self.limit)
            self._items = {}
        self._items.pop(key, None)
        self._items[key] = data

    def update_item(self, key: K, data: V) -> None:
        """Replace in place, or insert when the key is absent."""
        if key in self._items:
            self._items[key] = data
        else:
            self.add_item(key, data)

    def get_item(self, key: K) -> V | None:
        """Return the value or None."""
        return self._items.get(key)

    def remove_item(self, key: K) -> None:
        """Remove a key if present."""
        self._items.pop(key, None)

    def remove_all(self) -> None:
        """Drop every entry."""
        self._items = {}

    def assign(self, data: Mapping[K, V]) -> None:
        """Merge a mapping into the store; oversized results are rejected."""
        merged = merge(dict(self._items), dict(data), self.config.merge_strategy)
        if len(merged) > self.limit:
            logger.debug(
                "storage_assign_rejected",
                backend="map",
                size=len(merged),
                limit=self.limit,
            )
            return
        self._items = dict(merged)

    def update_item_chunk(self, key: K, data: Any) -> None:  # noqa: ANN401
        """Replace a primitive value or merge a partial record into it.

        An absent key goes through add_item, so a full store is reset first.
        """
        if key not in self._items:
            self.add_item(key, data)
            return
        item = self._items[key]
        if item is None or is_primitive(data):
            self._items[key] = data
        else:
            self._items[key] = merge(item, data, self.config.merge_strategy)

    def get_specific_items(self, *keys: K) -> dict[K, V]:
        """Return the present entries among the given keys."""
        return {key: self._items[key] for key in keys if key in self._items}

    def find(self, predicate: Callable[[V], bool]) -> FindResult | None:
        """Return the first matching entry in insertion order."""
        for key, item in self._items.items():
            if predicate(item):
                return FindResult(key, item)
        return None

    def get_all(self) -> dict[str, V]:
        """Export as a plain dict with string keys."""
        return {str(key): item for key, item in self._items.items()}

    def set_all(self, data: Mapping[str, V]) -> None:
        """Write a persisted mapping into the store.

        Existing entries are kept. A payload that would push the store past
        its limit is rejected.
        """
        incoming = {self._key_type(key): item for key, item in data.items()}
        if len(self._items.keys() | incoming.keys()) > self.limit:
            logger.debug(
                "storage_set_all_rejected",
                backend="map",
                size=len(incoming),
                limit=self.limit,
            )
            return
        self._items.update(incoming)
