"""Index-addressed in-memory storage backed by a list."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, ClassVar, TypeVar

import structlog

from cachecluster_core.constants import DEFAULT_LIMIT
from cachecluster_core.interfaces.storage import BaseStorage
from cachecluster_core.merge import is_primitive, merge
from cachecluster_core.models.storage import FindResult, StorageConfig

V = TypeVar("V")

logger = structlog.get_logger()

APPEND = -1


class SequenceStore(BaseStorage[int, V]):
    """Ordered list of entities addressed by index.

    The list never holds more than ``limit`` items: an insertion into a full
    store clears it first.
    """

    export_type: ClassVar[type] = list

    def __init__(self, limit: int = DEFAULT_LIMIT, config: StorageConfig | None = None) -> None:
        """Initialize an empty store."""
        super().__init__(limit, config)
        self._items: list[V] = []

    def __len__(self) -> int:
        return len(self._items)

    def _in_range(self, index: int) -> bool:
        return 0 <= index < len(self._items)

    def add_item(self, key: int, data: V) -> None:
        """Append at -1 or past the end, otherwise overwrite in place."""
        if len(self._items) >= self.limit:
            logger.debug("storage_overflow_reset", backend="sequence", limit=self.limit)
            self._items = []
        # Negative indexes other than APPEND are treated as appends too
        if key <= APPEND or key >= len(self._items):
            self._items.append(data)
        else:
            self._items[key] = data

    def update_item(self, key: int, data: V) -> None:
        """Overwrite an existing index; out of range is a no-op."""
        if self._in_range(key):
            self._items[key] = data

    def get_item(self, key: int) -> V | list[Any]:
        """Return the item, or an empty list when out of range."""
        if self._in_range(key):
            return self._items[key]
        return []

    def remove_item(self, key: int) -> None:
        """Remove the item at index, shifting later items down."""
        if self._in_range(key):
            del self._items[key]

    def remove_all(self) -> None:
        """Drop every item."""
        self._items = []

    def assign(self, data: list[V]) -> None:
        """Merge a list of items into the store; oversized results are rejected."""
        if not data:
            return
        merged = merge(self._items, list(data), self.config.merge_strategy)
        if len(merged) > self.limit:
            logger.debug(
                "storage_assign_rejected",
                backend="sequence",
                size=len(merged),
                limit=self.limit,
            )
            return
        self._items = merged

    def update_item_chunk(self, key: int, data: Any) -> None:  # noqa: ANN401
        """Replace a primitive item or merge a partial record into it."""
        if not self._in_range(key):
            return
        item = self._items[key]
        if item is None:
            return
        if is_primitive(data):
            self._items[key] = data
        else:
            self._items[key] = merge(item, data, self.config.merge_strategy)

    def get_specific_items(self, *keys: int) -> list[V]:
        """Return the items at the given in-range indexes, in argument order."""
        return [self._items[key] for key in keys if self._in_range(key)]

    def find(self, predicate: Callable[[V], bool]) -> FindResult | None:
        """Return the first matching item and its index."""
        for index, item in enumerate(self._items):
            if predicate(item):
                return FindResult(index, item)
        return None

    def get_all(self) -> list[V]:
        """Return a copy of all items."""
        return list(self._items)

    def set_all(self, data: list[V]) -> None:
        """Replace the contents; payloads larger than the limit are rejected."""
        if len(data) > self.limit:
            logger.debug(
                "storage_set_all_rejected",
                backend="sequence",
                size=len(data),
                limit=self.limit,
            )
            return
        self._items = list(data)
