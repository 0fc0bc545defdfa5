"""Storage contract shared by every cache backend.

Every backend implements the four required operations of ``BaseStorage``.
Bulk, clearing, merging and query operations are optional capabilities:
callers check for them with ``supports`` before calling.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import Any, Generic, Protocol, TypeGuard, TypeVar, runtime_checkable

from cachecluster_core.constants import DEFAULT_LIMIT
from cachecluster_core.models.storage import FindResult, StorageConfig

K = TypeVar("K")
V = TypeVar("V")
C = TypeVar("C")


class BaseStorage(ABC, Generic[K, V]):
    """Abstract base class for all storages; sync or async per backend."""

    def __init__(self, limit: int = DEFAULT_LIMIT, config: StorageConfig | None = None) -> None:
        """Initialize with a capacity and an expiry/merge configuration."""
        if limit <= 0:
            msg = f"Storage limit must be positive, got {limit}"
            raise ValueError(msg)
        self.limit = limit
        self.config = config or StorageConfig()

    @abstractmethod
    def add_item(self, key: K, data: V) -> Awaitable[None] | None:
        """Insert a value, resetting the whole storage on overflow."""
        ...

    @abstractmethod
    def update_item(self, key: K, data: V) -> Awaitable[None] | None:
        """Replace an existing value."""
        ...

    @abstractmethod
    def get_item(self, key: K) -> Any:
        """Return the value or the backend's absent sentinel."""
        ...

    @abstractmethod
    def remove_item(self, key: K) -> Awaitable[None] | None:
        """Remove a value if present."""
        ...


@runtime_checkable
class BulkStorage(Protocol):
    """Full export/import, used for persistence round-trips."""

    def get_all(self) -> Any:
        """Export the contents in a JSON-serializable form."""
        ...

    def set_all(self, data: Any) -> None:
        """Import contents produced by get_all."""
        ...


@runtime_checkable
class ClearableStorage(Protocol):
    """Storage that can drop all of its entries."""

    def remove_all(self) -> Awaitable[None] | None:
        """Remove every entry."""
        ...


@runtime_checkable
class MergeableStorage(Protocol):
    """Storage supporting flat-merge bulk assigns and partial updates."""

    def assign(self, data: Any) -> None:
        """Merge a bulk payload into the current contents."""
        ...

    def update_item_chunk(self, key: Any, data: Any) -> None:
        """Merge a partial value into one entry."""
        ...


@runtime_checkable
class QueryableStorage(Protocol):
    """Storage supporting subset fetches and predicate scans."""

    def get_specific_items(self, *keys: Any) -> Any:
        """Return the entries stored under the given keys."""
        ...

    def find(self, predicate: Callable[[Any], bool]) -> FindResult | None:
        """Return the first entry matching the predicate."""
        ...


def supports(storage: object, capability: type[C]) -> TypeGuard[C]:
    """Check whether a storage implements an optional capability."""
    return isinstance(storage, capability)
