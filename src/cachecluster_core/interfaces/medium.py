"""Abstract persistence medium interface."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class PersistenceMedium(Protocol):
    """String key/value medium a cluster persists its slots into."""

    async def get_string(self, key: str) -> str | None:
        """Retrieve a value by key, or None if not found."""
        ...

    async def set(self, key: str, value: str) -> None:
        """Store a string value."""
        ...

    async def delete(self, key: str) -> None:
        """Delete a key; missing keys are ignored."""
        ...


@runtime_checkable
class ClearableMedium(Protocol):
    """Medium that can drop every key it owns."""

    async def clear(self) -> None:
        """Delete all keys owned by this medium."""
        ...
