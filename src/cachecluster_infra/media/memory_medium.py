"""Process-local implementation of PersistenceMedium."""

from __future__ import annotations


class InMemoryMedium:
    """Medium backed by a plain dict; contents die with the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        """Initialize, optionally pre-seeded with slots."""
        self._data: dict[str, str] = dict(initial or {})

    async def get_string(self, key: str) -> str | None:
        """Retrieve a value by key, or None if not found."""
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        """Store a value."""
        self._data[key] = value

    async def delete(self, key: str) -> None:
        """Delete a key from the medium."""
        self._data.pop(key, None)

    async def clear(self) -> None:
        """Delete every key."""
        self._data.clear()

    def keys(self) -> list[str]:
        """Return the stored keys."""
        return list(self._data)
