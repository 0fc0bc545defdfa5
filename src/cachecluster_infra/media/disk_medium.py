"""Cluster slots stored in a diskcache directory."""

from __future__ import annotations

import asyncio
from pathlib import Path

import diskcache


class DiskCacheMedium:
    """Medium that keeps each slot as one diskcache entry, with no expiry.

    diskcache is blocking, so every call is pushed to a worker thread.
    Several processes may open the same directory.
    """

    def __init__(self, cache_dir: Path) -> None:
        """Open (creating if needed) the cache directory."""
        cache_dir.mkdir(parents=True, exist_ok=True)
        self._cache = diskcache.Cache(str(cache_dir))

    async def get_string(self, key: str) -> str | None:
        """Return the slot text, or None when the slot is absent."""
        value = await asyncio.to_thread(self._cache.get, key)
        return None if value is None else str(value)

    async def set(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._cache.set, key, value)

    async def delete(self, key: str) -> None:
        await asyncio.to_thread(self._cache.delete, key)

    async def clear(self) -> None:
        """Drop every slot in the directory."""
        await asyncio.to_thread(self._cache.clear)

    def close(self) -> None:
        """Release the underlying SQLite connections."""
        self._cache.close()
