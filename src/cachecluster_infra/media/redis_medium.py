"""Redis-backed implementation of PersistenceMedium."""

from __future__ import annotations

from redis.asyncio import Redis


class RedisMedium:
    """Persistent medium backed by Redis, namespaced by a key prefix."""

    def __init__(self, redis: Redis, prefix: str = "") -> None:  # type: ignore[type-arg]
        """Initialize with a redis-py asyncio client."""
        self._redis = redis
        self._prefix = prefix

    def _key(self, key: str) -> str:
        """Apply the namespace prefix."""
        return f"{self._prefix}{key}"

    async def get_string(self, key: str) -> str | None:
        """Retrieve a value by key."""
        value = await self._redis.get(self._key(key))
        if value is None:
            return None
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return str(value)

    async def set(self, key: str, value: str) -> None:
        """Store a value without expiry."""
        await self._redis.set(name=self._key(key), value=value)

    async def delete(self, key: str) -> None:
        """Delete a key."""
        await self._redis.delete(self._key(key))

    async def clear(self) -> None:
        """Delete every key under the prefix, or the whole DB without one."""
        if not self._prefix:
            await self._redis.flushdb()
            return
        keys = [key async for key in self._redis.scan_iter(match=f"{self._prefix}*")]
        if keys:
            await self._redis.delete(*keys)

    async def close(self) -> None:
        """Close the underlying client."""
        await self._redis.aclose()  # type: ignore[attr-defined]
