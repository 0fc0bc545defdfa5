"""Async pass-through storage over a string key-value medium."""

from __future__ import annotations

import structlog

from cachecluster_core.constants import DEFAULT_LIMIT
from cachecluster_core.interfaces.medium import ClearableMedium, PersistenceMedium
from cachecluster_core.interfaces.storage import BaseStorage
from cachecluster_core.models.storage import StorageConfig

logger = structlog.get_logger()


class KeyValueStore(BaseStorage[str, str]):
    """Storage forwarding every operation to an async medium.

    It has no bulk export, so clusters never include it in snapshots.
    """

    def __init__(
        self,
        medium: PersistenceMedium,
        limit: int = DEFAULT_LIMIT,
        config: StorageConfig | None = None,
    ) -> None:
        """Initialize with the medium to forward to."""
        super().__init__(limit, config)
        self._medium = medium

    async def add_item(self, key: str, data: str) -> None:
        """Store a string value."""
        await self._medium.set(key, data)

    async def update_item(self, key: str, data: str) -> None:
        """Store a string value, replacing any previous one."""
        await self.add_item(key, data)

    async def get_item(self, key: str) -> str | None:
        """Retrieve a value by key, or None if not found."""
        return await self._medium.get_string(key)

    async def remove_item(self, key: str) -> None:
        """Delete a key."""
        await self._medium.delete(key)

    async def remove_all(self) -> None:
        """Clear the medium when it supports clearing."""
        if not isinstance(self._medium, ClearableMedium):
            logger.warning(
                "key_value_clear_unsupported",
                medium=type(self._medium).__name__,
            )
            return
        await self._medium.clear()
