"""Cluster: a named group of storages sharing expiry tracking and persistence."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from datetime import datetime
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Self

import httpx
import structlog

from cachecluster.awaitables import resolve
from cachecluster.scheduler import DeferredScheduler
from cachecluster.snapshot import check_export, delete_snapshot, load_snapshot, write_snapshot
from cachecluster_core.clock import SystemClock
from cachecluster_core.constants import (
    HEADER_UPDATE_DELAY_SECONDS,
    IF_MODIFIED_SINCE,
    IF_NONE_MATCH,
    NEVER_EXPIRES,
    PERSIST_DELAY_SECONDS,
    PLACEHOLDER_HEADER_VALUE,
)
from cachecluster_core.exceptions import UnknownStorageError
from cachecluster_core.interfaces.clock import Clock
from cachecluster_core.interfaces.medium import PersistenceMedium
from cachecluster_core.interfaces.storage import (
    BaseStorage,
    BulkStorage,
    ClearableStorage,
    supports,
)
from cachecluster_core.models.cluster import ClusterConfig
from cachecluster_core.models.headers import ConditionalHeaders, HeaderEntry, dump_header_entry

if TYPE_CHECKING:
    from cachecluster_core.config.settings import Settings

logger = structlog.get_logger()


class Cluster:
    """Owns a fixed set of storages, their expiry stamps and conditional headers.

    Staleness is computed on read by ``get``; nothing is evicted
    automatically. ``persist`` and ``restore`` move the whole state to and
    from the medium. Header updates and ``async_persist`` run later through
    the scheduler and require a running event loop.
    """

    def __init__(
        self,
        storages: Mapping[str, BaseStorage[Any, Any]],
        config: ClusterConfig,
        medium: PersistenceMedium,
        *,
        clock: Clock | None = None,
        scheduler: DeferredScheduler | None = None,
        header_delay: float = HEADER_UPDATE_DELAY_SECONDS,
        persist_delay: float = PERSIST_DELAY_SECONDS,
    ) -> None:
        """Initialize with every stamp at now and no stored headers."""
        self._storages: dict[str, BaseStorage[Any, Any]] = dict(storages)
        self._config = config
        self._medium = medium
        self._clock = clock or SystemClock()
        self._scheduler = scheduler or DeferredScheduler()
        self._header_delay = header_delay
        self._persist_delay = persist_delay

        if config.merge_strategy is not None:
            for storage in self._storages.values():
                storage.config = storage.config.model_copy(
                    update={"merge_strategy": config.merge_strategy}
                )

        now = self._clock.now()
        self._stamps: dict[str, datetime] = dict.fromkeys(self._storages, now)
        self._modified_headers: dict[str, HeaderEntry] = {
            name: {} for name in self._storages
        }

    @classmethod
    def from_settings(
        cls,
        storages: Mapping[str, BaseStorage[Any, Any]],
        config: ClusterConfig,
        medium: PersistenceMedium,
        settings: Settings,
        *,
        clock: Clock | None = None,
    ) -> Self:
        """Build a cluster with delays and coalescing taken from settings."""
        return cls(
            storages,
            config,
            medium,
            clock=clock,
            scheduler=DeferredScheduler(coalesce=settings.coalesce_deferred_writes),
            header_delay=settings.header_delay_seconds,
            persist_delay=settings.persist_delay_seconds,
        )

    @property
    def config(self) -> ClusterConfig:
        """Configuration the cluster was built with."""
        return self._config

    @property
    def scheduler(self) -> DeferredScheduler:
        """Scheduler running deferred header updates and persists."""
        return self._scheduler

    @property
    def names(self) -> list[str]:
        """Names of the member storages."""
        return list(self._storages)

    @property
    def stamps(self) -> Mapping[str, datetime]:
        """Read-only view of the expiry stamps."""
        return MappingProxyType(self._stamps)

    @property
    def headers(self) -> Mapping[str, HeaderEntry]:
        """Read-only view of the stored conditional headers."""
        return MappingProxyType(self._modified_headers)

    def _storage(self, name: str) -> BaseStorage[Any, Any]:
        """Look up a member storage or raise UnknownStorageError."""
        try:
            return self._storages[name]
        except KeyError:
            msg = f"Cluster has no storage named {name!r}"
            raise UnknownStorageError(msg) from None

    def get(self, name: str) -> tuple[BaseStorage[Any, Any], bool]:
        """Return the storage and whether its stamp lies before now."""
        storage = self._storage(name)
        is_stale = self._stamps[name] < self._clock.now()
        return storage, is_stale

    def update_time(self, name: str) -> Self:
        """Push the storage's expiry to now plus its TTL."""
        ttl = self._storage(name).config.ttl
        if ttl is None:
            self._stamps[name] = NEVER_EXPIRES
            return self
        try:
            self._stamps[name] = self._clock.now() + ttl
        except OverflowError:
            self._stamps[name] = NEVER_EXPIRES
        return self

    def update_headers(
        self,
        name: str,
        raw_headers: Mapping[str, str] | httpx.Headers,
        page: str | None = None,
    ) -> Self:
        """Schedule storing the conditional headers of a response, then a persist.

        ``page`` stores the pair under that page key, keeping other pages.
        """
        self._storage(name)
        headers = httpx.Headers(raw_headers)
        key = f"headers:{name}" if page is None else f"headers:{name}:{page}"
        self._scheduler.schedule(
            key,
            self._header_delay,
            lambda: self._apply_headers(name, headers, page),
        )
        return self

    async def _apply_headers(self, name: str, headers: httpx.Headers, page: str | None) -> None:
        """Extract the conditional pair, store it and persist."""
        pair = ConditionalHeaders(
            if_modified_since=(
                headers.get(IF_MODIFIED_SINCE)
                or headers.get("Last-Modified")
                or self._clock.now().isoformat()
            ),
            if_none_match=(
                headers.get("ETag") or headers.get(IF_NONE_MATCH) or PLACEHOLDER_HEADER_VALUE
            ),
        )
        if page is None:
            self._modified_headers[name] = pair
        else:
            current = self._modified_headers.get(name)
            pages = dict(current) if isinstance(current, dict) else {}
            pages[page] = pair
            self._modified_headers[name] = pages
        logger.debug("cluster_headers_updated", storage=name, page=page)
        await self.persist()

    def get_modified_header(
        self,
        name: str,
        page: str | None = None,
        extra: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Return the stored headers for a storage or one of its pages.

        Without ``page`` this is the single pair (or every page's pair keyed
        by page). With ``page`` it is that page's pair, or a placeholder
        pair when none is stored. ``extra`` overrides fields in the result.
        """
        self._storage(name)
        entry = self._modified_headers.get(name, {})
        if page is None:
            result = dump_header_entry(entry)
        elif isinstance(entry, dict) and page in entry:
            result = entry[page].as_request_headers()
        else:
            result = ConditionalHeaders().as_request_headers()
        return {**result, **(extra or {})}

    async def persist(self) -> None:
        """Write contents, stamps and headers to the medium."""
        contents: dict[str, Any] = {}
        for name in self._config.allow:
            storage = self._storages.get(name)
            if storage is None or not supports(storage, BulkStorage):
                continue
            contents[name] = storage.get_all()

        await write_snapshot(
            self._medium, self._config, contents, self._stamps, self._modified_headers
        )
        logger.debug(
            "cluster_persisted",
            persistence_name=self._config.persistence_name,
            storages=list(contents),
        )

    def async_persist(self) -> asyncio.Task[None]:
        """Schedule a persist after a short delay and return its task."""
        return self._scheduler.schedule("persist", self._persist_delay, self.persist)

    async def restore(self) -> None:
        """Load state from the medium; a missing contents slot is a no-op.

        Raises:
            SnapshotCorruptError: if a slot holds malformed data.
        """
        snapshot = await load_snapshot(self._medium, self._config)
        if snapshot is None:
            logger.debug("cluster_restore_empty", persistence_name=self._config.persistence_name)
            return

        bulk: dict[str, Any] = {}
        for name, data in snapshot.contents.items():
            storage = self._storages.get(name)
            if storage is None or not supports(storage, BulkStorage):
                continue
            expected = getattr(storage, "export_type", None)
            if expected is not None:
                check_export(self._config.persistence_name, name, data, expected)
            bulk[name] = data

        # Entries for storages this cluster does not own are ignored
        if snapshot.stamps is not None:
            self._stamps.update(
                {name: stamp for name, stamp in snapshot.stamps.items() if name in self._storages}
            )
        if snapshot.headers is not None:
            self._modified_headers.update(
                {name: entry for name, entry in snapshot.headers.items() if name in self._storages}
            )

        for name, data in bulk.items():
            self._storages[name].set_all(data)  # type: ignore[attr-defined]

        logger.info(
            "cluster_restored",
            persistence_name=self._config.persistence_name,
            storages=list(bulk),
        )

    async def clear(self) -> None:
        """Empty every storage and delete the contents and stamps slots."""
        for storage in self._storages.values():
            if supports(storage, ClearableStorage):
                await resolve(storage.remove_all())
        await delete_snapshot(self._medium, self._config)
        logger.info("cluster_cleared", persistence_name=self._config.persistence_name)
