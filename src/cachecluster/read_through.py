"""Read-through helpers: serve cached values, then refresh from the source."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Hashable
from typing import Any, TypeVar

import structlog

from cachecluster.awaitables import resolve
from cachecluster.cluster import Cluster
from cachecluster_core.interfaces.storage import ClearableStorage, supports

T = TypeVar("T")

logger = structlog.get_logger()


def _is_absent(item: Any) -> bool:  # noqa: ANN401
    """None and the empty-list sentinel both mean nothing is cached."""
    return item is None or (isinstance(item, list) and not item)


async def compute(
    cluster: Cluster,
    name: str,
    key: Any,  # noqa: ANN401
    fetch: Callable[[], Awaitable[None]],
    on_value: Callable[[Any], None],
    *,
    override: bool = False,
) -> Any:  # noqa: ANN401
    """Deliver the cached item, flush a stale storage and fetch when needed.

    ``fetch`` is expected to write the fresh item into the storage (and
    usually call ``cluster.update_time``). It runs when nothing is cached or
    ``override`` is set. Returns the last item handed to ``on_value``, or
    None when nothing was delivered. Errors from ``fetch`` are logged and
    re-raised.
    """
    storage, is_stale = cluster.get(name)
    item = await resolve(storage.get_item(key))
    delivered = None
    if not _is_absent(item):
        on_value(item)
        delivered = item

    if is_stale:
        logger.debug("read_through_flush_stale", storage=name)
        if supports(storage, ClearableStorage):
            await resolve(storage.remove_all())
        await cluster.persist()

    if override or _is_absent(item):
        try:
            await fetch()
        except Exception:
            logger.exception("read_through_fetch_failed", storage=name, key=str(key))
            raise
        fresh = await resolve(storage.get_item(key))
        if not _is_absent(fresh):
            on_value(fresh)
            delivered = fresh

    return delivered


def merge_by_key(
    current: list[T],
    incoming: list[T],
    key_fn: Callable[[T], Hashable],
) -> list[T]:
    """Replace items of current that reappear in incoming and append new ones.

    Positions of existing items are preserved.
    """
    if not incoming:
        return current
    if not current:
        return incoming

    incoming_by_key = {key_fn(item): item for item in incoming}
    existing_keys = {key_fn(item) for item in current}
    updated = [incoming_by_key.get(key_fn(item), item) for item in current]
    new_items = [item for item in incoming if key_fn(item) not in existing_keys]
    return [*updated, *new_items]
