"""Factory for creating a persistence medium from settings."""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING

import structlog

from cachecluster_core.exceptions import MediumUnavailableError
from cachecluster_core.interfaces.medium import PersistenceMedium

if TYPE_CHECKING:
    from cachecluster_core.config.settings import Settings

logger = structlog.get_logger()


async def create_medium(settings: Settings) -> PersistenceMedium:
    """Create the medium selected by ``settings.medium_backend``.

    The db backend creates its slot table on first use.
    """
    backend = settings.medium_backend
    logger.debug("medium_create", backend=backend)

    if backend == "memory":
        from cachecluster_infra.media.memory_medium import InMemoryMedium

        return InMemoryMedium()

    if backend == "disk":
        from cachecluster_infra.media.disk_medium import DiskCacheMedium

        try:
            return DiskCacheMedium(settings.cache_dir)
        except OSError as e:
            msg = f"Cannot open diskcache at {settings.cache_dir}: {e}"
            raise MediumUnavailableError(msg) from e

    if backend == "redis":
        from redis.asyncio import Redis

        from cachecluster_infra.media.redis_medium import RedisMedium

        return RedisMedium(Redis.from_url(settings.redis_url), prefix=settings.redis_prefix)

    if backend == "db":
        from cachecluster_infra.media.db_medium import (
            DatabaseMedium,
            create_engine,
            create_session_factory,
            init_db,
        )

        engine = create_engine(settings.database_url)
        await init_db(engine)
        return DatabaseMedium(create_session_factory(engine), engine=engine)

    msg = f"Unknown medium backend: {backend}"
    raise MediumUnavailableError(msg)


async def close_medium(medium: PersistenceMedium) -> None:
    """Release whatever connections the medium holds; media without close are skipped."""
    close = getattr(medium, "close", None)
    if close is None:
        return
    result = close()
    if inspect.isawaitable(result):
        await result
