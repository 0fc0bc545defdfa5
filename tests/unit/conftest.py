"""Shared pytest fixtures for unit tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from cachecluster.cluster import Cluster
from cachecluster.scheduler import DeferredScheduler
from cachecluster_core.models.cluster import ClusterConfig
from cachecluster_core.models.storage import StorageConfig
from cachecluster_infra.media.memory_medium import InMemoryMedium
from cachecluster_infra.storages.map_store import MapStore
from cachecluster_infra.storages.sequence_store import SequenceStore
from tests.mocks.mock_clock import ManualClock
from tests.mocks.mock_settings import make_settings


@pytest.fixture
def mock_settings() -> MagicMock:
    """Return a MagicMock Settings with sensible defaults."""
    return make_settings()


@pytest.fixture
def clock() -> ManualClock:
    """Return a clock frozen at a fixed instant."""
    return ManualClock()


@pytest.fixture
def medium() -> InMemoryMedium:
    """Return an empty in-memory medium."""
    return InMemoryMedium()


@pytest.fixture
def cluster_config() -> ClusterConfig:
    """Return a config persisting both list and projects with all slots enabled."""
    return ClusterConfig(
        allow=["list", "projects"],
        persistence_name="ws-1",
        timestamps_name="ws-1:stamps",
        headers_name="ws-1:headers",
    )


@pytest.fixture
def errors() -> list[tuple[str, BaseException]]:
    """Collect failures reported by deferred tasks."""
    return []


@pytest.fixture
def cluster(
    cluster_config: ClusterConfig,
    medium: InMemoryMedium,
    clock: ManualClock,
    errors: list[tuple[str, BaseException]],
) -> Generator[Cluster, None, None]:
    """Cluster with a sequence store, a map store and an unpersisted map store."""
    scheduler = DeferredScheduler(on_error=lambda key, exc: errors.append((key, exc)))
    cluster = Cluster(
        storages={
            "list": SequenceStore(limit=10, config=StorageConfig(ttl=timedelta(minutes=5))),
            "projects": MapStore(limit=10, config=StorageConfig(ttl=timedelta(hours=1))),
            "scratch": MapStore(limit=10),
        },
        config=cluster_config,
        medium=medium,
        clock=clock,
        scheduler=scheduler,
        header_delay=0.0,
        persist_delay=0.0,
    )
    yield cluster
    scheduler.cancel_all()


@pytest.fixture(autouse=True)
def _reset_logging() -> Generator[None, None, None]:
    """Restore root logger handlers replaced by configure_logging()."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    yield
    root.handlers = original_handlers
    root.level = original_level
