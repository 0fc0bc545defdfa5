"""Tests for ClusterRegistry."""

from __future__ import annotations

import json

import pytest
from structlog.contextvars import get_contextvars

from cachecluster.cluster import Cluster
from cachecluster.registry import ClusterRegistry
from cachecluster_core.exceptions import UnknownClusterError
from cachecluster_core.models.cluster import ClusterConfig
from cachecluster_infra.media.memory_medium import InMemoryMedium
from cachecluster_infra.storages.sequence_store import SequenceStore


def _workspace_cluster(workspace_id: str, medium: InMemoryMedium) -> Cluster:
    """One cluster per workspace, persisted under the workspace id."""
    return Cluster(
        storages={"tasks": SequenceStore()},
        config=ClusterConfig(
            allow=["tasks"],
            persistence_name=f"tasks:{workspace_id}",
            timestamps_name=f"tasks:{workspace_id}:stamps",
        ),
        medium=medium,
    )


@pytest.mark.unit
class TestClusterRegistry:
    """Tests for registration, lookup and fan-out."""

    def test_create_and_lookup(self, medium: InMemoryMedium) -> None:
        """create registers the factory result under the id."""
        registry = ClusterRegistry().create("ws-1", lambda: _workspace_cluster("ws-1", medium))
        assert "ws-1" in registry
        assert len(registry) == 1
        assert registry.cluster("ws-1").config.persistence_name == "tasks:ws-1"

    def test_create_replaces(self, medium: InMemoryMedium) -> None:
        """A second create under the same id replaces the first cluster."""
        registry = ClusterRegistry()
        registry.create("ws", lambda: _workspace_cluster("a", medium))
        registry.create("ws", lambda: _workspace_cluster("b", medium))
        assert registry.cluster("ws").config.persistence_name == "tasks:b"

    def test_create_many_passes_id(self, medium: InMemoryMedium) -> None:
        """The factory receives each id."""
        registry = ClusterRegistry().create_many(
            ["a", "b"], lambda ws: _workspace_cluster(ws, medium)
        )
        assert registry.ids == ["a", "b"]
        assert registry.cluster("b").config.persistence_name == "tasks:b"

    def test_unknown_id(self) -> None:
        """cluster raises for unknown ids, get returns None."""
        registry = ClusterRegistry()
        assert registry.get("nope") is None
        with pytest.raises(UnknownClusterError, match="nope"):
            registry.cluster("nope")

    @pytest.mark.asyncio
    async def test_restore_all(self, medium: InMemoryMedium) -> None:
        """Every registered cluster is restored from its own slot."""
        await medium.set("tasks:a", json.dumps({"tasks": ["from-a"]}))
        await medium.set("tasks:b", json.dumps({"tasks": ["from-b"]}))
        registry = ClusterRegistry().create_many(
            ["a", "b"], lambda ws: _workspace_cluster(ws, medium)
        )

        await registry.restore_all()

        assert registry.cluster("a").get("tasks")[0].get_all() == ["from-a"]
        assert registry.cluster("b").get("tasks")[0].get_all() == ["from-b"]

    @pytest.mark.asyncio
    async def test_destroy(self, medium: InMemoryMedium) -> None:
        """destroy clears every cluster and deletes its slots."""
        registry = ClusterRegistry().create_many(
            ["a", "b"], lambda ws: _workspace_cluster(ws, medium)
        )
        for cluster_id in registry.ids:
            cluster = registry.cluster(cluster_id)
            cluster.get("tasks")[0].add_item(-1, cluster_id)
            await cluster.persist()
        assert len(medium.keys()) == 4

        await registry.destroy()

        assert medium.keys() == []
        assert registry.cluster("a").get("tasks")[0].get_all() == []

    @pytest.mark.asyncio
    async def test_restore_binds_cluster_id(self, medium: InMemoryMedium) -> None:
        """Each restore runs with its cluster id in the log context."""
        seen: list[object] = []
        registry = ClusterRegistry().create_many(
            ["a", "b"], lambda ws: _workspace_cluster(ws, medium)
        )
        for cluster_id in registry.ids:
            cluster = registry.cluster(cluster_id)

            async def restore() -> None:
                context = get_contextvars()
                seen.append((context.get("cluster_id"), context.get("persistence_name")))

            cluster.restore = restore  # type: ignore[method-assign]

        await registry.restore_all()

        assert seen == [("a", "tasks:a"), ("b", "tasks:b")]
        assert "cluster_id" not in get_contextvars()
        assert "persistence_name" not in get_contextvars()
