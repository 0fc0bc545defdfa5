"""Registry of clusters keyed by an external id such as a workspace id."""

from __future__ import annotations

from collections.abc import Callable, Iterable

import structlog

from cachecluster.cluster import Cluster
from cachecluster.observability.logging import bind_cluster_context, clear_cluster_context
from cachecluster_core.exceptions import UnknownClusterError

logger = structlog.get_logger()


class ClusterRegistry:
    """Maps ids to clusters and fans restore/destroy out to all of them."""

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._clusters: dict[str, Cluster] = {}

    def __contains__(self, cluster_id: object) -> bool:
        return cluster_id in self._clusters

    def __len__(self) -> int:
        return len(self._clusters)

    @property
    def ids(self) -> list[str]:
        """Registered cluster ids."""
        return list(self._clusters)

    def create(self, cluster_id: str, factory: Callable[[], Cluster]) -> ClusterRegistry:
        """Register the cluster built by factory, replacing any previous one."""
        self._clusters[cluster_id] = factory()
        return self

    def create_many(
        self, cluster_ids: Iterable[str], factory: Callable[[str], Cluster]
    ) -> ClusterRegistry:
        """Register one cluster per id; factory receives the id."""
        for cluster_id in cluster_ids:
            self._clusters[cluster_id] = factory(cluster_id)
        return self

    def cluster(self, cluster_id: str) -> Cluster:
        """Return a registered cluster or raise UnknownClusterError."""
        try:
            return self._clusters[cluster_id]
        except KeyError:
            msg = f"No cluster registered for id {cluster_id!r}"
            raise UnknownClusterError(msg) from None

    def get(self, cluster_id: str) -> Cluster | None:
        """Return a registered cluster or None."""
        return self._clusters.get(cluster_id)

    async def restore_all(self) -> None:
        """Restore every cluster, binding its id to the log context meanwhile."""
        for cluster_id, cluster in self._clusters.items():
            bind_cluster_context(cluster_id, persistence_name=cluster.config.persistence_name)
            try:
                logger.debug("registry_restore")
                await cluster.restore()
            finally:
                clear_cluster_context("persistence_name")

    async def destroy(self) -> None:
        """Clear every cluster and its persisted slots."""
        for cluster_id, cluster in self._clusters.items():
            bind_cluster_context(cluster_id, persistence_name=cluster.config.persistence_name)
            try:
                logger.debug("registry_destroy")
                await cluster.clear()
            finally:
                clear_cluster_context("persistence_name")
