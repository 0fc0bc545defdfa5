"""Cache clusters: grouped storages with expiry stamps, conditional headers and persistence."""

from cachecluster.cluster import Cluster
from cachecluster.registry import ClusterRegistry
from cachecluster.scheduler import DeferredScheduler

__version__ = "0.1.0"

__all__ = [
    "Cluster",
    "ClusterRegistry",
    "DeferredScheduler",
]
