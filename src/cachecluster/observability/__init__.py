"""Observability: structured logging."""

from cachecluster.observability.logging import (
    bind_cluster_context,
    clear_cluster_context,
    configure_logging,
)

__all__ = [
    "bind_cluster_context",
    "clear_cluster_context",
    "configure_logging",
]
