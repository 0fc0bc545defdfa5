"""Persistence media clusters write their slots into."""

from cachecluster_infra.media.factory import close_medium, create_medium
from cachecluster_infra.media.memory_medium import InMemoryMedium

__all__ = [
    "InMemoryMedium",
    "close_medium",
    "create_medium",
]
