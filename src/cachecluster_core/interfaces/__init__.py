"""Public interface re-exports for cachecluster_core."""

from cachecluster_core.interfaces.clock import Clock
from cachecluster_core.interfaces.medium import ClearableMedium, PersistenceMedium
from cachecluster_core.interfaces.storage import (
    BaseStorage,
    BulkStorage,
    ClearableStorage,
    MergeableStorage,
    QueryableStorage,
    supports,
)

__all__ = [
    "BaseStorage",
    "BulkStorage",
    "ClearableMedium",
    "ClearableStorage",
    "Clock",
    "MergeableStorage",
    "PersistenceMedium",
    "QueryableStorage",
    "supports",
]
