"""Public model re-exports for cachecluster_core."""

from cachecluster_core.models.cluster import ClusterConfig
from cachecluster_core.models.headers import (
    ConditionalHeaders,
    HeaderEntry,
    dump_header_entry,
    load_header_entry,
)
from cachecluster_core.models.storage import FindResult, MergeStrategy, StorageConfig
from cachecluster_core.models.tokens import TokenSet

__all__ = [
    "ClusterConfig",
    "ConditionalHeaders",
    "FindResult",
    "HeaderEntry",
    "MergeStrategy",
    "StorageConfig",
    "TokenSet",
    "dump_header_entry",
    "load_header_entry",
]
