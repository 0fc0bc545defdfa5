"""Concrete storage backends."""

from cachecluster_infra.storages.key_value_store import KeyValueStore
from cachecluster_infra.storages.map_store import MapStore
from cachecluster_infra.storages.sequence_store import SequenceStore
from cachecluster_infra.storages.token_store import TokenStore

__all__ = [
    "KeyValueStore",
    "MapStore",
    "SequenceStore",
    "TokenStore",
]
