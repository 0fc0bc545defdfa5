"""Custom exception hierarchy for cache-cluster."""

from __future__ import annotations


class CacheClusterError(Exception):
    """Base exception for all cache-cluster errors."""


class SnapshotCorruptError(CacheClusterError, ValueError):
    """Raised when a persisted cluster slot cannot be parsed."""


class UnknownStorageError(CacheClusterError, KeyError):
    """Raised when a cluster is asked for a storage it was not built with."""


class UnknownClusterError(CacheClusterError, KeyError):
    """Raised when the registry has no cluster under the requested id."""


class MediumUnavailableError(CacheClusterError):
    """Raised when a persistence medium cannot be created from settings."""
