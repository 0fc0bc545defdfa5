"""Storage backends and persistence media for cache-cluster."""
