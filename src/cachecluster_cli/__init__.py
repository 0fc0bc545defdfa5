"""Command-line interface for cache-cluster."""
