"""Core contracts, models and configuration for cache-cluster."""
