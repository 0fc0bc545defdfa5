"""Application settings using pydantic-settings."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from cachecluster_core.constants import (
    HEADER_UPDATE_DELAY_SECONDS,
    PERSIST_DELAY_SECONDS,
)


class Settings(BaseSettings):
    """Central configuration for cache-cluster."""

    model_config = SettingsConfigDict(env_prefix="CC_", env_file=".env")

    # --- Persistence medium ---
    medium_backend: Literal["memory", "disk", "redis", "db"] = Field(
        default="memory",
        description="Medium clusters persist into: memory, diskcache, Redis or SQL database",
    )
    cache_dir: Path = Field(
        default=Path("./.cache/cache_cluster"),
        description="Directory for the diskcache medium",
    )
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL",
    )
    redis_prefix: str = Field(
        default="cc:",
        description="Key prefix for slots stored in Redis",
    )
    database_url: str = Field(
        default="sqlite+aiosqlite:///./cache_cluster.db",
        description="SQLAlchemy database URL for the db medium",
    )

    # --- Deferred writes ---
    header_delay_seconds: float = Field(
        default=HEADER_UPDATE_DELAY_SECONDS,
        ge=0,
        description="Delay before a conditional header update is applied and persisted",
    )
    persist_delay_seconds: float = Field(
        default=PERSIST_DELAY_SECONDS,
        ge=0,
        description="Delay before an async_persist call writes the snapshot",
    )
    coalesce_deferred_writes: bool = Field(
        default=False,
        description="Cancel a pending deferred write when the same one is scheduled again",
    )

    # --- Logging ---
    log_level: str = Field(
        default="INFO",
        description="Root log level",
    )
    log_format: Literal["console", "json"] = Field(
        default="console",
        description="Log renderer",
    )
