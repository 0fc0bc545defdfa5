"""Cluster configuration model."""

from __future__ import annotations

from pydantic import BaseModel, Field

from cachecluster_core.models.storage import MergeStrategy


class ClusterConfig(BaseModel):
    """Fixed-at-construction configuration of a cluster."""

    allow: list[str] = Field(
        default_factory=list,
        description="Storage names included in persistence",
    )
    merge_strategy: MergeStrategy | None = Field(
        default=None,
        description="Merge rule pushed into every member storage when set",
    )
    persistence_name: str = Field(description="Medium slot holding storage contents")
    timestamps_name: str | None = Field(
        default=None,
        description="Medium slot holding expiry stamps; None disables it",
    )
    headers_name: str | None = Field(
        default=None,
        description="Medium slot holding conditional headers; None disables it",
    )
