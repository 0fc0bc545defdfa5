"""Storage configuration and lookup result models."""

from __future__ import annotations

from datetime import timedelta
from enum import StrEnum
from typing import Any, NamedTuple

from pydantic import BaseModel, Field


class MergeStrategy(StrEnum):
    """How partial updates and bulk assigns combine with existing values."""

    MERGE_DEEP = "merge-deep"
    MERGE_SHALLOW = "merge-shallow"
    OVERWRITE = "overwrite"


class StorageConfig(BaseModel):
    """Per-storage expiry and merge configuration."""

    ttl: timedelta | None = Field(
        default=None,
        description="Lifetime of refreshed contents; None never expires",
    )
    merge_strategy: MergeStrategy = Field(
        default=MergeStrategy.MERGE_SHALLOW,
        description="Merge rule for assign and update_item_chunk",
    )


class FindResult(NamedTuple):
    """First match of a storage scan: the index (or key) and the item."""

    index: Any
    item: Any
