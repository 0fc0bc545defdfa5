"""Conditional request header models and their persisted form."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from cachecluster_core.constants import (
    IF_MODIFIED_SINCE,
    IF_NONE_MATCH,
    PLACEHOLDER_HEADER_VALUE,
)


class ConditionalHeaders(BaseModel):
    """A last-modified / entity-tag pair used to revalidate one resource."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    if_modified_since: str = Field(
        default=PLACEHOLDER_HEADER_VALUE,
        alias=IF_MODIFIED_SINCE,
        description="Value sent back as If-Modified-Since",
    )
    if_none_match: str = Field(
        default=PLACEHOLDER_HEADER_VALUE,
        alias=IF_NONE_MATCH,
        description="Value sent back as If-None-Match",
    )

    def as_request_headers(self) -> dict[str, str]:
        """Render as HTTP request headers."""
        return self.model_dump(by_alias=True)


# Either one pair for the whole storage or one pair per page key
HeaderEntry = ConditionalHeaders | dict[str, ConditionalHeaders]


def dump_header_entry(entry: HeaderEntry) -> dict[str, Any]:
    """Convert a header entry to its JSON-ready form."""
    if isinstance(entry, ConditionalHeaders):
        return entry.as_request_headers()
    return {page: headers.as_request_headers() for page, headers in entry.items()}


def load_header_entry(raw: dict[str, Any]) -> HeaderEntry:
    """Parse the JSON form produced by dump_header_entry."""
    if IF_MODIFIED_SINCE in raw or IF_NONE_MATCH in raw:
        return ConditionalHeaders.model_validate(raw)
    return {
        str(page): ConditionalHeaders.model_validate(value)
        for page, value in raw.items()
    }
