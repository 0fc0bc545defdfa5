"""Merge rules for partial updates and bulk assigns.

Values are classified into sequences, records and primitives; each pairing
has one merge function. ``MERGE_SHALLOW`` overwrites top-level record fields
only, ``MERGE_DEEP`` recurses into nested records and ``OVERWRITE`` keeps the
incoming value.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from typing import Any

from cachecluster_core.models.storage import MergeStrategy


class ValueKind(StrEnum):
    """Shape of a cached value, as far as merging is concerned."""

    SEQUENCE = "sequence"
    RECORD = "record"
    PRIMITIVE = "primitive"


def kind_of(value: Any) -> ValueKind:  # noqa: ANN401
    """Classify a value for merging."""
    if isinstance(value, list | tuple):
        return ValueKind.SEQUENCE
    if isinstance(value, Mapping):
        return ValueKind.RECORD
    return ValueKind.PRIMITIVE


def is_primitive(value: Any) -> bool:  # noqa: ANN401
    """Return True for scalars and None."""
    return kind_of(value) is ValueKind.PRIMITIVE


def merge_sequences(a: list[Any] | tuple[Any, ...], b: list[Any] | tuple[Any, ...]) -> list[Any]:
    """Concatenate two sequences into a new list."""
    return [*a, *b]


def merge_records_shallow(a: Mapping[str, Any], b: Mapping[str, Any]) -> dict[str, Any]:
    """Combine two records; fields of b win, nested values are not merged."""
    return {**a, **b}


def merge_records_deep(a: Mapping[str, Any], b: Mapping[str, Any]) -> dict[str, Any]:
    """Combine two records, recursing where both sides hold a record."""
    result = dict(a)
    for field, incoming in b.items():
        current = result.get(field)
        if kind_of(current) is ValueKind.RECORD and kind_of(incoming) is ValueKind.RECORD:
            result[field] = merge_records_deep(current, incoming)
        else:
            result[field] = incoming
    return result


def merge(
    a: Any,  # noqa: ANN401
    b: Any,  # noqa: ANN401
    strategy: MergeStrategy = MergeStrategy.MERGE_SHALLOW,
) -> Any:  # noqa: ANN401
    """Merge incoming value b into existing value a."""
    if a is None:
        return b
    if b is None:
        return a
    if strategy is MergeStrategy.OVERWRITE:
        return b

    kind_a, kind_b = kind_of(a), kind_of(b)
    if kind_a is ValueKind.SEQUENCE and kind_b is ValueKind.SEQUENCE:
        return merge_sequences(a, b)
    if kind_a is ValueKind.RECORD and kind_b is ValueKind.RECORD:
        if strategy is MergeStrategy.MERGE_DEEP:
            return merge_records_deep(a, b)
        return merge_records_shallow(a, b)
    # Mismatched shapes or primitives: the incoming value replaces
    return b
