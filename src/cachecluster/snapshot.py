"""Reading, writing and deleting the persisted slots of a cluster.

A cluster occupies up to three independent slots in its medium, each a JSON
document: the contents (storage name to bulk export), the expiry stamps
(storage name to ISO-8601 timestamp) and the conditional headers.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from cachecluster_core.exceptions import SnapshotCorruptError
from cachecluster_core.interfaces.medium import PersistenceMedium
from cachecluster_core.models.cluster import ClusterConfig
from cachecluster_core.models.headers import HeaderEntry, dump_header_entry, load_header_entry


@dataclass
class ClusterSnapshot:
    """Decoded state of the persisted slots.

    ``stamps`` and ``headers`` are None when their slot is disabled or absent.
    """

    contents: dict[str, Any]
    stamps: dict[str, datetime] | None = None
    headers: dict[str, HeaderEntry] | None = None


def encode_stamps(stamps: Mapping[str, datetime]) -> str:
    """Serialize stamps as ISO-8601 strings."""
    return json.dumps({name: stamp.isoformat() for name, stamp in stamps.items()})


def encode_headers(headers: Mapping[str, HeaderEntry]) -> str:
    """Serialize header entries to their JSON form."""
    return json.dumps({name: dump_header_entry(entry) for name, entry in headers.items()})


def _parse_object(slot: str, raw: str) -> dict[str, Any]:
    """Parse a slot that must hold a JSON object."""
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        msg = f"Slot {slot!r} is not valid JSON: {e}"
        raise SnapshotCorruptError(msg) from e
    if not isinstance(data, dict):
        msg = f"Slot {slot!r} must hold a JSON object, got {type(data).__name__}"
        raise SnapshotCorruptError(msg)
    return data


def check_export(slot: str, name: str, data: Any, expected: type) -> None:  # noqa: ANN401
    """Reject a contents entry whose JSON shape the storage cannot import."""
    if not isinstance(data, expected):
        msg = (
            f"Slot {slot!r} holds {type(data).__name__} for {name!r}, "
            f"expected {expected.__name__}"
        )
        raise SnapshotCorruptError(msg)


def decode_stamps(slot: str, raw: str) -> dict[str, datetime]:
    """Parse a stamps slot; naive timestamps are taken as UTC."""
    stamps: dict[str, datetime] = {}
    for name, value in _parse_object(slot, raw).items():
        try:
            stamp = datetime.fromisoformat(value)
        except (TypeError, ValueError) as e:
            msg = f"Slot {slot!r} has an invalid stamp for {name!r}: {value!r}"
            raise SnapshotCorruptError(msg) from e
        if stamp.tzinfo is None:
            stamp = stamp.replace(tzinfo=UTC)
        stamps[name] = stamp
    return stamps


def decode_headers(slot: str, raw: str) -> dict[str, HeaderEntry]:
    """Parse a headers slot."""
    headers: dict[str, HeaderEntry] = {}
    for name, value in _parse_object(slot, raw).items():
        if not isinstance(value, dict):
            msg = f"Slot {slot!r} has an invalid header entry for {name!r}"
            raise SnapshotCorruptError(msg)
        try:
            headers[name] = load_header_entry(value)
        except ValidationError as e:
            msg = f"Slot {slot!r} has an invalid header entry for {name!r}: {e}"
            raise SnapshotCorruptError(msg) from e
    return headers


async def load_snapshot(medium: PersistenceMedium, config: ClusterConfig) -> ClusterSnapshot | None:
    """Read every configured slot; None when the contents slot is absent."""
    raw_contents = await medium.get_string(config.persistence_name)
    if raw_contents is None:
        return None
    contents = _parse_object(config.persistence_name, raw_contents)

    stamps = None
    if config.timestamps_name:
        raw_stamps = await medium.get_string(config.timestamps_name)
        if raw_stamps:
            stamps = decode_stamps(config.timestamps_name, raw_stamps)

    headers = None
    if config.headers_name:
        raw_headers = await medium.get_string(config.headers_name)
        if raw_headers:
            headers = decode_headers(config.headers_name, raw_headers)

    return ClusterSnapshot(contents=contents, stamps=stamps, headers=headers)


async def write_snapshot(
    medium: PersistenceMedium,
    config: ClusterConfig,
    contents: Mapping[str, Any],
    stamps: Mapping[str, datetime],
    headers: Mapping[str, HeaderEntry],
) -> None:
    """Write headers, stamps and contents to their configured slots."""
    if config.headers_name:
        await medium.set(config.headers_name, encode_headers(headers))
    if config.timestamps_name:
        await medium.set(config.timestamps_name, encode_stamps(stamps))
    await medium.set(config.persistence_name, json.dumps(dict(contents)))


async def delete_snapshot(medium: PersistenceMedium, config: ClusterConfig) -> None:
    """Delete the contents slot and, when configured, the stamps slot."""
    await medium.delete(config.persistence_name)
    if config.timestamps_name:
        await medium.delete(config.timestamps_name)
