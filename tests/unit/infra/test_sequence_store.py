"""Tests for SequenceStore."""

from __future__ import annotations

import pytest

from cachecluster_core.interfaces.storage import (
    BulkStorage,
    ClearableStorage,
    MergeableStorage,
    QueryableStorage,
    supports,
)
from cachecluster_core.models.storage import FindResult, MergeStrategy, StorageConfig
from cachecluster_infra.storages.sequence_store import SequenceStore


def _filled(*items: object, limit: int = 10) -> SequenceStore[object]:
    """Create a store holding the given items."""
    store: SequenceStore[object] = SequenceStore(limit=limit)
    store.set_all(list(items))
    return store


@pytest.mark.unit
class TestSequenceStoreInsert:
    """Tests for add_item and the overflow-reset policy."""

    def test_append_with_minus_one(self) -> None:
        """Index -1 appends."""
        store = _filled("a")
        store.add_item(-1, "b")
        assert store.get_all() == ["a", "b"]

    def test_append_past_end(self) -> None:
        """An index beyond the length appends instead of padding."""
        store = _filled("a")
        store.add_item(7, "b")
        assert store.get_all() == ["a", "b"]

    def test_overwrite_in_place(self) -> None:
        """An in-range index overwrites."""
        store = _filled("a", "b")
        store.add_item(0, "z")
        assert store.get_all() == ["z", "b"]

    def test_length_never_exceeds_limit(self) -> None:
        """Up to limit insertions keep every item."""
        store: SequenceStore[int] = SequenceStore(limit=3)
        for i in range(3):
            store.add_item(-1, i)
            assert len(store.get_all()) <= 3
        assert store.get_all() == [0, 1, 2]

    def test_overflow_resets_whole_store(self) -> None:
        """The limit+1-th insertion leaves only the new item."""
        store: SequenceStore[int] = SequenceStore(limit=3)
        for i in range(4):
            store.add_item(-1, i)
        assert store.get_all() == [3]

    def test_invalid_limit_raises(self) -> None:
        """A non-positive limit is rejected at construction."""
        with pytest.raises(ValueError, match="limit must be positive"):
            SequenceStore(limit=0)


@pytest.mark.unit
class TestSequenceStoreAccess:
    """Tests for get/update/remove."""

    def test_get_out_of_range_returns_empty_list(self) -> None:
        """Reading past the end of a 3-item store returns []."""
        store = _filled("a", "b", "c")
        assert store.get_item(5) == []
        assert store.get_item(-1) == []

    def test_update_in_range(self) -> None:
        """update_item replaces an existing index."""
        store = _filled("a", "b")
        store.update_item(1, "z")
        assert store.get_all() == ["a", "z"]

    def test_update_out_of_range_is_noop(self) -> None:
        """update_item never appends."""
        store = _filled("a", "b")
        store.update_item(2, "z")
        store.update_item(-1, "z")
        assert store.get_all() == ["a", "b"]

    def test_remove_shifts_tail(self) -> None:
        """Removing an index deletes exactly that element."""
        store = _filled("a", "b", "c", "d")
        store.remove_item(1)
        assert store.get_all() == ["a", "c", "d"]
        assert store.get_item(1) == "c"

    def test_remove_out_of_range_is_noop(self) -> None:
        """Removing a missing index changes nothing."""
        store = _filled("a", "b")
        store.remove_item(9)
        assert store.get_all() == ["a", "b"]

    def test_remove_all(self) -> None:
        """remove_all empties the store."""
        store = _filled("a", "b")
        store.remove_all()
        assert store.get_all() == []


@pytest.mark.unit
class TestSequenceStoreOptional:
    """Tests for the optional capabilities."""

    def test_supports_every_capability(self) -> None:
        """SequenceStore implements all optional capabilities."""
        store: SequenceStore[int] = SequenceStore()
        assert supports(store, BulkStorage)
        assert supports(store, ClearableStorage)
        assert supports(store, MergeableStorage)
        assert supports(store, QueryableStorage)

    def test_assign_concatenates(self) -> None:
        """assign appends the payload."""
        store = _filled(1, 2)
        store.assign([3, 4])
        assert store.get_all() == [1, 2, 3, 4]

    def test_assign_empty_is_noop(self) -> None:
        """An empty payload changes nothing."""
        store = _filled(1)
        store.assign([])
        assert store.get_all() == [1]

    def test_assign_past_limit_rejected(self) -> None:
        """An assign whose result would exceed the limit is ignored."""
        store: SequenceStore[str] = SequenceStore(limit=2)
        store.add_item(-1, "a")
        store.assign(["b", "c", "d"])
        assert store.get_all() == ["a"]

    def test_assign_up_to_limit_accepted(self) -> None:
        """A result exactly at the limit is kept."""
        store: SequenceStore[str] = SequenceStore(limit=3)
        store.add_item(-1, "a")
        store.assign(["b", "c"])
        assert store.get_all() == ["a", "b", "c"]

    def test_assign_overwrite_strategy(self) -> None:
        """With OVERWRITE the payload replaces the contents."""
        store: SequenceStore[int] = SequenceStore(
            config=StorageConfig(merge_strategy=MergeStrategy.OVERWRITE)
        )
        store.set_all([1, 2])
        store.assign([3])
        assert store.get_all() == [3]

    def test_update_chunk_primitive_replaces(self) -> None:
        """A primitive partial replaces the item."""
        store = _filled(1, 2)
        store.update_item_chunk(0, 10)
        assert store.get_all() == [10, 2]

    def test_update_chunk_record_merges(self) -> None:
        """A record partial overwrites its fields and keeps the rest."""
        store = _filled({"id": 1, "title": "a", "done": False})
        store.update_item_chunk(0, {"done": True})
        assert store.get_item(0) == {"id": 1, "title": "a", "done": True}

    def test_update_chunk_out_of_range_is_noop(self) -> None:
        """Partial updates never insert."""
        store = _filled({"id": 1})
        store.update_item_chunk(3, {"id": 2})
        assert store.get_all() == [{"id": 1}]

    def test_get_specific_items(self) -> None:
        """Only in-range indexes are returned, in argument order."""
        store = _filled("a", "b", "c")
        assert store.get_specific_items(2, 0, 7) == ["c", "a"]

    def test_find(self) -> None:
        """find returns the first match with its index."""
        store = _filled({"id": 1}, {"id": 2}, {"id": 2})
        assert store.find(lambda item: item["id"] == 2) == FindResult(1, {"id": 2})
        assert store.find(lambda item: item["id"] == 9) is None

    def test_get_all_returns_copy(self) -> None:
        """Mutating the export does not touch the store."""
        store = _filled("a")
        exported = store.get_all()
        exported.append("b")
        assert store.get_all() == ["a"]

    def test_set_all_rejects_oversized_payload(self) -> None:
        """set_all ignores payloads longer than the limit instead of truncating."""
        store = _filled("a", limit=2)
        store.set_all(["x", "y", "z"])
        assert store.get_all() == ["a"]
