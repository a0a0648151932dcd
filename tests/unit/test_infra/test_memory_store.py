"""Unit tests for the in-memory data store."""
from __future__ import annotations

import pytest

from relaykit.core.exceptions import NotFoundException
from relaykit.core.mutations import Patch
from relaykit.core.pagination import Direction, OrderedQuery, Ordering, OrderKey
from relaykit.infra.datastore import CountableSource, DataStore
from relaykit.infra.datastore.memory import InMemoryDataStore


@pytest.fixture
def store() -> InMemoryDataStore:
    rows = [
        {"id": "a", "score": 3},
        {"id": "b", "score": None},
        {"id": "c", "score": 1},
        {"id": "d", "score": 3},
    ]
    return InMemoryDataStore(Ordering("score"), rows)


def ids(rows: list[dict]) -> list[str]:
    return [row["id"] for row in rows]


@pytest.mark.unit
class TestFetchOrdered:
    """Tests for InMemoryDataStore.fetch_ordered."""

    async def test_satisfies_protocols(self, store: InMemoryDataStore):
        assert isinstance(store, DataStore)
        assert isinstance(store, CountableSource)

    async def test_forward_order_with_null_first(self, store: InMemoryDataStore):
        rows = await store.fetch_ordered(OrderedQuery(store.ordering, limit=10))

        assert ids(rows) == ["b", "c", "a", "d"]

    async def test_backward_returns_nearest_first(self, store: InMemoryDataStore):
        query = OrderedQuery(store.ordering, limit=2, direction=Direction.BACKWARD)

        assert ids(await store.fetch_ordered(query)) == ["d", "a"]

    async def test_forward_after_cursor(self, store: InMemoryDataStore):
        """Ties on the primary value are broken by the id."""
        query = OrderedQuery(store.ordering, limit=10, cursor=OrderKey(3, "a"))

        assert ids(await store.fetch_ordered(query)) == ["d"]

    async def test_backward_before_cursor(self, store: InMemoryDataStore):
        query = OrderedQuery(
            store.ordering, limit=10, direction=Direction.BACKWARD, cursor=OrderKey(1, "c")
        )

        assert ids(await store.fetch_ordered(query)) == ["b"]

    async def test_cursor_on_null_primary(self, store: InMemoryDataStore):
        query = OrderedQuery(store.ordering, limit=10, cursor=OrderKey(None, "b"))

        assert ids(await store.fetch_ordered(query)) == ["c", "a", "d"]

    async def test_descending(self):
        ordering = Ordering("score", descending=True)
        store = InMemoryDataStore(ordering, [{"id": "x", "score": 1}, {"id": "y", "score": 2}])

        rows = await store.fetch_ordered(OrderedQuery(ordering, limit=10))

        assert ids(rows) == ["y", "x"]

    async def test_filters(self, store: InMemoryDataStore):
        query = OrderedQuery(store.ordering, limit=10, filters={"score": 3})

        assert ids(await store.fetch_ordered(query)) == ["a", "d"]
        assert await store.count({"score": 3}) == 2

    async def test_returned_rows_are_copies(self, store: InMemoryDataStore):
        rows = await store.fetch_ordered(OrderedQuery(store.ordering, limit=1))
        rows[0]["score"] = 99

        assert (await store.get("b"))["score"] is None


@pytest.mark.unit
class TestKeyedAccess:
    """Tests for get/put/create."""

    async def test_get_missing_returns_none(self, store: InMemoryDataStore):
        assert await store.get("zzz") is None

    async def test_put_applies_patch(self, store: InMemoryDataStore):
        updated = await store.put("a", Patch(values={"score": 5}, cleared=frozenset()))

        assert updated["score"] == 5
        assert (await store.get("a"))["score"] == 5

    async def test_put_clears_fields(self, store: InMemoryDataStore):
        await store.put("a", Patch(cleared=frozenset({"score"})))

        assert (await store.get("a"))["score"] is None

    async def test_put_missing_row_raises(self, store: InMemoryDataStore):
        with pytest.raises(NotFoundException):
            await store.put("zzz", Patch())

    async def test_create_assigns_id(self):
        store = InMemoryDataStore(Ordering("score"))

        row = await store.create({"score": 1})

        assert row["id"] == "1"
        assert len(store) == 1

    async def test_duplicate_id_rejected(self, store: InMemoryDataStore):
        with pytest.raises(ValueError):
            await store.create({"id": "a", "score": 0})
