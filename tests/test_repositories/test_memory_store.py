# tests/test_repositories/test_memory_store.py

import pytest

from moviereview.repositories.store import SERVER_TIMESTAMP, MemoryDocumentStore


@pytest.mark.anyio
async def test_insert_assigns_id_and_resolves_server_timestamp(store: MemoryDocumentStore):
    doc_id = await store.insert("things", {"name": "a", "at": SERVER_TIMESTAMP})
    doc = await store.get("things", doc_id)
    assert doc["id"] == doc_id
    assert doc["name"] == "a"
    assert doc["at"] is not SERVER_TIMESTAMP
    assert doc["at"].tzinfo is not None


@pytest.mark.anyio
async def test_get_missing_returns_none(store: MemoryDocumentStore):
    assert await store.get("things", "nope") is None


@pytest.mark.anyio
async def test_documents_are_copied(store: MemoryDocumentStore):
    data = {"tags": ["x"]}
    doc_id = await store.insert("things", data)
    data["tags"].append("mutated")

    doc = await store.get("things", doc_id)
    doc["tags"].append("also mutated")
    assert (await store.get("things", doc_id))["tags"] == ["x"]


@pytest.mark.anyio
async def test_query_filters_orders_and_limits(store: MemoryDocumentStore, clock):
    ids = []
    for i, kind in enumerate(["a", "b", "a", "a"]):
        ids.append(await store.insert("things", {"kind": kind, "n": i, "at": clock()}))

    newest_a = await store.query("things", filters=[("kind", "a")], order_by="at", descending=True)
    assert [d["id"] for d in newest_a] == [ids[3], ids[2], ids[0]]

    oldest_two = await store.query("things", order_by="at", limit=2)
    assert [d["n"] for d in oldest_two] == [0, 1]


@pytest.mark.anyio
async def test_query_excludes_documents_without_sort_field(store: MemoryDocumentStore, clock):
    await store.insert("things", {"kind": "a"})
    with_field = await store.insert("things", {"kind": "a", "at": clock()})
    assert [d["id"] for d in await store.query("things", order_by="at")] == [with_field]
    assert len(await store.query("things")) == 2


@pytest.mark.anyio
async def test_query_ties_keep_insertion_order(store: MemoryDocumentStore, clock):
    at = clock()
    first = await store.insert("things", {"at": at})
    second = await store.insert("things", {"at": at})
    docs = await store.query("things", order_by="at", descending=True)
    assert [d["id"] for d in docs] == [second, first]


@pytest.mark.anyio
async def test_update_merges_fields(store: MemoryDocumentStore):
    doc_id = await store.insert("things", {"a": 1, "b": 2, "at": SERVER_TIMESTAMP})
    before = await store.get("things", doc_id)
    await store.update("things", doc_id, {"b": 3, "at": SERVER_TIMESTAMP})
    after = await store.get("things", doc_id)
    assert (after["a"], after["b"]) == (1, 3)
    assert after["at"] > before["at"]


@pytest.mark.anyio
async def test_update_missing_raises_key_error(store: MemoryDocumentStore):
    with pytest.raises(KeyError):
        await store.update("things", "nope", {"a": 1})


@pytest.mark.anyio
async def test_delete_is_idempotent(store: MemoryDocumentStore):
    doc_id = await store.insert("things", {"a": 1})
    await store.delete("things", doc_id)
    await store.delete("things", doc_id)
    assert await store.get("things", doc_id) is None


@pytest.mark.anyio
async def test_collections_are_isolated(store: MemoryDocumentStore):
    doc_id = await store.insert("one", {"a": 1})
    assert await store.get("two", doc_id) is None
    assert await store.query("two") == []
