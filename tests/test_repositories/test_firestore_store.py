# tests/test_repositories/test_firestore_store.py

"""
Firestore adapter against a fake AsyncClient (no emulator needed).
Skipped when the `firestore` extra is not installed.
"""

import pytest

firestore = pytest.importorskip("google.cloud.firestore")

from google.api_core.exceptions import NotFound  # noqa: E402

from moviereview.repositories.firestore import FirestoreDocumentStore  # noqa: E402
from moviereview.repositories.store import SERVER_TIMESTAMP  # noqa: E402


class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data
        self.exists = data is not None

    def to_dict(self):
        return dict(self._data) if self._data is not None else None


class FakeDocument:
    def __init__(self, coll, doc_id):
        self._coll = coll
        self.id = doc_id

    async def get(self):
        return FakeSnapshot(self.id, self._coll.docs.get(self.id))

    async def update(self, fields):
        if self.id not in self._coll.docs:
            raise NotFound("no document")
        self._coll.docs[self.id].update(fields)

    async def delete(self):
        self._coll.docs.pop(self.id, None)


class FakeCollection:
    def __init__(self):
        self.docs = {}
        self.calls = []

    async def add(self, data):
        doc_id = f"doc{len(self.docs) + 1}"
        self.docs[doc_id] = dict(data)
        return None, FakeDocument(self, doc_id)

    def document(self, doc_id):
        return FakeDocument(self, doc_id)

    def where(self, *, filter):
        self.calls.append(("where", filter))
        return self

    def order_by(self, field, direction):
        self.calls.append(("order_by", field, direction))
        return self

    def limit(self, n):
        self.calls.append(("limit", n))
        return self

    async def stream(self):
        for doc_id, data in self.docs.items():
            yield FakeSnapshot(doc_id, data)


class FakeClient:
    def __init__(self):
        self.collections = {}
        self.closed = False

    def collection(self, name):
        return self.collections.setdefault(name, FakeCollection())

    def close(self):
        self.closed = True


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def fs_store(fake_client) -> FirestoreDocumentStore:
    return FirestoreDocumentStore(fake_client)


@pytest.mark.anyio
async def test_insert_maps_server_timestamp(fs_store, fake_client):
    doc_id = await fs_store.insert("reviews", {"rating": 4, "createdAt": SERVER_TIMESTAMP})
    stored = fake_client.collection("reviews").docs[doc_id]
    assert stored["rating"] == 4
    assert stored["createdAt"] is firestore.SERVER_TIMESTAMP


@pytest.mark.anyio
async def test_get_returns_id_or_none(fs_store):
    doc_id = await fs_store.insert("reviews", {"rating": 4})
    assert await fs_store.get("reviews", doc_id) == {"rating": 4, "id": doc_id}
    assert await fs_store.get("reviews", "missing") is None


@pytest.mark.anyio
async def test_query_builds_filters_order_and_limit(fs_store, fake_client):
    await fs_store.insert("reviews", {"movieId": "tt1"})
    docs = await fs_store.query(
        "reviews", filters=[("movieId", "tt1")], order_by="createdAt", descending=True, limit=5
    )
    assert docs[0]["movieId"] == "tt1"

    calls = fake_client.collection("reviews").calls
    assert [c[0] for c in calls] == ["where", "order_by", "limit"]
    assert calls[1][1:] == ("createdAt", firestore.Query.DESCENDING)
    assert calls[2][1] == 5


@pytest.mark.anyio
async def test_update_missing_document_raises_key_error(fs_store):
    with pytest.raises(KeyError):
        await fs_store.update("reviews", "missing", {"rating": 1})


@pytest.mark.anyio
async def test_close_handles_sync_client_close(fs_store, fake_client):
    await fs_store.close()
    assert fake_client.closed is True
