from __future__ import annotations

"""Document store interface and in-memory implementation.

The review service treats the document store as an external, authoritative
collaborator: a schemaless database addressing records by collection +
identifier, with equality filters, a single sort key, an optional limit, and
server-assigned timestamps.

Writers put the `SERVER_TIMESTAMP` sentinel in a field to ask the store for
its own clock; readers always get concrete `datetime` values back.
"""

import copy
import itertools
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Sequence, Tuple


class _ServerTimestamp:
    """Sentinel: replace with the store's current time on write."""

    _instance: Optional["_ServerTimestamp"] = None

    def __new__(cls) -> "_ServerTimestamp":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()

# (field, value) equality filters, ANDed together.
Filters = Sequence[Tuple[str, Any]]


class DocumentStore(Protocol):
    async def insert(self, collection: str, data: Mapping[str, Any]) -> str:
        """Create a document with a store-assigned id; return the id."""
        ...

    async def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        """Return the document's fields (plus `id`) or None when absent."""
        ...

    async def query(
        self,
        collection: str,
        *,
        filters: Filters = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        ...

    async def update(self, collection: str, doc_id: str, fields: Mapping[str, Any]) -> None:
        """Merge `fields` into an existing document. Raises KeyError when absent."""
        ...

    async def delete(self, collection: str, doc_id: str) -> None:
        ...

    async def close(self) -> None:
        ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MemoryDocumentStore:
    """
    In-process document store.

    Used for local development and tests. Documents are deep-copied on the way
    in and out so callers never share mutable state with the store. Ordering
    ties on the sort key are broken by insertion order.
    """

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._seq: Dict[str, int] = {}
        self._counter = itertools.count()

    # Helpers
    def _coll(self, name: str) -> Dict[str, Dict[str, Any]]:
        return self._collections.setdefault(name, {})

    def _resolve(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        now = self._clock()
        return {k: (now if v is SERVER_TIMESTAMP else copy.deepcopy(v)) for k, v in data.items()}

    @staticmethod
    def _with_id(doc_id: str, doc: Mapping[str, Any]) -> Dict[str, Any]:
        out = copy.deepcopy(dict(doc))
        out["id"] = doc_id
        return out

    async def insert(self, collection: str, data: Mapping[str, Any]) -> str:
        doc_id = uuid.uuid4().hex
        self._coll(collection)[doc_id] = self._resolve(data)
        self._seq[doc_id] = next(self._counter)
        return doc_id

    async def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        doc = self._coll(collection).get(doc_id)
        if doc is None:
            return None
        return self._with_id(doc_id, doc)

    async def query(
        self,
        collection: str,
        *,
        filters: Filters = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        items = [
            (doc_id, doc)
            for doc_id, doc in self._coll(collection).items()
            if all(field in doc and doc[field] == value for field, value in filters)
        ]
        if order_by is not None:
            # Like Firestore, documents lacking the sort field are excluded.
            items = [(i, d) for i, d in items if d.get(order_by) is not None]
            items.sort(key=lambda it: (it[1][order_by], self._seq.get(it[0], 0)), reverse=descending)
        if limit is not None:
            items = items[: max(0, limit)]
        return [self._with_id(doc_id, doc) for doc_id, doc in items]

    async def update(self, collection: str, doc_id: str, fields: Mapping[str, Any]) -> None:
        coll = self._coll(collection)
        if doc_id not in coll:
            raise KeyError(doc_id)
        coll[doc_id].update(self._resolve(fields))

    async def delete(self, collection: str, doc_id: str) -> None:
        self._coll(collection).pop(doc_id, None)
        self._seq.pop(doc_id, None)

    async def close(self) -> None:
        return None


def build_document_store(settings) -> DocumentStore:
    """Construct the store selected by `STORE_BACKEND`."""
    if settings.STORE_BACKEND == "firestore":
        # Imported here so the in-memory backend works without the
        # `firestore` extra installed.
        from moviereview.repositories.firestore import FirestoreDocumentStore

        return FirestoreDocumentStore.from_settings(settings)
    return MemoryDocumentStore()


__all__ = [
    "SERVER_TIMESTAMP",
    "Filters",
    "DocumentStore",
    "MemoryDocumentStore",
    "build_document_store",
]
