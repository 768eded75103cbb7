from __future__ import annotations

"""Google Cloud Firestore adapter for the `DocumentStore` interface.

Requires the `firestore` extra (`pip install moviereview[firestore]`).

Env:
  - FIRESTORE_PROJECT_ID (falls back to FIREBASE_PROJECT_ID)
  - FIRESTORE_CREDENTIALS_FILE: service-account JSON. When unset, Application
    Default Credentials apply (GOOGLE_APPLICATION_CREDENTIALS, metadata server).
"""

import inspect
import logging
from typing import Any, Dict, List, Mapping, Optional

from google.api_core.exceptions import NotFound
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter
from google.oauth2 import service_account

from moviereview.repositories.store import SERVER_TIMESTAMP, Filters

logger = logging.getLogger(__name__)


def _to_firestore(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: (firestore.SERVER_TIMESTAMP if v is SERVER_TIMESTAMP else v) for k, v in data.items()}


def _snapshot_to_dict(snapshot) -> Dict[str, Any]:
    out = dict(snapshot.to_dict() or {})
    out["id"] = snapshot.id
    return out


class FirestoreDocumentStore:
    """Async Firestore client wrapper. One client per process, injected at startup."""

    def __init__(self, client: firestore.AsyncClient) -> None:
        self._client = client

    @classmethod
    def from_settings(cls, settings) -> "FirestoreDocumentStore":
        credentials = None
        if settings.FIRESTORE_CREDENTIALS_FILE:
            credentials = service_account.Credentials.from_service_account_file(
                settings.FIRESTORE_CREDENTIALS_FILE
            )
        project = settings.firestore_project or getattr(credentials, "project_id", None)
        logger.info("Using Firestore project %s", project or "<default>")
        return cls(firestore.AsyncClient(project=project, credentials=credentials))

    async def insert(self, collection: str, data: Mapping[str, Any]) -> str:
        _update_time, ref = await self._client.collection(collection).add(_to_firestore(data))
        return ref.id

    async def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        snapshot = await self._client.collection(collection).document(doc_id).get()
        if not snapshot.exists:
            return None
        return _snapshot_to_dict(snapshot)

    async def query(
        self,
        collection: str,
        *,
        filters: Filters = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        query = self._client.collection(collection)
        for field, value in filters:
            query = query.where(filter=FieldFilter(field, "==", value))
        if order_by is not None:
            direction = firestore.Query.DESCENDING if descending else firestore.Query.ASCENDING
            query = query.order_by(order_by, direction=direction)
        if limit is not None:
            query = query.limit(limit)
        return [_snapshot_to_dict(snap) async for snap in query.stream()]

    async def update(self, collection: str, doc_id: str, fields: Mapping[str, Any]) -> None:
        try:
            await self._client.collection(collection).document(doc_id).update(_to_firestore(fields))
        except NotFound as exc:
            raise KeyError(doc_id) from exc

    async def delete(self, collection: str, doc_id: str) -> None:
        await self._client.collection(collection).document(doc_id).delete()

    async def close(self) -> None:
        # Depending on the library version, close() is sync or returns an awaitable.
        result = self._client.close()
        if inspect.isawaitable(result):
            await result


__all__ = ["FirestoreDocumentStore"]
