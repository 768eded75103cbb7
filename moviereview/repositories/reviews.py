from __future__ import annotations

"""Reviews repository.

Thin data-access layer over a `DocumentStore`: knows the collection name, the
field names of a review document, and the sort order every listing uses
(`createdAt`, newest first). Ownership rules live in the service layer.
"""

from typing import Any, Dict, List, Optional

from moviereview.repositories.store import SERVER_TIMESTAMP, DocumentStore

CREATED_AT = "createdAt"
UPDATED_AT = "updatedAt"


class ReviewRepository:
    def __init__(self, store: DocumentStore, *, collection: str = "reviews") -> None:
        self._store = store
        self._collection = collection

    async def create(
        self,
        *,
        movie_id: str,
        movie_title: str,
        rating: float,
        body: str,
        user_id: str,
        user_email: Optional[str],
    ) -> str:
        return await self._store.insert(
            self._collection,
            {
                "movieId": movie_id,
                "movieTitle": movie_title,
                "rating": rating,
                "body": body,
                "userId": user_id,
                "userEmail": user_email,
                CREATED_AT: SERVER_TIMESTAMP,
                UPDATED_AT: SERVER_TIMESTAMP,
            },
        )

    async def get(self, review_id: str) -> Optional[Dict[str, Any]]:
        return await self._store.get(self._collection, review_id)

    async def list_recent(self, *, limit: int) -> List[Dict[str, Any]]:
        return await self._store.query(self._collection, order_by=CREATED_AT, descending=True, limit=limit)

    async def list_by_movie(self, movie_id: str) -> List[Dict[str, Any]]:
        return await self._store.query(
            self._collection,
            filters=[("movieId", movie_id)],
            order_by=CREATED_AT,
            descending=True,
        )

    async def list_by_user(self, user_id: str) -> List[Dict[str, Any]]:
        return await self._store.query(
            self._collection,
            filters=[("userId", user_id)],
            order_by=CREATED_AT,
            descending=True,
        )

    async def update(self, review_id: str, fields: Dict[str, Any]) -> None:
        """Apply `fields` and refresh `updatedAt`."""
        await self._store.update(self._collection, review_id, {**fields, UPDATED_AT: SERVER_TIMESTAMP})

    async def delete(self, review_id: str) -> None:
        await self._store.delete(self._collection, review_id)


__all__ = ["ReviewRepository", "CREATED_AT", "UPDATED_AT"]
