from __future__ import annotations

"""
Review service
==============
Business rules for reviews on top of `ReviewRepository`:

- identity fields (`userId`, `userEmail`) come from the verified caller, never
  from the request body;
- only the owner may update or delete, checked here by comparing the stored
  `userId` with the caller (read, then conditional write; not atomic);
- updates are partial: only fields present in the request are written.

Expected failures (`NOT_FOUND`, `FORBIDDEN`) are returned as `ReviewOutcome`
values. Store failures propagate as exceptions for the HTTP layer to map.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from moviereview.repositories.reviews import ReviewRepository
from moviereview.services.token_verifier import Identity

logger = logging.getLogger(__name__)


class ReviewOutcome(str, Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"


class ReviewService:
    def __init__(self, repo: ReviewRepository, *, list_limit: int = 50) -> None:
        self._repo = repo
        self._list_limit = list_limit

    async def create(
        self,
        identity: Identity,
        *,
        movie_id: str,
        movie_title: str,
        rating: float,
        body: str,
    ) -> str:
        return await self._repo.create(
            movie_id=movie_id,
            movie_title=movie_title,
            rating=rating,
            body=body,
            user_id=identity.subject_id,
            user_email=identity.email,
        )

    async def list_recent(self) -> List[Dict[str, Any]]:
        return await self._repo.list_recent(limit=self._list_limit)

    async def list_by_movie(self, movie_id: str) -> List[Dict[str, Any]]:
        return await self._repo.list_by_movie(movie_id)

    async def list_by_user(self, user_id: str) -> List[Dict[str, Any]]:
        return await self._repo.list_by_user(user_id)

    async def get(self, review_id: str) -> Optional[Dict[str, Any]]:
        return await self._repo.get(review_id)

    async def _check_owner(self, review_id: str, identity: Identity) -> ReviewOutcome:
        doc = await self._repo.get(review_id)
        if doc is None:
            return ReviewOutcome.NOT_FOUND
        if doc.get("userId") != identity.subject_id:
            logger.warning("User %s is not the owner of review %s", identity.subject_id, review_id)
            return ReviewOutcome.FORBIDDEN
        return ReviewOutcome.OK

    async def update(self, review_id: str, identity: Identity, changes: Dict[str, Any]) -> ReviewOutcome:
        outcome = await self._check_owner(review_id, identity)
        if outcome is not ReviewOutcome.OK:
            return outcome
        fields = {k: v for k, v in changes.items() if k in ("rating", "body")}
        await self._repo.update(review_id, fields)
        return ReviewOutcome.OK

    async def delete(self, review_id: str, identity: Identity) -> ReviewOutcome:
        outcome = await self._check_owner(review_id, identity)
        if outcome is not ReviewOutcome.OK:
            return outcome
        await self._repo.delete(review_id)
        return ReviewOutcome.OK


__all__ = ["ReviewOutcome", "ReviewService"]
