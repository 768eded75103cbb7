# ╔══════════════════════════════════════════════════════════════════════════╗
# ║ 🎬 MovieReview · Reviews API                                             ║
# ╠──────────────────────────────────────────────────────────────────────────╣
# ║ Endpoints:                                                               ║
# ║  - POST   /reviews                    → Create review (bearer)           ║
# ║  - GET    /reviews                    → Newest reviews (capped)          ║
# ║  - GET    /reviews/movie/{movieId}    → Reviews for a movie              ║
# ║  - GET    /reviews/user/{userId}      → Reviews by a user                ║
# ║  - GET    /reviews/single/{reviewId}  → One review                       ║
# ║  - PUT    /reviews/{id}               → Partial update (owner only)      ║
# ║  - DELETE /reviews/{id}               → Delete (owner only)              ║
# ╠──────────────────────────────────────────────────────────────────────────╣
# ║ Notes                                                                    ║
# ║  - Reads are public; mutations require a verified bearer credential.     ║
# ║  - Store failures are logged with stack traces and answered with a       ║
# ║    generic 500; no internal detail reaches the client.                   ║
# ╚══════════════════════════════════════════════════════════════════════════╝
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Path

from moviereview.api.deps import get_current_identity, get_review_service, validation_fallback
from moviereview.core.exceptions import (
    ForbiddenException,
    NotFoundException,
    ServerErrorException,
)
from moviereview.schemas.review import (
    BODY_TYPE_MESSAGE,
    RATING_RANGE_MESSAGE,
    Review,
    ReviewCreate,
    ReviewCreated,
    ReviewDeleted,
    ReviewUpdate,
    ReviewUpdated,
)
from moviereview.services.reviews import ReviewOutcome, ReviewService
from moviereview.services.token_verifier import Identity

logger = logging.getLogger(__name__)

REVIEW_NOT_FOUND = "Movie review not found"
CREATE_INVALID_INPUT = "Invalid input - movieId and rating are required"

router = APIRouter(
    prefix="/reviews",
    tags=["Reviews"],
    responses={
        400: {"description": "Bad Request"},
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
        404: {"description": "Not Found"},
        500: {"description": "Internal Server Error"},
    },
)


def _raise_for_outcome(outcome: ReviewOutcome, *, action: str) -> None:
    if outcome is ReviewOutcome.NOT_FOUND:
        raise NotFoundException(REVIEW_NOT_FOUND)
    if outcome is ReviewOutcome.FORBIDDEN:
        raise ForbiddenException(f"Forbidden - You can only {action} your own movie reviews")


# ╭───────────────────────────────────────────────────────────────────────────╮
# │ Create                                                                     │
# ╰───────────────────────────────────────────────────────────────────────────╯

@router.post(
    "",
    response_model=ReviewCreated,
    summary="Create a movie review",
    dependencies=[Depends(validation_fallback(CREATE_INVALID_INPUT, body=BODY_TYPE_MESSAGE))],
)
async def create_review(
    payload: ReviewCreate,
    identity: Identity = Depends(get_current_identity),
    service: ReviewService = Depends(get_review_service),
):
    """
    Create a review owned by the caller.

    `userId`/`userEmail` come from the verified token; both timestamps are set
    by the store. Several reviews per user per movie are allowed.
    """
    logger.info("Creating movie review for user %s", identity.subject_id)
    try:
        review_id = await service.create(
            identity,
            movie_id=payload.movieId,
            movie_title=payload.resolved_title(),
            rating=payload.rating,
            body=payload.body,
        )
    except Exception:
        logger.exception("Create movie review failed")
        raise ServerErrorException("Server error - Failed to create movie review")

    logger.info("Movie review created with ID %s", review_id)
    return ReviewCreated(id=review_id, message="Movie review created successfully")


# ╭───────────────────────────────────────────────────────────────────────────╮
# │ Read                                                                       │
# ╰───────────────────────────────────────────────────────────────────────────╯

@router.get(
    "",
    response_model=List[Review],
    response_model_exclude_unset=True,
    summary="List the newest reviews",
)
async def list_reviews(service: ReviewService = Depends(get_review_service)):
    """Newest reviews first, capped (50 by default); no pagination cursor."""
    try:
        reviews = await service.list_recent()
    except Exception:
        logger.exception("Get all movie reviews failed")
        raise ServerErrorException("Server error - Failed to fetch movie reviews")

    logger.info("Found %d total movie reviews", len(reviews))
    return reviews


@router.get(
    "/movie/{movieId}",
    response_model=List[Review],
    response_model_exclude_unset=True,
    summary="List reviews for a movie",
)
async def list_movie_reviews(
    movieId: str = Path(..., min_length=1),
    service: ReviewService = Depends(get_review_service),
):
    try:
        reviews = await service.list_by_movie(movieId)
    except Exception:
        logger.exception("Get movie reviews failed for movie %s", movieId)
        raise ServerErrorException("Server error - Failed to fetch movie reviews")

    logger.info("Found %d reviews for movie %s", len(reviews), movieId)
    return reviews


@router.get(
    "/user/{userId}",
    response_model=List[Review],
    response_model_exclude_unset=True,
    summary="List reviews by a user",
)
async def list_user_reviews(
    userId: str = Path(..., min_length=1),
    service: ReviewService = Depends(get_review_service),
):
    # Public on purpose: anyone may list any user's reviews.
    try:
        reviews = await service.list_by_user(userId)
    except Exception:
        logger.exception("Get user movie reviews failed for user %s", userId)
        raise ServerErrorException("Server error - Failed to fetch user movie reviews")

    logger.info("Found %d movie reviews for user %s", len(reviews), userId)
    return reviews


@router.get(
    "/single/{reviewId}",
    response_model=Review,
    response_model_exclude_unset=True,
    summary="Get one review",
)
async def get_review(
    reviewId: str = Path(..., min_length=1),
    service: ReviewService = Depends(get_review_service),
):
    try:
        review: Dict[str, Any] | None = await service.get(reviewId)
    except Exception:
        logger.exception("Get single movie review failed for %s", reviewId)
        raise ServerErrorException("Server error - Failed to fetch movie review")

    if review is None:
        raise NotFoundException(REVIEW_NOT_FOUND)
    return review


# ╭───────────────────────────────────────────────────────────────────────────╮
# │ Update / Delete (owner only)                                               │
# ╰───────────────────────────────────────────────────────────────────────────╯

@router.put(
    "/{id}",
    response_model=ReviewUpdated,
    summary="Update your review (partial)",
    dependencies=[Depends(validation_fallback(RATING_RANGE_MESSAGE, body=BODY_TYPE_MESSAGE))],
)
async def update_review(
    payload: Optional[ReviewUpdate] = None,
    id: str = Path(..., min_length=1),
    identity: Identity = Depends(get_current_identity),
    service: ReviewService = Depends(get_review_service),
):
    """
    Apply `rating` and/or `body`; omitted fields stay untouched and
    `updatedAt` is refreshed. Not transactional: last writer wins.
    """
    changes = payload.changes() if payload is not None else {}
    logger.info("Updating movie review %s (fields: %s)", id, sorted(changes))
    try:
        outcome = await service.update(id, identity, changes)
    except Exception:
        logger.exception("Update movie review failed for %s", id)
        raise ServerErrorException("Server error - Failed to update movie review")

    _raise_for_outcome(outcome, action="update")
    logger.info("Movie review updated successfully: %s", id)
    return ReviewUpdated(message="Movie review updated successfully", reviewId=id)


@router.delete("/{id}", response_model=ReviewDeleted, summary="Delete your review")
async def delete_review(
    id: str = Path(..., min_length=1),
    identity: Identity = Depends(get_current_identity),
    service: ReviewService = Depends(get_review_service),
):
    logger.info("Deleting movie review %s", id)
    try:
        outcome = await service.delete(id, identity)
    except Exception:
        logger.exception("Delete movie review failed for %s", id)
        raise ServerErrorException("Server error - Failed to delete movie review")

    _raise_for_outcome(outcome, action="delete")
    logger.info("Movie review deleted successfully: %s", id)
    return ReviewDeleted(message="Movie review deleted successfully", deletedId=id)
