# tests/test_services/test_review_service.py

import pytest

from moviereview.repositories.reviews import ReviewRepository
from moviereview.services.reviews import ReviewOutcome, ReviewService
from moviereview.services.token_verifier import Identity

OWNER = Identity(subject_id="owner", email="owner@example.com")
STRANGER = Identity(subject_id="stranger")


@pytest.fixture
def service(store) -> ReviewService:
    return ReviewService(ReviewRepository(store), list_limit=2)


async def _create(service: ReviewService, identity=OWNER, movie_id="tt1"):
    return await service.create(identity, movie_id=movie_id, movie_title="T", rating=3, body="b")


@pytest.mark.anyio
async def test_create_takes_identity_from_caller(service: ReviewService):
    review_id = await _create(service)
    review = await service.get(review_id)
    assert review["userId"] == "owner"
    assert review["userEmail"] == "owner@example.com"


@pytest.mark.anyio
async def test_create_without_email(service: ReviewService):
    review_id = await _create(service, identity=STRANGER)
    assert (await service.get(review_id))["userEmail"] is None


@pytest.mark.anyio
async def test_list_recent_uses_configured_limit(service: ReviewService):
    for i in range(3):
        await _create(service, movie_id=f"tt{i}")
    assert [r["movieId"] for r in await service.list_recent()] == ["tt2", "tt1"]


@pytest.mark.anyio
async def test_update_outcomes(service: ReviewService):
    review_id = await _create(service)
    assert await service.update("missing", OWNER, {"rating": 5}) is ReviewOutcome.NOT_FOUND
    assert await service.update(review_id, STRANGER, {"rating": 5}) is ReviewOutcome.FORBIDDEN
    assert (await service.get(review_id))["rating"] == 3

    assert await service.update(review_id, OWNER, {"rating": 5, "userId": "stranger"}) is ReviewOutcome.OK
    review = await service.get(review_id)
    assert review["rating"] == 5
    assert review["userId"] == "owner"


@pytest.mark.anyio
async def test_delete_outcomes(service: ReviewService):
    review_id = await _create(service)
    assert await service.delete(review_id, STRANGER) is ReviewOutcome.FORBIDDEN
    assert await service.delete(review_id, OWNER) is ReviewOutcome.OK
    assert await service.delete(review_id, OWNER) is ReviewOutcome.NOT_FOUND


@pytest.mark.anyio
async def test_store_errors_propagate(failing_store):
    service = ReviewService(ReviewRepository(failing_store))
    with pytest.raises(RuntimeError):
        await service.update("abc", OWNER, {"rating": 4})
    assert failing_store.calls == ["get"]
