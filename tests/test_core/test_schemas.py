# tests/test_core/test_schemas.py

import pytest
from pydantic import ValidationError

from moviereview.schemas.review import ReviewCreate, ReviewUpdate


def test_create_resolves_default_title():
    assert ReviewCreate(movieId="9", rating=2).resolved_title() == "Movie 9"
    assert ReviewCreate(movieId="9", movieTitle="Nine", rating=2).resolved_title() == "Nine"


def test_create_null_body_becomes_empty():
    assert ReviewCreate(movieId="9", rating=2, body=None).body == ""


@pytest.mark.parametrize("rating", [True, "3", None, 0, 5.01])
def test_create_rejects_bad_rating(rating):
    with pytest.raises(ValidationError):
        ReviewCreate(movieId="9", rating=rating)


def test_update_changes_only_sent_fields():
    assert ReviewUpdate.model_validate({"rating": 4}).changes() == {"rating": 4}
    assert ReviewUpdate.model_validate({"body": "x"}).changes() == {"body": "x"}
    assert ReviewUpdate.model_validate({}).changes() == {}
    assert ReviewUpdate.model_validate({"movieId": "tt2"}).changes() == {}
