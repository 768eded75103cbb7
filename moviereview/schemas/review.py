from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr, field_validator

RATING_MIN = 1
RATING_MAX = 5
RATING_RANGE_MESSAGE = f"Rating must be between {RATING_MIN} and {RATING_MAX}"
BODY_TYPE_MESSAGE = "Body must be a string"

# JSON numbers only: booleans and numeric strings are rejected.
Rating = Union[StrictInt, StrictFloat]


def _check_rating(value: Union[int, float]) -> Union[int, float]:
    if not (RATING_MIN <= value <= RATING_MAX):
        raise ValueError(RATING_RANGE_MESSAGE)
    return value


class ReviewCreate(BaseModel):
    movieId: StrictStr = Field(..., min_length=1, description="External movie reference")
    movieTitle: Optional[str] = Field(None, description='Display title; defaults to "Movie <movieId>"')
    rating: Rating = Field(..., description="1..5")
    body: str = ""

    @field_validator("rating")
    @classmethod
    def _rating_in_range(cls, v):
        return _check_rating(v)

    @field_validator("body", mode="before")
    @classmethod
    def _null_body_is_empty(cls, v):
        return "" if v is None else v

    def resolved_title(self) -> str:
        return self.movieTitle or f"Movie {self.movieId}"


class ReviewUpdate(BaseModel):
    """Partial update: only fields present in the request are applied."""

    rating: Optional[Rating] = None
    body: Optional[str] = None

    @field_validator("rating", "body", mode="before")
    @classmethod
    def _reject_explicit_null(cls, v, info):
        if v is None:
            raise ValueError(RATING_RANGE_MESSAGE if info.field_name == "rating" else BODY_TYPE_MESSAGE)
        return v

    @field_validator("rating")
    @classmethod
    def _rating_in_range(cls, v):
        return _check_rating(v)

    def changes(self) -> dict[str, Any]:
        return self.model_dump(include=self.model_fields_set)


class Review(BaseModel):
    # Schemaless store: documents written by other clients come back exactly as
    # stored, so nothing here is coerced or rejected on the way out.
    model_config = ConfigDict(extra="allow")

    id: str
    movieId: Any = None
    movieTitle: Any = None
    rating: Any = None
    body: Any = None
    userId: Any = None
    userEmail: Any = None
    createdAt: Any = None
    updatedAt: Any = None


class ReviewCreated(BaseModel):
    id: str
    message: str


class ReviewUpdated(BaseModel):
    ok: bool = True
    message: str
    reviewId: str


class ReviewDeleted(BaseModel):
    ok: bool = True
    message: str
    deletedId: str


class HealthStatus(BaseModel):
    ok: bool = True
    message: str
    timestamp: datetime
