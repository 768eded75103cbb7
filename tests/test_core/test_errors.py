# tests/test_core/test_errors.py

import pytest

from moviereview.core.exception_handlers import validation_message
from moviereview.core.exceptions import (
    BadRequestException,
    ForbiddenException,
    NotFoundException,
    ServerErrorException,
    UnauthorizedException,
)


# ──────────────────────────────────────────────────────────────
# 📦 Exception taxonomy
# ──────────────────────────────────────────────────────────────
@pytest.mark.parametrize(
    "exc_cls,status_code",
    [
        (BadRequestException, 400),
        (UnauthorizedException, 401),
        (ForbiddenException, 403),
        (NotFoundException, 404),
        (ServerErrorException, 500),
    ],
)
def test_status_codes(exc_cls, status_code):
    exc = exc_cls("boom")
    assert exc.status_code == status_code
    assert exc.to_body() == {"error": "boom"}


def test_default_message():
    exc = BadRequestException()
    assert exc.message == "Invalid input"
    assert exc.to_body() == {"error": "Invalid input"}


def test_unauthorized_sets_bearer_challenge():
    assert UnauthorizedException().headers == {"WWW-Authenticate": "Bearer"}


# ──────────────────────────────────────────────────────────────
# 🧾 Validation message selection
# ──────────────────────────────────────────────────────────────
def test_value_errors_use_validator_message():
    errors = [{"type": "value_error", "loc": ("body", "rating"), "ctx": {"error": ValueError("Rating must be between 1 and 5")}}]
    assert validation_message(errors, fallback="fallback") == "Rating must be between 1 and 5"


def test_shape_errors_use_fallback():
    errors = [
        {"type": "missing", "loc": ("body", "movieId")},
        {"type": "value_error", "loc": ("body", "rating"), "ctx": {"error": ValueError("range")}},
    ]
    assert validation_message(errors, fallback="fallback") == "fallback"


def test_empty_errors_use_fallback():
    assert validation_message([], fallback="fallback") == "fallback"
    assert validation_message([]) == "Invalid input"


def test_field_message_for_single_field_type_error():
    errors = [{"type": "string_type", "loc": ("body", "body")}]
    assert validation_message(errors, fallback="fallback", field_messages={"body": "Body must be a string"}) == (
        "Body must be a string"
    )


def test_field_message_ignored_when_other_fields_fail():
    errors = [
        {"type": "string_type", "loc": ("body", "body")},
        {"type": "int_type", "loc": ("body", "rating", "int")},
    ]
    assert validation_message(errors, fallback="fallback", field_messages={"body": "Body must be a string"}) == (
        "fallback"
    )


def test_whole_payload_error_uses_fallback():
    errors = [{"type": "model_attributes_type", "loc": ("body",)}]
    assert validation_message(errors, fallback="fallback", field_messages={"body": "Body must be a string"}) == (
        "fallback"
    )
