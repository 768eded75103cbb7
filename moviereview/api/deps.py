# moviereview/api/deps.py
from __future__ import annotations

"""
Request dependencies · MovieReview
==================================

- Collaborators (token verifier, review service) are built once by
  `create_app` and stored on `app.state`; these dependencies hand them to
  handlers, so tests can inject fakes without patching globals.
- `get_current_identity` is the authentication step for mutating routes:
  Bearer parsing, verification, and binding the identity to `request.state`.
- `validation_fallback` sets the client-facing message used when a request
  body fails shape validation on a given route.
"""

import logging
from typing import Callable

from fastapi import Depends, Request

from moviereview.core.exceptions import ServerErrorException, UnauthorizedException
from moviereview.services.reviews import ReviewService
from moviereview.services.token_verifier import (
    Identity,
    KeyFetchError,
    TokenVerificationError,
    TokenVerifier,
)

logger = logging.getLogger(__name__)

NO_TOKEN = "Unauthorized - No token provided"
INVALID_TOKEN = "Unauthorized - Invalid token"

__all__ = [
    "get_bearer_token",
    "get_token_verifier",
    "get_review_service",
    "get_current_identity",
    "validation_fallback",
]


# ─────────────────────────────────────────────────────────────
# 🧩 Collaborators from app.state
# ─────────────────────────────────────────────────────────────
def get_token_verifier(request: Request) -> TokenVerifier:
    return request.app.state.token_verifier


def get_review_service(request: Request) -> ReviewService:
    return request.app.state.review_service


# ─────────────────────────────────────────────────────────────
# 📥 Extract Bearer Token from Authorization Header
# ─────────────────────────────────────────────────────────────
def get_bearer_token(request: Request) -> str:
    """Extract a Bearer token from the `Authorization` header (scheme is case-insensitive)."""
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        logger.warning("Missing Authorization header.")
        raise UnauthorizedException(NO_TOKEN)

    parts = auth_header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        logger.warning("Malformed Authorization header.")
        raise UnauthorizedException(NO_TOKEN)

    return parts[1]


# ─────────────────────────────────────────────────────────────
# 🔐 Authentication
# ─────────────────────────────────────────────────────────────
async def get_current_identity(
    request: Request,
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> Identity:
    """Verify the bearer credential and bind the caller identity to the request.

    Raises
    ------
    UnauthorizedException
        401 when the header is missing/malformed or the token is rejected.
    ServerErrorException
        500 when the identity provider cannot be reached.
    """
    token = get_bearer_token(request)
    try:
        identity = await verifier.verify(token)
    except TokenVerificationError as exc:
        logger.warning("Auth error: %s", exc)
        raise UnauthorizedException(INVALID_TOKEN)
    except KeyFetchError:
        logger.exception("Auth error: identity provider unavailable")
        raise ServerErrorException("Server error - Unable to verify credentials")

    request.state.identity = identity
    logger.debug("Authenticated user %s", identity.subject_id)
    return identity


# ─────────────────────────────────────────────────────────────
# 🧾 Validation message per route
# ─────────────────────────────────────────────────────────────
def validation_fallback(message: str, **field_messages: str) -> Callable[[Request], None]:
    """Route dependency: message for body-shape errors on this route.

    `field_messages` overrides the message when every error concerns one
    named body field, e.g. `validation_fallback(MSG, body="Body must be a string")`.

    Route-level dependencies resolve before the body is validated, so the
    value is in place when `validation_exception_handler` runs.
    """

    def _set(request: Request) -> None:
        request.state.validation_fallback = message
        request.state.validation_field_messages = field_messages

    return _set
