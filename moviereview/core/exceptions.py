# moviereview/core/exceptions.py
from __future__ import annotations

"""
MovieReview · Application Exceptions
====================================
A small, consistent layer on top of FastAPI/Starlette's `HTTPException` that
lets us render every failure with the same
`{"error": "<message>"}` JSON shape (see `moviereview.core.exception_handlers`).

Taxonomy
--------
- `BadRequestException`    → 400 (malformed or out-of-range input)
- `UnauthorizedException`  → 401 (missing or invalid bearer credential)
- `ForbiddenException`     → 403 (authenticated, but not the owner)
- `NotFoundException`      → 404 (no such document / no such route)
- `ServerErrorException`   → 500 (a collaborator failed; details go to logs only)

Usage
-----
    raise NotFoundException("Movie review not found")
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status

__all__ = [
    "AppException",
    "BadRequestException",
    "UnauthorizedException",
    "ForbiddenException",
    "NotFoundException",
    "ServerErrorException",
]


# ──────────────────────────────────────────────────────────────
# 📦 Core: AppException
# ──────────────────────────────────────────────────────────────
class AppException(HTTPException):
    """Base application-level exception.

    Attributes
    -----------
    status_code : int
        HTTP status code (400/401/403/404/500).
    message : str
        Human-readable error message (serialized as `error`, mirrored in `detail`).
    headers : dict | None
        Optional headers (e.g., `{"WWW-Authenticate": "Bearer"}`).
    """

    default_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Server error"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        status_code: Optional[int] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        message = message or self.default_message
        super().__init__(status_code=status_code or self.default_status, detail=message, headers=headers)
        self.message: str = message

    # ── [Helper] Canonical body used by handlers ───────────────────────────
    def to_body(self) -> Dict[str, Any]:
        """Return the JSON error body."""
        return {"error": self.message}


# ──────────────────────────────────────────────────────────────
# 🧾 Request-level failures
# ──────────────────────────────────────────────────────────────
class BadRequestException(AppException):
    """Raised for malformed or out-of-range input."""

    default_status = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class NotFoundException(AppException):
    """Raised when a document (or route) does not exist."""

    default_status = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


# ──────────────────────────────────────────────────────────────
# 🔑 Auth / ownership
# ──────────────────────────────────────────────────────────────
class UnauthorizedException(AppException):
    """Raised for missing, malformed, or invalid bearer credentials."""

    default_status = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"

    def __init__(self, message: Optional[str] = None, *, headers: Optional[Dict[str, str]] = None) -> None:
        # Encourage `WWW-Authenticate` header when dealing with bearer tokens
        super().__init__(message, headers=headers or {"WWW-Authenticate": "Bearer"})


class ForbiddenException(AppException):
    """Raised when an authenticated caller does not own the target document."""

    default_status = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


# ──────────────────────────────────────────────────────────────
# 💥 Collaborator failures
# ──────────────────────────────────────────────────────────────
class ServerErrorException(AppException):
    """Raised when the document store or identity provider fails unexpectedly."""

    default_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Server error"
