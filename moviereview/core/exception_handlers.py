from __future__ import annotations

"""
JSON exception handlers.

`moviereview.main.create_app` installs these. Every error is rendered as
`{"error": "<message>"}`; request-body validation failures become 400s and
unmatched routes (including a known path with an unsupported method) become a
generic 404.
"""

from typing import Any, Dict, List, Mapping, Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from moviereview.core.exceptions import AppException, BadRequestException

ENDPOINT_NOT_FOUND = "Endpoint not found"
INVALID_INPUT = "Invalid input"
GENERIC_SERVER_ERROR = "Server error - An unexpected error occurred"


def _error(status_code: int, message: str, headers: Dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def _field_of(error: Dict[str, Any]) -> Optional[str]:
    # ("body", "<field>", ...) for a body field; ("body",) for the payload as a whole.
    loc = tuple(error.get("loc") or ())
    return str(loc[1]) if len(loc) >= 2 else None


def validation_message(
    errors: List[Dict[str, Any]],
    *,
    fallback: str = INVALID_INPUT,
    field_messages: Optional[Mapping[str, str]] = None,
) -> str:
    """Pick the client-facing message for a list of pydantic errors.

    Shape errors (missing field, wrong type, malformed JSON) win over value
    errors raised by our own validators, so a request that is both missing a
    field and out of range reports the missing field. Shape errors that all
    concern one field listed in `field_messages` use that field's message.
    """
    value_errors = [e for e in errors if e.get("type") == "value_error"]
    if value_errors and len(value_errors) == len(errors):
        ctx_error = (value_errors[0].get("ctx") or {}).get("error")
        return str(ctx_error) if ctx_error else fallback

    fields = {_field_of(e) for e in errors}
    if field_messages and len(fields) == 1:
        (field,) = fields
        if field in field_messages:
            return field_messages[field]
    return fallback


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:  # type: ignore
    return JSONResponse(status_code=exc.status_code, content=exc.to_body(), headers=exc.headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:  # type: ignore
    if isinstance(exc, AppException):
        return await app_exception_handler(request, exc)
    # Router-level misses: unknown path or unsupported method on a known path.
    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        return _error(status.HTTP_404_NOT_FOUND, ENDPOINT_NOT_FOUND)
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return _error(exc.status_code, detail, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:  # type: ignore
    fallback = getattr(request.state, "validation_fallback", None) or INVALID_INPUT
    field_messages = getattr(request.state, "validation_field_messages", None)
    message = validation_message(list(exc.errors()), fallback=fallback, field_messages=field_messages)
    logger.info("Rejected request body on {} {}: {}", request.method, request.url.path, message)
    return await app_exception_handler(request, BadRequestException(message))


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:  # type: ignore
    # Hide internals; the stack trace goes to the logs only.
    logger.opt(exception=exc).error("Unhandled error on {} {}", request.method, request.url.path)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_SERVER_ERROR)


__all__ = [
    "ENDPOINT_NOT_FOUND",
    "validation_message",
    "app_exception_handler",
    "http_exception_handler",
    "validation_exception_handler",
    "global_exception_handler",
]
