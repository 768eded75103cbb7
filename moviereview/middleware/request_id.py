# moviereview/middleware/request_id.py
from __future__ import annotations

"""
# MovieReview · Request ID Middleware (ASGI)

- Reuses a client-supplied `X-Request-ID` / `X-Correlation-ID` when it is a valid UUIDv4.
- Generates a UUIDv4 when absent/invalid.
- Injects into `request.state.request_id` and the response header.
- Adds `request_id` to the **loguru** context for the entire request lifetime.
- Logs one access line per request on entry (`<METHOD> <path>`).
- Pure ASGI middleware (no BaseHTTPMiddleware pitfalls).

## Usage
    from moviereview.middleware.request_id import RequestIDMiddleware
    app.add_middleware(RequestIDMiddleware)
"""

import re
import uuid

from loguru import logger
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

HEADER_NAME = "X-Request-ID"
MAX_ID_LENGTH = 36

_UUID_V4_RE = re.compile(r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-4[0-9a-fA-F]{3}-[89abAB][0-9a-fA-F]{3}-[0-9a-fA-F]{12}$")


class RequestIDMiddleware:
    """Lightweight ASGI middleware to manage a per-request correlation ID.

    Notes:
        - Accepts client IDs only if they match UUIDv4, which keeps arbitrary
          client text out of the logs.
    """

    def __init__(self, app: ASGIApp, header_name: str = HEADER_NAME) -> None:
        self.app = app
        self.header_name = header_name

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http":
            return await self.app(scope, receive, send)

        headers = Headers(scope=scope)
        req_id = self._choose_request_id(headers)

        state = scope.setdefault("state", {})
        state["request_id"] = req_id

        async def _send_wrapper(message: Message) -> None:
            if message.get("type") == "http.response.start":
                raw = message.setdefault("headers", [])
                name_bytes = self.header_name.encode("latin-1")
                message["headers"] = [(k, v) for (k, v) in raw if k.lower() != name_bytes.lower()]
                message["headers"].append((name_bytes, req_id.encode("latin-1")))
            await send(message)

        with logger.contextualize(request_id=req_id):
            logger.info("{} {}", scope.get("method", "?"), scope.get("path", ""))
            try:
                await self.app(scope, receive, _send_wrapper)
            except Exception:
                logger.exception("[RequestID] Unhandled exception during request processing")
                raise

    def _choose_request_id(self, headers: Headers) -> str:
        """Return a safe request id from headers or generate a UUIDv4."""
        incoming = headers.get(self.header_name) or headers.get("X-Correlation-ID")
        if incoming:
            candidate = incoming.strip()
            if len(candidate) <= MAX_ID_LENGTH and _UUID_V4_RE.fullmatch(candidate):
                return candidate.lower()
        return str(uuid.uuid4())


__all__ = ["RequestIDMiddleware"]
