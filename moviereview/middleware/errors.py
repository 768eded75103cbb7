# moviereview/middleware/errors.py
from __future__ import annotations

"""
# MovieReview · Unhandled Error Middleware (ASGI)

Innermost middleware: turns any exception that escapes the app into the
generic JSON 500 (`global_exception_handler`) while still inside the CORS and
request-id layers, so the error response carries `X-Request-ID` and the CORS
headers like any other response.

If the response has already started, the exception is re-raised.
"""

from starlette.requests import Request
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from moviereview.core.exception_handlers import global_exception_handler


class UnhandledErrorMiddleware:
    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http":
            return await self.app(scope, receive, send)

        response_started = False

        async def _send_wrapper(message: Message) -> None:
            nonlocal response_started
            if message.get("type") == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, _send_wrapper)
        except Exception as exc:
            if response_started:
                raise
            response = await global_exception_handler(Request(scope, receive), exc)
            await response(scope, receive, send)


__all__ = ["UnhandledErrorMiddleware"]
