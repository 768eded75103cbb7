# moviereview/middleware/cors.py
from __future__ import annotations

"""
# MovieReview · CORS

Cross-origin policy for browser clients:

- Origins: exact allow-list from `CORS_ALLOW_ORIGINS` (CSV); when empty, the
  request's `Origin` is reflected back, i.e. every origin is permitted.
- Credentials allowed.
- Methods: GET, POST, PUT, DELETE, OPTIONS.
- Headers: Content-Type, Authorization.

## Quick start
    from moviereview.middleware.cors import configure_cors

    app = FastAPI()
    configure_cors(app, settings)
"""

from typing import Iterable, Optional

from starlette.middleware.cors import CORSMiddleware

from moviereview.core.config import Settings

ALLOWED_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
ALLOWED_HEADERS = ["Content-Type", "Authorization"]
REFLECT_ANY_ORIGIN = r".*"


def configure_cors(
    app,
    settings: Settings,
    *,
    allow_methods: Optional[Iterable[str]] = None,
    allow_headers: Optional[Iterable[str]] = None,
) -> None:
    """Install the CORS middleware based on settings."""
    origins = settings.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Regex match echoes the caller's Origin instead of "*", which
        # browsers require for credentialed requests.
        allow_origin_regex=None if origins else REFLECT_ANY_ORIGIN,
        allow_credentials=True,
        allow_methods=list(allow_methods or ALLOWED_METHODS),
        allow_headers=list(allow_headers or ALLOWED_HEADERS),
        expose_headers=["X-Request-ID"],
    )


__all__ = ["configure_cors", "ALLOWED_METHODS", "ALLOWED_HEADERS"]
