# moviereview/main.py
from __future__ import annotations

"""
# MovieReview API · Application Entrypoint (FastAPI)

ASGI application factory and lifecycle for the movie review service.

## Design Goals
- Deterministic, testable **app factory** (`create_app`) with explicit lifespan.
- Collaborators (token verifier, document store) are constructed once here,
  or injected by the caller, and handed to handlers through `app.state`.
- Middleware order: request id (+ access log) → CORS → unhandled-error
  guard (JSON 500 inside the other layers) → app.
- Centralized exception handling: every error is `{"error": "<message>"}`;
  unmatched routes get a generic 404.

## Probes
- `/api/health`: liveness (process up).
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional
import logging

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

# -- Logging bootstrap (Loguru + stdlib intercept) ----------------------------
# Importing sets up handlers/format.
from moviereview.core import logger as _logsetup  # noqa: F401

from moviereview.api import build_api_router
from moviereview.core.config import Settings, settings as default_settings
from moviereview.core.exception_handlers import (
    global_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from moviereview.middleware.cors import configure_cors
from moviereview.middleware.errors import UnhandledErrorMiddleware
from moviereview.middleware.request_id import RequestIDMiddleware
from moviereview.repositories.reviews import ReviewRepository
from moviereview.repositories.store import DocumentStore, build_document_store
from moviereview.services.reviews import ReviewService
from moviereview.services.token_verifier import TokenVerifier, build_token_verifier

logger = logging.getLogger("moviereview")


# ─────────────────────────────────────────────────────────────────────────────
# 🔄 Lifespan: startup & shutdown
# ─────────────────────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Startup:
        - Log a banner with the enabled features, auth mode and store backend.

    Shutdown:
        - Close the token verifier (HTTP client) and the document store client.
    """
    cfg: Settings = app.state.settings
    logger.info("🎬 MovieReview API starting (env=%s, port=%s)", cfg.ENV, cfg.PORT)
    logger.info("✅ Movie review features enabled: Create, Read, Update, Delete")
    logger.info("🔐 Auth mode: %s | 🗄️ Store backend: %s", cfg.AUTH_MODE, cfg.STORE_BACKEND)
    try:
        yield
    finally:
        try:
            await app.state.token_verifier.close()
        except Exception:
            logger.exception("Error closing token verifier")
        try:
            await app.state.document_store.close()
        except Exception:
            logger.exception("Error closing document store")
        logger.info("🛑 MovieReview API shutting down")


# ─────────────────────────────────────────────────────────────────────────────
# 🏗️ App factory
# ─────────────────────────────────────────────────────────────────────────────
def create_app(
    settings: Optional[Settings] = None,
    *,
    store: Optional[DocumentStore] = None,
    verifier: Optional[TokenVerifier] = None,
) -> FastAPI:
    """
    Build and configure the FastAPI app instance.

    Args:
        settings: configuration; defaults to the env-driven singleton.
        store: document store; defaults to the one selected by `STORE_BACKEND`.
        verifier: token verifier; defaults to the one selected by `AUTH_MODE`.

    Returns:
        FastAPI: fully wired application with middleware, exception handlers,
        and routes.
    """
    cfg = settings or default_settings

    app = FastAPI(
        title=cfg.PROJECT_NAME,
        version=cfg.VERSION,
        docs_url="/docs" if cfg.ENABLE_DOCS else None,
        redoc_url="/redoc" if cfg.ENABLE_DOCS else None,
        openapi_url="/openapi.json" if cfg.ENABLE_DOCS else None,
        lifespan=lifespan,
    )

    # ── Collaborators (constructed once, shared by reference) ───────────────
    document_store = store if store is not None else build_document_store(cfg)
    token_verifier = verifier if verifier is not None else build_token_verifier(cfg)
    repo = ReviewRepository(document_store, collection=cfg.REVIEWS_COLLECTION)

    app.state.settings = cfg
    app.state.document_store = document_store
    app.state.token_verifier = token_verifier
    app.state.review_service = ReviewService(repo, list_limit=cfg.LIST_ALL_LIMIT)

    # ── Middlewares (last added runs first) ─────────────────────────────────
    app.add_middleware(UnhandledErrorMiddleware)
    configure_cors(app, cfg)
    app.add_middleware(RequestIDMiddleware)

    # ── Exception handlers ──────────────────────────────────────────────────
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(HTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, global_exception_handler)  # type: ignore[arg-type]

    # ── Routes ──────────────────────────────────────────────────────────────
    app.include_router(build_api_router(), prefix=cfg.API_PREFIX)

    return app


# ─────────────────────────────────────────────────────────────────────────────
# 🚀 Module-level ASGI app for Uvicorn
# ─────────────────────────────────────────────────────────────────────────────
def get_app() -> FastAPI:
    """Uvicorn factory target: `uvicorn moviereview.main:get_app --factory`."""
    return create_app()


__all__ = ["create_app", "get_app"]


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "moviereview.main:get_app",
        factory=True,
        host=default_settings.HOST,
        port=default_settings.PORT,
        log_level="info",
    )
