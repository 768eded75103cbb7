"""
MovieReview • API router aggregator
===================================

    from moviereview.api import build_api_router
    app.include_router(build_api_router(), prefix="/api")
"""

from fastapi import APIRouter

from moviereview.api.routers import health, reviews


def build_api_router() -> APIRouter:
    """Compose health and review routes into a single `APIRouter`."""
    router = APIRouter()
    router.include_router(health.router)
    router.include_router(reviews.router)
    return router


__all__ = ["build_api_router"]
