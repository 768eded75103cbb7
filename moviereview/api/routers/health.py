from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter

from moviereview.schemas.review import HealthStatus

router = APIRouter(tags=["meta"])


@router.get("/health", response_model=HealthStatus)
async def health() -> HealthStatus:
    """Liveness probe. No collaborator checks."""
    return HealthStatus(message="MovieReview Server is running", timestamp=datetime.now(timezone.utc))
