"""Health check endpoint."""

import time
from datetime import datetime, timezone

from fastapi import APIRouter

from camptogether_api.app.core.config import settings
from camptogether_api.app.schemas.common import HealthResponse

router = APIRouter()

_STARTED_AT = time.monotonic()


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        uptime=round(time.monotonic() - _STARTED_AT, 3),
        version=settings.api_version,
    )
