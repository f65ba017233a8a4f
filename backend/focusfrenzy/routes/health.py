"""
Focus Frenzy Capture Service — Health Check Route
===================================================

What:  Health check endpoint for monitoring and quick manual checks.
Why:   Confirms the process is up and shows how many captures are stored.
How:   Counts capture files in the captures directory and returns a
       fixed map of the service's endpoints.

There is no dependency to check: if the process can answer, it is "OK".
A missing captures directory simply reports a count of zero.
"""

import logging

from fastapi import APIRouter, Depends, Request

from focusfrenzy.schemas.capture import HealthResponse
from focusfrenzy.routes.deps import get_capture_store
from focusfrenzy.services.capture_store import CaptureStore
from focusfrenzy.services.formatting import utc_timestamp

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

ENDPOINTS = {
    "game": "/",
    "view_captures": "/view-captures",
    "json_api": "/captures-json",
    "health": "/health",
}


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(
    request: Request,
    store: CaptureStore = Depends(get_capture_store),
) -> HealthResponse:
    return HealthResponse(
        status="OK",
        service=request.app.state.settings.service_name,
        timestamp=utc_timestamp(),
        captures_count=store.count(),
        endpoints=dict(ENDPOINTS),
    )
