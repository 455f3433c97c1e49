"""
Health check endpoints.

Provides liveness and readiness endpoints; readiness checks recents storage.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from cardsmith.api.dependencies import get_store
from cardsmith.config import settings
from cardsmith.storage.key_value import KeyValueStore

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    storage: str | None = None


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """
    Liveness check.

    Returns healthy if the service is running.
    Does not check dependencies.
    """
    return HealthResponse(status="healthy")


@router.get(
    "/ready",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def ready(
    response: Response,
    store: Annotated[KeyValueStore, Depends(get_store)],
) -> HealthResponse:
    """
    Readiness check.

    Returns ready if the recents store can be read. Returns 503 otherwise;
    the service still exports, but recents will stay empty.
    """
    try:
        store.get(settings.recents_key)
        return HealthResponse(status="ready", storage="available")
    except Exception:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(status="not ready", storage="unavailable")
