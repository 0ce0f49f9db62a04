"""Health check endpoint."""

from datetime import UTC, datetime

from fastapi import APIRouter, Request
from pydantic import BaseModel

from quackchat.core.config import Settings

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    timestamp: datetime
    service: str
    version: str


@router.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check(request: Request) -> HealthResponse:
    """
    Health check endpoint.

    Returns the current status of the service.
    """
    settings: Settings = request.app.state.settings
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(UTC),
        service=settings.app_name,
        version=settings.version,
    )
