"""
Health check endpoints.

Provides endpoints for monitoring application health and readiness.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from api.dependencies import get_activity_service, get_app_settings
from modules.spotify.interfaces import IActivityService
from shared.config import Settings

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    status: str
    spotify: str


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_app_settings)) -> HealthResponse:
    """
    Basic health check endpoint.

    Returns 200 if the API is running.
    """
    return HealthResponse(status="healthy", version=settings.app_version)


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(
    service: IActivityService = Depends(get_activity_service),
) -> ReadinessResponse:
    """
    Readiness check endpoint.

    Reports whether Spotify credentials are configured. Missing
    credentials are not a failure; the activity endpoint then answers
    with the not-configured payload.
    """
    return ReadinessResponse(
        status="ready",
        spotify="configured" if service.is_configured else "not_configured",
    )
