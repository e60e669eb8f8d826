"""
Health check endpoints.

Provides an endpoint for monitoring application health.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from shared.config import Settings, get_settings

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_settings)) -> HealthResponse:
    """
    Basic health check endpoint.

    Returns 200 if the API is running.
    """
    return HealthResponse(status="healthy", version=settings.app_version)
