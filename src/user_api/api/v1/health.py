"""Unauthenticated liveness and version endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from user_api import __version__
from user_api.core.config import Settings, get_settings
from user_api.schemas.common import HealthResponse

health_router = APIRouter(tags=["health"])


@health_router.get("/", response_model=HealthResponse)
async def root() -> HealthResponse:
    """Report that the service is running."""
    return HealthResponse(status="User API running")


@health_router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="healthy")


@health_router.get("/info")
async def info(
    settings: Annotated[Settings, Depends(get_settings)],
) -> dict:
    """Return application version, environment, and registered service name."""
    return {
        "version": __version__,
        "environment": settings.environment,
        "service_name": settings.service_name,
    }
