"""Health check endpoint."""

from fastapi import APIRouter, Depends

from vetify import __version__
from vetify.config import Settings
from vetify.dependencies import get_app_settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(settings: Settings = Depends(get_app_settings)) -> dict:
    """Return API health status, version and whether rate limiting is on."""
    return {
        "status": "ok",
        "version": __version__,
        "rateLimiting": "enabled" if settings.rate_limit_enabled else "disabled",
    }
