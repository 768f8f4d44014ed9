"""Health and readiness check routes."""

import logging

from fastapi import APIRouter, Depends

from wikisummary.config import Settings
from wikisummary.dependencies import get_cache, get_settings
from wikisummary.services.cache import SingleFlightTTLCache

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/ready")
async def ready(settings: Settings = Depends(get_settings)) -> dict:
    """Lightweight readiness check — no external calls."""
    return {"status": "ok", "service": settings.service_name, "commit": settings.git_sha}


@router.get("/health")
async def health(
    settings: Settings = Depends(get_settings),
    cache: SingleFlightTTLCache = Depends(get_cache),
) -> dict:
    """Health check with cache statistics."""
    return {
        "status": "degraded" if cache.closed else "ok",
        "service": settings.service_name,
        "commit": settings.git_sha,
        "cache": cache.stats(),
    }
