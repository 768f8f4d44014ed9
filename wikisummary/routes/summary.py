"""Page summary routes.

GET    /{name}         → summary extract as plain text
DELETE /cache/{name}   → drop the cached summary for a page
"""

import logging

import httpx
from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from opentelemetry import trace

from wikisummary.config import Settings
from wikisummary.dependencies import get_cache, get_http_client, get_settings, get_tracer
from wikisummary.services.cache import SingleFlightTTLCache
from wikisummary.services.wikipedia import cache_key, fetch_summary

logger = logging.getLogger(__name__)

router = APIRouter()


@router.delete("/cache/{name}")
async def invalidate_summary(
    name: str,
    cache: SingleFlightTTLCache = Depends(get_cache),
) -> dict:
    """Force the next lookup of ``name`` to go upstream."""
    invalidated = cache.invalidate(cache_key(name))
    logger.info("Invalidate %s: %s", name, "removed" if invalidated else "not cached")
    return {"name": name, "invalidated": invalidated}


@router.get("/{name}", response_class=PlainTextResponse)
async def lookup(
    name: str,
    settings: Settings = Depends(get_settings),
    cache: SingleFlightTTLCache = Depends(get_cache),
    client: httpx.AsyncClient = Depends(get_http_client),
    tracer: trace.Tracer = Depends(get_tracer),
) -> PlainTextResponse:
    """Summary extract for a Wikipedia page, cached for a few seconds."""
    result = await fetch_summary(client, cache, name, settings.cache_ttl_seconds)

    with tracer.start_as_current_span("app.parser") as span:
        span.set_attribute("app.parser.route", name)
        span.set_attribute("app.parser.resultlength", len(result.extract))
        span.set_attribute("app.cache.outcome", result.outcome.value)

    return PlainTextResponse(result.extract, headers={"X-Cache": result.outcome.value})
