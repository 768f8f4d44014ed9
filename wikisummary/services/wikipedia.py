"""Wikipedia REST client for page summaries.

Free API, no key required. Only the ``extract`` field of the summary
endpoint is used; it is cached per page name for a short TTL.
"""

import json
import logging
from dataclasses import dataclass
from urllib.parse import quote

import httpx

from wikisummary.config import Settings
from wikisummary.errors import PageNotFoundError, UpstreamError
from wikisummary.services.cache import CacheOutcome, SingleFlightTTLCache

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SummaryResult:
    name: str
    extract: str
    outcome: CacheOutcome


def cache_key(name: str) -> str:
    return f"wiki.{name}"


def build_http_client(
    settings: Settings, transport: httpx.AsyncBaseTransport | None = None
) -> httpx.AsyncClient:
    """Shared client for upstream calls, closed on app shutdown."""
    return httpx.AsyncClient(
        base_url=settings.wiki_api_base_url,
        headers={"User-Agent": settings.wiki_user_agent},
        timeout=settings.upstream_timeout_seconds,
        transport=transport,
    )


def parse_extract(data: object) -> str:
    """Pull the ``extract`` field out of a decoded summary response."""
    if not isinstance(data, dict):
        return ""
    extract = data.get("extract")
    return extract if isinstance(extract, str) else ""


async def _fetch_extract(client: httpx.AsyncClient, name: str) -> str:
    """Fetch one page summary. Raises PageNotFoundError or UpstreamError."""
    logger.info("Fetching Wikipedia summary for %s", name)
    try:
        resp = await client.get(
            f"/page/summary/{quote(name, safe='')}",
            params={"redirect": "false"},
        )
        resp.raise_for_status()
    except httpx.HTTPStatusError as e:
        if e.response.status_code == 404:
            raise PageNotFoundError(name) from e
        logger.warning("Wikipedia fetch failed for %s: %s", name, e)
        raise UpstreamError(f"Wikipedia returned HTTP {e.response.status_code}") from e
    except httpx.HTTPError as e:
        logger.warning("Wikipedia fetch failed for %s: %s", name, e)
        raise UpstreamError(f"Wikipedia request failed: {e}") from e

    try:
        data = resp.json()
    except json.JSONDecodeError as e:
        raise UpstreamError(f"Wikipedia returned invalid JSON: {e}") from e
    return parse_extract(data)


async def fetch_summary(
    client: httpx.AsyncClient,
    cache: SingleFlightTTLCache[str],
    name: str,
    ttl_seconds: float,
) -> SummaryResult:
    """Get the summary extract for ``name``, served from cache when fresh."""
    result = await cache.lookup(
        cache_key(name), ttl_seconds, lambda: _fetch_extract(client, name)
    )
    return SummaryResult(name=name, extract=result.value, outcome=result.outcome)
