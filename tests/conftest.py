"""Shared test fixtures — fake clock, cache, and a mocked Wikipedia upstream."""

import os
from dataclasses import dataclass, field

import httpx
import pytest

# Set env vars before any app imports
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("WIKI_API_BASE_URL", "https://wiki.test/api/rest_v1")
os.environ.setdefault("CACHE_SWEEP_INTERVAL_SECONDS", "0")

from wikisummary.services.cache import SingleFlightTTLCache  # noqa: E402


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@dataclass
class FakeWiki:
    """Stand-in for the Wikipedia summary endpoint.

    ``pages`` maps a page name to its extract; anything else is a 404.
    Set ``status`` to force an error response for every request.
    """

    pages: dict[str, str] = field(default_factory=dict)
    status: int | None = None
    requests: list[httpx.Request] = field(default_factory=list)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status is not None:
            return httpx.Response(self.status, json={"title": "error"})
        name = request.url.path.rsplit("/", 1)[-1]
        if name not in self.pages:
            return httpx.Response(404, json={"title": "Not found."})
        return httpx.Response(200, json={"title": name, "extract": self.pages[name]})

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return SingleFlightTTLCache(clock=clock)


@pytest.fixture
def fake_wiki():
    return FakeWiki(pages={"Python": "Python is a programming language."})
