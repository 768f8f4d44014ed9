"""FastAPI dependencies for the resources owned by the app."""

import httpx
from fastapi import Request
from opentelemetry import trace

from wikisummary.config import Settings
from wikisummary.services.cache import SingleFlightTTLCache


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_cache(request: Request) -> SingleFlightTTLCache[str]:
    return request.app.state.cache


def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client


def get_tracer(request: Request) -> trace.Tracer:
    return request.app.state.tracer
