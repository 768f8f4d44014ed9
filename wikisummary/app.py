"""FastAPI application entry point for the wikisummary API."""

import logging
import sys

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from wikisummary.config import Settings, settings as default_settings
from wikisummary.errors import register_error_handlers
from wikisummary.services.cache import SingleFlightTTLCache
from wikisummary.services.wikipedia import build_http_client
from wikisummary.telemetry import get_tracer

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """Structured logging: JSON for production, human-readable for local."""
    if settings.is_production:
        logging.basicConfig(
            level=logging.INFO,
            format='{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}',
            stream=sys.stdout,
        )
    else:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings)

    app = FastAPI(title="Wikisummary API", version="1.0.0")
    app.state.settings = settings
    app.state.tracer = get_tracer(settings)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Security headers
    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response: Response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        if settings.is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response

    # Centralized error handlers
    register_error_handlers(app)

    from wikisummary.routes.health import router as health_router
    from wikisummary.routes.summary import router as summary_router

    # Health first: /{name} would otherwise swallow /ready and /health
    app.include_router(health_router)
    app.include_router(summary_router)

    @app.on_event("startup")
    async def _startup() -> None:
        problems = settings.validate()
        if problems:
            logger.warning("Configuration problems: %s", ", ".join(problems))

        app.state.cache = SingleFlightTTLCache()
        if settings.sweeper_enabled:
            app.state.cache.start_sweeper(settings.cache_sweep_interval_seconds)
        app.state.http_client = build_http_client(settings)

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        await app.state.cache.aclose()
        await app.state.http_client.aclose()

    return app


app = create_app()


def main() -> None:
    uvicorn.run("wikisummary.app:app", host="0.0.0.0", port=8000)
