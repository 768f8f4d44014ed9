"""Custom exceptions and centralized FastAPI error handlers."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class WikiSummaryError(Exception):
    """Base exception with HTTP status code."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


class InvalidKeyError(WikiSummaryError, ValueError):
    def __init__(self, key: object):
        super().__init__(f"Invalid cache key: {key!r}", status_code=400)


class CacheClosedError(WikiSummaryError):
    def __init__(self):
        super().__init__("Cache is closed", status_code=503)


class PageNotFoundError(WikiSummaryError):
    def __init__(self, name: str):
        super().__init__(f"No Wikipedia page named {name!r}", status_code=404)


class UpstreamError(WikiSummaryError):
    def __init__(self, message: str):
        super().__init__(message, status_code=502)


def register_error_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers on the FastAPI app."""

    @app.exception_handler(WikiSummaryError)
    async def handle_wikisummary_error(_request: Request, exc: WikiSummaryError):
        return JSONResponse({"error": str(exc)}, status_code=exc.status_code)

    @app.exception_handler(ValueError)
    async def handle_value_error(_request: Request, exc: ValueError):
        return JSONResponse({"error": str(exc)}, status_code=400)

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        return JSONResponse(
            {"error": "Internal server error"},
            status_code=500,
        )
