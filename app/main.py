"""
FastAPI application entrypoint for the calendar contacts proxy.
"""

from __future__ import annotations

import logging
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.routes import callback_router, router as api_router
from app.core.config import get_settings
from app.core.logging import configure_logging

logger = logging.getLogger(__name__)


async def _api_not_found_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == HTTPStatus.NOT_FOUND and request.url.path.startswith("/api/"):
        return JSONResponse(
            status_code=HTTPStatus.NOT_FOUND,
            content={"error": "API endpoint not found"},
        )
    return await http_exception_handler(request, exc)


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled server error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
        content={"error": "Internal Server Error"},
    )


def create_app() -> FastAPI:
    """Factory for the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Calendar Contacts Proxy",
        version="0.1.0",
        description="Google OAuth session handling and read-only calendar event proxy.",
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info("%s %s", request.method, request.url.path)
        return await call_next(request)

    app.add_exception_handler(StarletteHTTPException, _api_not_found_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
    app.include_router(api_router, prefix="/api")
    app.include_router(callback_router)
    return app


app = create_app()

__all__ = ["app", "create_app"]
