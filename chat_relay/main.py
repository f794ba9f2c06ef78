"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Mapping

import httpx
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from chat_relay import __version__
from chat_relay.config import Settings, get_settings
from chat_relay.exceptions import ServiceError
from chat_relay.logging import configure_logging
from chat_relay.models import ErrorResponse
from chat_relay.routes import messages, relay
from chat_relay.routes.common import CORS_HEADERS
from chat_relay.services.message_store import create_list_store

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create application resources during startup and clean up on shutdown."""

    settings = get_settings()
    async with httpx.AsyncClient(timeout=settings.http_timeout) as client:
        app.state.http_client = client
        app.state.list_store = create_list_store(client, settings)
        yield
        del app.state.list_store
        del app.state.http_client


def _error_response(
    status_code: int, error: ErrorResponse, headers: Mapping[str, str] | None = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=error.model_dump(exclude_none=True),
        headers={**(headers or {}), **CORS_HEADERS},
    )


async def service_error_handler(_: Request, exc: ServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Service failure", extra={"code": exc.code, "detail": exc.message})
        return _error_response(
            exc.status_code, ErrorResponse(error="Internal error", details=exc.message)
        )
    return _error_response(exc.status_code, ErrorResponse(error=exc.message))


async def http_error_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = "Method not allowed" if exc.status_code == 405 else str(exc.detail)
    return _error_response(exc.status_code, ErrorResponse(error=message), exc.headers)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error", extra={"path": request.url.path}, exc_info=exc)
    return _error_response(500, ErrorResponse(error="Internal error", details=str(exc)))


def create_app() -> FastAPI:
    """Application factory."""

    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Chat Relay Service",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/version")
    async def version(settings: Settings = Depends(get_settings)) -> dict[str, str]:
        return {"version": __version__, "environment": settings.environment}

    app.include_router(messages.router)
    app.include_router(relay.router)

    return app


app = create_app()
