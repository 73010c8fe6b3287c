"""Middleware and error translation for the FastAPI application.

Every failure leaves the API as ``{"error": {"status": ..., "message": ...}}``.
"""

import logging
import time
from typing import Any

from fastapi import FastAPI, Request  # type: ignore[import-untyped]
from fastapi.exceptions import RequestValidationError  # type: ignore[import-untyped]
from fastapi.middleware.cors import CORSMiddleware  # type: ignore[import-untyped]
from fastapi.responses import JSONResponse  # type: ignore[import-untyped]
from starlette.exceptions import HTTPException as StarletteHTTPException

from time_manager.core.config import Settings
from time_manager.core.errors import TimeManagerError

logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str, headers: Any = None) -> JSONResponse:
    """Build the uniform error payload."""
    return JSONResponse(
        status_code=status_code,
        content={"error": {"status": status_code, "message": message}},
        headers=headers,
    )


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


async def handle_app_error(request: Request, exc: TimeManagerError) -> JSONResponse:
    """Translate core errors into their HTTP status."""
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return error_response(exc.status_code, exc.message, headers)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed input is a 400, not FastAPI's default 422."""
    return error_response(400, _describe_validation_error(exc))


async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Re-shape framework errors such as unknown routes."""
    if exc.status_code == 404 and exc.detail == "Not Found":
        message = f"Not Found: {request.url.path}"
    else:
        message = str(exc.detail)
    return error_response(exc.status_code, message, getattr(exc, "headers", None))


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    """Log and hide anything that was not anticipated."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(500, "Internal Server Error")


def setup_error_handlers(app: FastAPI) -> None:
    """Install the single boundary translator for all error kinds."""
    app.add_exception_handler(TimeManagerError, handle_app_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(Exception, handle_unexpected_error)


def setup_cors(app: FastAPI, settings: Settings) -> None:
    """Configure CORS middleware.

    Note:
        By default, only localhost origins are allowed.
    """
    if not settings.cors_enabled:
        return

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def setup_request_logging(app: FastAPI, settings: Settings) -> None:
    """Log method, path, status and latency of every request."""
    if not settings.access_log:
        return

    @app.middleware("http")
    async def log_requests(request: Request, call_next):  # type: ignore[no-untyped-def]
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.debug(
            "%s %s -> %s (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Set up all middleware for the application.

    Note:
        This function configures:
        - Error handlers
        - Request logging (if enabled)
        - CORS middleware (if enabled)
    """
    setup_error_handlers(app)
    setup_request_logging(app, settings)
    setup_cors(app, settings)
