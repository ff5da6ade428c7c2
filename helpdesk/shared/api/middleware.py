"""
Shared API Middleware
======================

Common middleware and exception handlers for the FastAPI application.

Exception handlers translate the application error taxonomy, request
validation failures and persistence integrity errors into the response
envelope. No stack trace ever reaches the caller.
"""

import time
import uuid
from typing import Callable

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from helpdesk.core import ApplicationException, ValidationException
from helpdesk.shared.api.responses import error_response
from helpdesk.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """
    Adds correlation ID to requests for tracing.

    Correlation IDs link every log line written while serving a request.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        correlation_id = request.headers.get("X-Correlation-ID", str(uuid.uuid4()))
        request.state.correlation_id = correlation_id

        response = await call_next(request)
        response.headers["X-Correlation-ID"] = correlation_id
        return response


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs all requests and responses.

    Provides audit trail and debugging information.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        correlation_id = getattr(request.state, "correlation_id", "unknown")
        start_time = time.perf_counter()

        logger.info(
            "Request started",
            extra={
                "correlation_id": correlation_id,
                "method": request.method,
                "path": request.url.path,
                "client": request.client.host if request.client else None
            }
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed",
                extra={
                    "correlation_id": correlation_id,
                    "method": request.method,
                    "path": request.url.path,
                    "error": str(e),
                    "response_time_ms": int((time.perf_counter() - start_time) * 1000)
                }
            )
            raise

        logger.info(
            "Request completed",
            extra={
                "correlation_id": correlation_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "response_time_ms": int((time.perf_counter() - start_time) * 1000)
            }
        )
        return response


def _field_name(loc: tuple) -> str:
    # Drop the "body"/"query"/"path" prefix FastAPI puts on every location.
    parts = [str(p) for p in loc[1:]] if len(loc) > 1 else [str(p) for p in loc]
    return ".".join(parts)


async def application_exception_handler(request: Request, exc: ApplicationException) -> JSONResponse:
    """Render taxonomy errors into the envelope with their own status code."""
    correlation_id = getattr(request.state, "correlation_id", "unknown")

    if exc.status_code >= 500:
        logger.error(
            "Application error",
            extra={
                "correlation_id": correlation_id,
                "path": request.url.path,
                "error_type": type(exc).__name__,
                "error_message": exc.message
            }
        )
    else:
        logger.info(
            "Request rejected",
            extra={
                "correlation_id": correlation_id,
                "path": request.url.path,
                "error_type": type(exc).__name__,
                "status_code": exc.status_code
            }
        )

    errors = None
    if isinstance(exc, ValidationException) and exc.errors:
        errors = exc.errors

    # 503 is an operational condition the client may act on; other 5xx stay opaque.
    message = exc.message
    if exc.status_code >= 500 and exc.status_code != 503:
        message = "Internal server error"
    return error_response(exc.status_code, message, errors=errors)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Collect every request validation failure into the errors list."""
    errors = [
        {"field": _field_name(tuple(err.get("loc", ()))), "message": err.get("msg", "Invalid value")}
        for err in exc.errors()
    ]
    return error_response(400, "Validation errors", errors=errors)


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """Duplicate unique values surface as a conflict, not a storage error."""
    logger.warning(
        "Integrity error",
        extra={
            "correlation_id": getattr(request.state, "correlation_id", "unknown"),
            "path": request.url.path,
            "error_message": str(exc.orig)
        }
    )
    return error_response(409, "Resource already exists")


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Framework-level HTTP errors (unknown routes, wrong methods)."""
    if exc.status_code == 404:
        message = f"Route {request.url.path} not found"
    else:
        message = str(exc.detail)
    return error_response(exc.status_code, message, headers=getattr(exc, "headers", None))


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler for unhandled exceptions.

    Returns a generic envelope; the detail only goes to the log.
    """
    logger.error(
        "Unhandled exception",
        extra={
            "correlation_id": getattr(request.state, "correlation_id", "unknown"),
            "path": request.url.path,
            "method": request.method,
            "error_type": type(exc).__name__,
            "error_message": str(exc)
        }
    )
    return error_response(500, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    """Install every handler on the application."""
    app.add_exception_handler(ApplicationException, application_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
