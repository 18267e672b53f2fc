"""
Shared API Middleware
======================

Request tracing, access logging and the mapping from application
exceptions to HTTP responses.
"""

import time
import uuid
from datetime import datetime, timezone
from typing import Callable

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from hostel_triage.core import (
    ApplicationException,
    ConfigurationException,
    InvalidCorpusException,
    ResourceNotFoundException,
    ValidationException,
)
from hostel_triage.shared.infrastructure.logging import correlation_id_var, get_logger

logger = get_logger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"

# Most specific first
EXCEPTION_STATUS_CODES = (
    (ResourceNotFoundException, status.HTTP_404_NOT_FOUND),
    (ValidationException, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (InvalidCorpusException, status.HTTP_503_SERVICE_UNAVAILABLE),
    (ConfigurationException, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def _correlation_id(request: Request) -> str:
    return getattr(request.state, "correlation_id", None) or "unknown"


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """
    Accepts or issues an X-Correlation-ID per request.

    The ID is echoed on the response and attached to every log record
    written while the request is served.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.state.correlation_id = correlation_id
        token = correlation_id_var.set(correlation_id)
        try:
            response = await call_next(request)
        finally:
            correlation_id_var.reset(token)

        response.headers[CORRELATION_HEADER] = correlation_id
        return response


class LoggingMiddleware(BaseHTTPMiddleware):
    """One access log line per request, with status and duration."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start = time.perf_counter()
        context = {"method": request.method, "path": request.url.path}

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed",
                extra={**context, "error": str(e), "response_time_ms": _elapsed_ms(start)}
            )
            raise

        log = logger.warning if response.status_code >= 500 else logger.info
        log(
            "Request completed",
            extra={**context, "status_code": response.status_code, "response_time_ms": _elapsed_ms(start)}
        )
        return response


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def _error_body(request: Request, detail: str, **extra) -> dict:
    return {
        "detail": detail,
        "correlation_id": _correlation_id(request),
        "timestamp": datetime.now(timezone.utc).isoformat(),
        **extra,
    }


def status_code_for(exc: ApplicationException) -> int:
    for exc_type, status_code in EXCEPTION_STATUS_CODES:
        if isinstance(exc, exc_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST


async def application_exception_handler(
    request: Request,
    exc: ApplicationException
) -> JSONResponse:
    """Map domain/application errors to client-facing status codes."""
    status_code = status_code_for(exc)

    logger.warning(
        "Application error",
        extra={
            "path": request.url.path,
            "error_type": type(exc).__name__,
            "error_message": exc.message,
            "status_code": status_code
        }
    )
    return JSONResponse(
        status_code=status_code,
        content=_error_body(request, exc.message, details=exc.details)
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler: 500 with the error text only in development."""
    logger.error(
        "Unhandled exception",
        extra={
            "path": request.url.path,
            "method": request.method,
            "error_type": type(exc).__name__,
            "error_message": str(exc)
        },
        exc_info=exc
    )

    settings = getattr(request.app.state, "settings", None)
    debug_info = str(exc) if getattr(settings, "environment", None) == "development" else None

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(request, "Internal server error", debug_info=debug_info)
    )
