"""Global exception handlers for the FastAPI application.

Every error leaves the API in one envelope:

    {
        "error": {
            "code": "NOT_FOUND",
            "message": "Task with id ... not found",
            "details": {...},
            "request_id": "...",
            "timestamp": "2025-01-01T00:00:00+00:00"
        }
    }

Usage:
    from homely.api.exception_handlers import register_exception_handlers
    app = FastAPI()
    register_exception_handlers(app)
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from homely.core.exceptions import HomelyError
from homely.core.logging import get_logger

logger = get_logger(__name__)

_STATUS_TO_CODE = {
    400: "BAD_REQUEST",
    401: "AUTHENTICATION_REQUIRED",
    403: "ACCESS_DENIED",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    422: "VALIDATION_ERROR",
    500: "INTERNAL_ERROR",
    502: "BAD_GATEWAY",
    503: "SERVICE_UNAVAILABLE",
}


def get_request_id(request: Request) -> str | None:
    """Extract the request ID from request state, falling back to the header."""
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        return str(request_id)
    return request.headers.get("X-Request-ID")


def build_error_response(
    error_code: str,
    message: str,
    status_code: int,
    request: Request | None = None,
    details: dict[str, Any] | None = None,
    headers: Mapping[str, str] | None = None,
) -> JSONResponse:
    """Build a standardized error response.

    Args:
        error_code: Machine-readable error code
        message: Human-readable error message
        status_code: HTTP status code
        request: Optional request for extracting request ID
        details: Optional additional error details
        headers: Optional headers to include in the response

    Returns:
        JSONResponse with the error envelope
    """
    error_body: dict[str, Any] = {
        "code": error_code,
        "message": message,
    }
    if details:
        error_body["details"] = details
    if request is not None:
        request_id = get_request_id(request)
        if request_id:
            error_body["request_id"] = request_id
    error_body["timestamp"] = datetime.now(UTC).isoformat()

    return JSONResponse(status_code=status_code, content={"error": error_body}, headers=headers)


def _log_context(request: Request, **extra: Any) -> dict[str, Any]:
    context: dict[str, Any] = {"path": str(request.url.path), "method": request.method, **extra}
    request_id = get_request_id(request)
    if request_id:
        context["request_id"] = request_id
    return context


async def homely_exception_handler(request: Request, exc: HomelyError) -> JSONResponse:
    """Render a domain error with its own status and code."""
    log_context = _log_context(request, error_code=exc.error_code, status_code=exc.status_code)
    if exc.details:
        log_context["details"] = exc.details

    if exc.status_code >= 500:
        logger.error(f"Internal error: {exc.message}", extra=log_context, exc_info=True)
    elif exc.status_code >= 400:
        logger.info(f"Client error: {exc.message}", extra=log_context)

    return build_error_response(
        error_code=exc.error_code,
        message=exc.message,
        status_code=exc.status_code,
        request=request,
        details=exc.details or None,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTPException in the error envelope, keeping its detail message."""
    error_code = _STATUS_TO_CODE.get(exc.status_code, "ERROR")
    message = str(exc.detail) if exc.detail else "An error occurred"

    log_context = _log_context(request, status_code=exc.status_code)
    if exc.status_code >= 500:
        logger.error(f"HTTP error: {message}", extra=log_context)
    elif exc.status_code >= 400:
        logger.info(f"Client error: {message}", extra=log_context)

    return build_error_response(
        error_code=error_code,
        message=message,
        status_code=exc.status_code,
        request=request,
        headers=exc.headers,
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Convert request parsing errors to a 422 with field-level details."""
    errors = []
    for error in exc.errors():
        loc = error.get("loc", ())
        field = ".".join(str(part) for part in loc) if loc else "unknown"
        input_value = error.get("input")
        value = None
        if input_value is not None:
            value = str(input_value)[:100]
        errors.append(
            {"field": field, "message": error.get("msg", "Validation error"), "value": value}
        )

    logger.info(
        "Request validation failed", extra=_log_context(request, error_count=len(errors))
    )

    error_body: dict[str, Any] = {
        "code": "VALIDATION_ERROR",
        "message": "Request validation failed",
        "errors": errors,
    }
    request_id = get_request_id(request)
    if request_id:
        error_body["request_id"] = request_id
    error_body["timestamp"] = datetime.now(UTC).isoformat()

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content={"error": error_body}
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all: log with traceback, answer 500 without leaking internals."""
    logger.error(
        f"Unhandled exception: {type(exc).__name__}",
        extra=_log_context(request, exception_type=type(exc).__name__),
        exc_info=True,
    )
    return build_error_response(
        error_code="INTERNAL_ERROR",
        message="An unexpected error occurred",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        request=request,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application."""
    app.add_exception_handler(HomelyError, homely_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, generic_exception_handler)
    logger.info("Exception handlers registered")
