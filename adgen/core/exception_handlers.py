"""Global exception handlers for consistent error responses.

This module provides FastAPI exception handlers that intercept all errors
(domain, request validation and unexpected) and return consistent JSON
responses with proper HTTP status codes and traceability.

Design:
- AppError subclasses → appropriate HTTP status (400, 500, upstream status)
- RequestValidationError → 400 with a single human-readable message
- Unexpected Exception → generic 500 (safety net)
- All responses include request_id for distributed tracing
"""

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from adgen.core.errors import AppError, ConfigurationAppError, LLMAppError
from adgen.core.logging import get_request_id

logger = logging.getLogger(__name__)


def _status_for(exc: AppError) -> int:
    if isinstance(exc, LLMAppError):
        return exc.status_code
    if isinstance(exc, ConfigurationAppError):
        return 500
    return 400


def _error_body(code: str, message: str, details: Any = None) -> dict[str, Any]:
    error_content: dict[str, Any] = {
        "code": code,
        "message": message,
        "request_id": get_request_id(),
    }
    if details:
        error_content["details"] = details
    return {"error": error_content}


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle domain application errors with consistent JSON format.

    Routes domain errors to HTTP status codes:
    - ValidationAppError → 400 Bad Request
    - ConfigurationAppError → 500 Internal Server Error
    - LLMAppError → upstream status, or 502 Bad Gateway

    Configuration hints are logged but not returned to the client.
    """
    status_code = _status_for(exc)

    log = logger.error if status_code >= 500 else logger.warning
    log(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_message": exc.message,
            "status_code": status_code,
            "has_details": bool(exc.details),
            "request_id": get_request_id(),
        },
    )

    details = None if isinstance(exc, ConfigurationAppError) else exc.details
    return JSONResponse(
        status_code=status_code,
        content=_error_body(exc.code, exc.message, details),
    )


def _describe_validation_error(errors: list[dict[str, Any]]) -> tuple[str, str, str | None]:
    """Reduce pydantic errors to (code, message, field) for the first problem."""

    if not errors:
        return "validation_error", "Invalid request body", None

    first = errors[0]
    if first.get("type") == "json_invalid":
        return "invalid_json", "Invalid JSON body", None

    loc = [part for part in first.get("loc", ()) if part != "body"]
    field = str(loc[0]) if loc and isinstance(loc[0], str) else None
    if field is None:
        return "validation_error", "Invalid request body", None

    if first.get("type") == "string_too_long":
        return "validation_error", f"{field} is too long", field
    return "validation_error", f"{field} is required", field


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Map request body validation failures to 400 responses.

    Only the first failing field is reported, e.g. ``"city is required"``.
    """
    code, message, field = _describe_validation_error(list(exc.errors()))

    logger.warning(
        "request_validation_failed",
        extra={
            "error_code": code,
            "field": field,
            "error_count": len(exc.errors()),
            "request_id": get_request_id(),
        },
    )

    return JSONResponse(
        status_code=400,
        content=_error_body(code, message, {"field": field} if field else None),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors (safety net).

    Logs detailed information for debugging while returning a generic message.
    """
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
            "request_id": get_request_id(),
        },
    )

    return JSONResponse(
        status_code=500,
        content=_error_body(
            "internal_server_error",
            "An unexpected error occurred. Please try again later.",
        ),
    )


def setup_exception_handlers(app) -> None:
    """Register all exception handlers with FastAPI app.

    Args:
        app: FastAPI application instance.
    """
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(RequestValidationError)(validation_exception_handler)
    app.exception_handler(Exception)(general_exception_handler)
