"""Error Handlers — every failure leaves the API in one JSON envelope.

Invariants:
    - Body shape is always {"error": {code, message, category, severity, ...}}
    - StorefrontError keeps its own status and context (core/errors.py)
    - Request validation is 400 with per-field details, not FastAPI's 422
    - Unknown routes and wrong methods use the same envelope
    - Unhandled exceptions are logged with traceback and answered with a generic 500

Design Decisions:
    - Registered from main.py through one call so the app module stays wiring-only
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.core.errors import StorefrontError, ErrorSeverity

logger = logging.getLogger(__name__)


def _envelope(
    status_code: int,
    code: str,
    message: str,
    category: str,
    severity: ErrorSeverity,
    headers: dict | None = None,
    **extra,
) -> JSONResponse:
    error = {
        "code": code,
        "message": message,
        "category": category,
        "severity": severity.value,
        **extra,
    }
    return JSONResponse(
        status_code=status_code, content={"error": error}, headers=headers,
    )


async def _on_storefront_error(request: Request, exc: StorefrontError):
    log = logger.error if exc.http_status >= 500 else logger.warning
    log(
        f"{exc.code}: {exc.message}",
        extra={"error_code": exc.code, "path": request.url.path},
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def _on_validation_error(request: Request, exc: RequestValidationError):
    details = [
        {
            "field": ".".join(str(part) for part in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
    logger.warning(
        f"Rejected request body/params: {len(details)} problem(s)",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return _envelope(
        status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR", "Invalid request data",
        "validation", ErrorSeverity.ERROR, details=details,
    )


async def _on_http_error(request: Request, exc: StarletteHTTPException):
    message = "Endpoint not found" if exc.status_code == 404 else str(exc.detail)
    return _envelope(
        exc.status_code, f"HTTP_{exc.status_code}", message,
        "http", ErrorSeverity.WARNING, headers=getattr(exc, "headers", None),
    )


async def _on_unhandled(request: Request, exc: Exception):
    logger.error(
        f"Unhandled {type(exc).__name__} on {request.method} {request.url.path}",
        exc_info=exc,
        extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
    )
    return _envelope(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR",
        "An unexpected error occurred", "internal", ErrorSeverity.CRITICAL,
    )


def register_error_handlers(app: FastAPI) -> None:
    """Attach the domain, validation, HTTP, and catch-all handlers."""
    app.add_exception_handler(StorefrontError, _on_storefront_error)
    app.add_exception_handler(RequestValidationError, _on_validation_error)
    app.add_exception_handler(StarletteHTTPException, _on_http_error)
    app.add_exception_handler(Exception, _on_unhandled)
