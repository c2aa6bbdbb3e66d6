"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain and framework
exceptions to the JSON error envelope
{"success": false, "error": {message, code, statusCode, timestamp, details?}}.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import get_settings
from app.domain.exceptions import RateLimitException, VoiceOfFaithException
from app.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)

_HTTP_CODES: dict[int, str] = {
    400: "BAD_REQUEST",
    401: "AUTHENTICATION_ERROR",
    403: "AUTHORIZATION_ERROR",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    413: "PAYLOAD_TOO_LARGE",
    429: "RATE_LIMIT_EXCEEDED",
}


def error_response(
    status: int,
    message: str,
    code: str,
    details: Any = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build an error envelope response."""
    error: dict[str, Any] = {
        "message": message,
        "code": code,
        "statusCode": status,
        "timestamp": utc_now().isoformat(),
    }
    if details:
        error["details"] = details
    return JSONResponse(
        status_code=status,
        content={"success": False, "error": error},
        headers=headers,
    )


def _domain_exception_handler(
    request: Request, exc: VoiceOfFaithException
) -> JSONResponse:
    """Operational errors go out as-is; the rest are masked outside debug."""
    if exc.is_operational or get_settings().debug:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())
    logger.error("Non-operational error on %s: %s", request.url.path, exc.message)
    return error_response(500, "An unexpected error occurred", "INTERNAL_ERROR")


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 400 with the first failing field in the message."""
    errors = exc.errors()
    message = "Validation failed"
    if errors:
        first = errors[0]
        loc = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path"))
        message = f"{loc}: {first.get('msg')}" if loc else str(first.get("msg"))
    details = [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")}
        for e in errors
    ]
    return error_response(400, message, "VALIDATION_ERROR", {"errors": details})


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Starlette HTTP errors; unknown routes get ROUTE_NOT_FOUND."""
    if exc.status_code == 404 and exc.detail == "Not Found":
        return error_response(
            404, f"Route {request.method} {request.url.path} not found", "ROUTE_NOT_FOUND"
        )
    return error_response(
        exc.status_code,
        str(exc.detail),
        _HTTP_CODES.get(exc.status_code, "HTTP_ERROR"),
        headers=getattr(exc, "headers", None),
    )


def _rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning("Rate limit exceeded for %s on %s", request.client, request.url.path)
    error = RateLimitException(details={"limit": str(exc.detail)})
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    message = str(exc) if get_settings().debug else "An unexpected error occurred"
    return error_response(500, message, "INTERNAL_ERROR")


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Call once after creating the app. Handlers: VoiceOfFaithException (and
    subclasses), RequestValidationError, StarletteHTTPException,
    RateLimitExceeded, generic Exception.
    """
    app.add_exception_handler(VoiceOfFaithException, _domain_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
