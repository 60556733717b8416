"""Domain error taxonomy and its HTTP rendering.

Services raise these; handlers registered in main.py turn them into
``{"message": ...}`` responses. Unhandled exceptions never leak their text.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException

from app.core.structured_logging import build_log_context

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


class AppError(Exception):
    """Base class for errors with a user-safe message and HTTP status."""

    status_code = 500
    default_message = INTERNAL_ERROR_MESSAGE

    def __init__(self, message: str | None = None, *, field: str | None = None):
        self.message = message or self.default_message
        self.field = field
        super().__init__(self.message)


class Unauthorized(AppError):
    status_code = 401
    default_message = "Not authenticated"


class Forbidden(AppError):
    status_code = 403
    default_message = "Forbidden"


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class DependencyUnavailable(AppError):
    """An external service is not configured."""

    status_code = 503
    default_message = "Service not configured"


class ExternalServiceError(AppError):
    """A vendor call failed. Vendor detail is logged, not returned."""

    status_code = 502
    default_message = "External service request failed"


def _error_body(message: str, field: str | None = None) -> dict:
    body = {"message": message}
    if field:
        body["field"] = field
    return body


def _first_validation_error(exc: RequestValidationError) -> tuple[str, str | None]:
    errors = exc.errors()
    if not errors:
        return "Invalid request", None
    first = errors[0]
    # loc looks like ("body", "status") or ("query", "pillar"); drop the location kind
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(loc) or None
    msg = first.get("msg", "Invalid value")
    if field:
        return f"{field}: {msg}", field
    return msg, None


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.warning(
            "app_error status=%s message=%s",
            exc.status_code,
            exc.message,
            extra=build_log_context(
                request_id=getattr(request.state, "request_id", None),
                route=request.url.path,
                method=request.method,
            ),
        )
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message, exc.field))


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(message),
        headers=getattr(exc, "headers", None),
    )


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    response = JSONResponse(
        status_code=429, content=_error_body(f"Rate limit exceeded: {exc.detail}")
    )
    limiter = getattr(request.app.state, "limiter", None)
    view_rate_limit = getattr(request.state, "view_rate_limit", None)
    if limiter is not None and view_rate_limit is not None:
        response = limiter._inject_headers(response, view_rate_limit)
    return response


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    message, field = _first_validation_error(exc)
    return JSONResponse(status_code=400, content=_error_body(message, field))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "unhandled_error",
        extra=build_log_context(
            request_id=getattr(request.state, "request_id", None),
            route=request.url.path,
            method=request.method,
        ),
    )
    return JSONResponse(status_code=500, content=_error_body(INTERNAL_ERROR_MESSAGE))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
