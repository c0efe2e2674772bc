"""
API error hierarchy and the exception handlers that render it.

Every error leaves the API in the same envelope:
``{"success": false, "message": ..., "error": {"code", "message", "details"}}``
with ``validation_errors`` added for request validation failures.
"""
from typing import Any, Optional

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.responses import error_response

logger = structlog.get_logger(__name__)


class ApiError(Exception):
    """Base exception for API errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_SERVER_ERROR"
    message: str = "Internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Any = None,
        validation_errors: Optional[dict[str, list[str]]] = None,
    ):
        self.message = message or self.message
        self.details = details
        self.validation_errors = validation_errors
        super().__init__(self.message)


class BadRequestError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "BAD_REQUEST"
    message = "Bad request"


class InvalidJsonError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "INVALID_JSON"
    message = "Invalid JSON payload"


class UnauthorizedError(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHORIZED"
    message = "Authentication required"


class AccessDeniedError(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "ACCESS_DENIED"
    message = "Access denied"


class NotFoundError(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"
    message = "Resource not found"


class ConflictError(ApiError):
    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"
    message = "Resource conflict"


class ValidationFailedError(ApiError):
    status_code = 422
    code = "VALIDATION_ERROR"
    message = "Validation failed"


class RateLimitedError(ApiError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    code = "RATE_LIMITED"
    message = "Too many requests"


# Codes for framework-raised HTTP errors (routing, method mismatch, ...)
HTTP_STATUS_CODES = {
    400: ("BAD_REQUEST", "Bad request"),
    401: ("UNAUTHORIZED", "Authentication required"),
    403: ("ACCESS_DENIED", "Access denied"),
    404: ("NOT_FOUND", "Endpoint not found"),
    405: ("METHOD_NOT_ALLOWED", "Method not allowed"),
    409: ("CONFLICT", "Resource conflict"),
    422: ("VALIDATION_ERROR", "Validation failed"),
    429: ("RATE_LIMITED", "Too many requests"),
}


def format_validation_errors(errors: list[dict]) -> dict[str, list[str]]:
    """Group pydantic error entries by field name."""
    grouped: dict[str, list[str]] = {}
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        if len(loc) > 1 and loc[0] in ("body", "query", "path", "header"):
            loc = loc[1:]
        field = ".".join(loc) or "body"
        grouped.setdefault(field, []).append(str(error.get("msg", "")))
    return grouped


def setup_error_handlers(app: FastAPI) -> None:
    """
    Set up error handlers for the FastAPI app.

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        """Handle API errors raised by endpoints and services."""
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            "api_error",
            code=exc.code,
            status_code=exc.status_code,
            path=request.url.path,
            message=exc.message,
        )
        return error_response(
            code=exc.code,
            message=exc.message,
            status_code=exc.status_code,
            details=exc.details,
            validation_errors=exc.validation_errors,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        """Handle request validation errors, including unparseable JSON."""
        errors = exc.errors()
        if any(error.get("type") == "json_invalid" for error in errors):
            logger.warning("invalid_json", path=request.url.path)
            return error_response(
                code=InvalidJsonError.code,
                message=InvalidJsonError.message,
                status_code=InvalidJsonError.status_code,
            )

        validation_errors = format_validation_errors(errors)
        logger.warning(
            "validation_failed",
            path=request.url.path,
            fields=sorted(validation_errors),
        )
        return error_response(
            code=ValidationFailedError.code,
            message=ValidationFailedError.message,
            status_code=ValidationFailedError.status_code,
            validation_errors=validation_errors,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        """Handle routing and framework HTTP errors."""
        code, message = HTTP_STATUS_CODES.get(exc.status_code, ("HTTP_ERROR", str(exc.detail)))
        logger.warning(
            "http_error",
            status_code=exc.status_code,
            method=request.method,
            path=request.url.path,
        )
        response = error_response(code=code, message=message, status_code=exc.status_code)
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions without leaking internals."""
        logger.error(
            "unhandled_exception",
            path=request.url.path,
            error=str(exc),
            exc_info=True,
        )
        return error_response(
            code=ApiError.code,
            message=ApiError.message,
            status_code=ApiError.status_code,
        )
