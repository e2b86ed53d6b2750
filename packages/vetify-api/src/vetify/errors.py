"""Error taxonomy and JSON error envelope for the public API.

Every error response has the shape ``{"code": ..., "error": ...}`` so machine
clients can branch on ``code``. Internal failure reasons (which auth check
failed, why a scope was denied) stay on the exception for logging and are
never written to the response body.
"""

import logging
from enum import Enum

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

logger = logging.getLogger(__name__)


class AuthFailureReason(str, Enum):
    MISSING_HEADER = "missing_header"
    MALFORMED_HEADER = "malformed_header"
    UNKNOWN_KEY = "unknown_key"
    HASH_MISMATCH = "hash_mismatch"
    INACTIVE = "inactive"
    EXPIRED = "expired"
    INVALID_SESSION = "invalid_session"


class ScopeFailureReason(str, Enum):
    MISSING_SCOPE = "missing_scope"
    LOCATION_MISMATCH = "location_mismatch"
    PLAN_NOT_ALLOWED = "plan_not_allowed"
    ROLE_NOT_ALLOWED = "role_not_allowed"


class VetifyError(Exception):
    """Base class for errors that map onto a stable API error code."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def body(self) -> dict:
        return {"code": self.code, "error": self.message}

    def headers(self) -> dict[str, str] | None:
        return None


class AuthFailure(VetifyError):
    """Credential could not be verified. Always a generic 401 to the caller."""

    status_code = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHORIZED"
    default_message = "Missing or invalid API key"

    def __init__(self, reason: AuthFailureReason, message: str | None = None) -> None:
        self.reason = reason
        super().__init__(message)


class ScopeFailure(VetifyError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"
    default_message = "This API key is not allowed to perform this operation"

    def __init__(self, reason: ScopeFailureReason, message: str | None = None) -> None:
        self.reason = reason
        super().__init__(message)


class RateLimitExceeded(VetifyError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    code = "RATE_LIMITED"
    default_message = "Rate limit exceeded"

    def __init__(self, limit: int, reset_at: int, retry_after: int) -> None:
        self.limit = limit
        self.reset_at = reset_at
        self.retry_after = retry_after
        super().__init__(f"Rate limit exceeded. Limit: {limit}/hour")

    def body(self) -> dict:
        return {**super().body(), "remaining": 0, "reset": self.reset_at}

    def headers(self) -> dict[str, str]:
        return {
            "Retry-After": str(self.retry_after),
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": "0",
            "X-RateLimit-Reset": str(self.reset_at),
        }


class ValidationFailure(VetifyError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "VALIDATION_ERROR"
    default_message = "Validation failed"


class NotFound(VetifyError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"
    default_message = "Resource not found"


class Conflict(VetifyError):
    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"
    default_message = "Request conflicts with the current state of the resource"


class RateLimitStoreUnavailable(VetifyError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "SERVICE_UNAVAILABLE"
    default_message = "Rate limiting is temporarily unavailable"


_STATUS_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    429: "RATE_LIMITED",
}


async def vetify_error_handler(request: Request, exc: VetifyError) -> JSONResponse:
    reason = getattr(exc, "reason", None)
    logger.info(
        "%s %s -> %d %s: %s",
        request.method,
        request.url.path,
        exc.status_code,
        exc.code,
        reason.value if reason is not None else exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.body(), headers=exc.headers())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Flatten Pydantic errors into a single readable message."""
    parts = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"] if loc != "body")
        parts.append(f"{field}: {error['msg']}" if field else error["msg"])
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"code": "VALIDATION_ERROR", "error": "; ".join(parts) or "Validation failed"},
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = _STATUS_CODES.get(exc.status_code, "ERROR")
    return JSONResponse(
        status_code=exc.status_code,
        content={"code": code, "error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log the traceback and answer with a body that exposes nothing internal."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"code": "INTERNAL_ERROR", "error": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(VetifyError, vetify_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
