"""
RFC 7807 Problem Details exception handling.

Provides standardized error responses for the API following the
"Problem Details for HTTP APIs" specification.

See: https://datatracker.ietf.org/doc/html/rfc7807
"""

from typing import Optional, Dict, Any, List
from enum import Enum
from pydantic import BaseModel, Field
from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import traceback
import uuid
from datetime import datetime, timezone

from app.middleware.correlation import get_request_id

logger = logging.getLogger(__name__)

PROBLEM_TYPE_BASE = "https://hvac-dispatch.app/problems"


def _get_trace_id() -> str:
    """Get trace ID from correlation context or generate a new one."""
    request_id = get_request_id()
    if request_id and request_id != "unknown":
        return request_id
    return str(uuid.uuid4())[:12]


def _timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


class ErrorCode(str, Enum):
    """Standardized error codes for the API."""

    # Authentication & Authorization
    UNAUTHORIZED = "AUTH_001"
    FORBIDDEN = "AUTH_002"

    # Validation
    VALIDATION_ERROR = "VAL_001"

    # Resource
    NOT_FOUND = "RES_001"
    CONFLICT = "RES_003"

    # Business Logic
    BUSINESS_RULE_VIOLATION = "BIZ_001"

    # External Services
    EXTERNAL_SERVICE_ERROR = "EXT_001"

    # Server
    INTERNAL_ERROR = "SRV_001"
    SERVICE_UNAVAILABLE = "SRV_002"
    TIMEOUT = "SRV_003"


_DEFAULT_TITLES = {
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    409: "Conflict",
    422: "Validation Error",
    500: "Internal Server Error",
    502: "Bad Gateway",
    503: "Service Unavailable",
    504: "Gateway Timeout",
}


def _problem_type(code: ErrorCode) -> str:
    return f"{PROBLEM_TYPE_BASE}/{code.value.lower().replace('_', '-')}"


class ProblemDetail(BaseModel):
    """
    RFC 7807 Problem Details response schema.

    Attributes:
        type: URI reference identifying the problem type
        title: Short, human-readable summary
        status: HTTP status code
        detail: Human-readable explanation specific to this occurrence
        instance: URI reference identifying this specific occurrence
        code: Machine-readable error code for client handling
        timestamp: ISO 8601 timestamp of when the error occurred
        trace_id: Unique identifier for tracing in logs
        errors: List of field-level validation errors (for 422)
        retryable: Whether the client may safely retry the request
        retry_after: Seconds to wait before retrying
    """

    type: str = Field(default="about:blank")
    title: str
    status: int
    detail: str
    instance: Optional[str] = None
    code: str
    timestamp: str
    trace_id: str
    errors: Optional[List[Dict[str, Any]]] = None
    retryable: Optional[bool] = None
    retry_after: Optional[int] = None


class AppException(HTTPException):
    """
    Base exception for the API with RFC 7807 support.

    Usage:
        raise AppException(
            status_code=404,
            code=ErrorCode.NOT_FOUND,
            detail="Customer not found",
        )
    """

    def __init__(
        self,
        status_code: int,
        code: ErrorCode,
        detail: str,
        title: Optional[str] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
        retryable: Optional[bool] = None,
        retry_after: Optional[int] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.code = code
        self.title = title or _DEFAULT_TITLES.get(status_code, "Error")
        self.errors = errors
        self.retryable = retryable
        self.retry_after = retry_after
        self.trace_id = _get_trace_id()
        self.timestamp = _timestamp()

        super().__init__(status_code=status_code, detail=detail, headers=headers)

    def to_problem_detail(self, instance: Optional[str] = None) -> ProblemDetail:
        """Convert to RFC 7807 ProblemDetail."""
        return ProblemDetail(
            type=_problem_type(self.code),
            title=self.title,
            status=self.status_code,
            detail=self.detail,
            instance=instance,
            code=self.code.value,
            timestamp=self.timestamp,
            trace_id=self.trace_id,
            errors=self.errors,
            retryable=self.retryable,
            retry_after=self.retry_after,
        )


# Convenience exception classes

class NotFoundError(AppException):
    """Resource not found (404).

    Also used for rows owned by another company, so the two cases are
    indistinguishable to the caller.
    """

    def __init__(self, resource: str):
        super().__init__(
            status_code=404,
            code=ErrorCode.NOT_FOUND,
            detail=f"{resource} not found",
        )


class ValidationError(AppException):
    """Validation error (422)."""

    def __init__(
        self,
        detail: str,
        errors: Optional[List[Dict[str, Any]]] = None
    ):
        super().__init__(
            status_code=422,
            code=ErrorCode.VALIDATION_ERROR,
            detail=detail,
            errors=errors,
        )


class UnauthorizedError(AppException):
    """Authentication required (401)."""

    def __init__(self, detail: str = "Could not validate credentials"):
        super().__init__(
            status_code=401,
            code=ErrorCode.UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class ConflictError(AppException):
    """Resource conflict (409)."""

    def __init__(self, detail: str):
        super().__init__(
            status_code=409,
            code=ErrorCode.CONFLICT,
            detail=detail,
        )


class BusinessRuleError(AppException):
    """Business rule violation (400)."""

    def __init__(self, detail: str):
        super().__init__(
            status_code=400,
            code=ErrorCode.BUSINESS_RULE_VIOLATION,
            detail=detail,
        )


class ExternalServiceError(AppException):
    """External service error (502, or 503 when the service is not configured)."""

    def __init__(self, service: str, detail: str, status_code: int = 502):
        super().__init__(
            status_code=status_code,
            code=ErrorCode.EXTERNAL_SERVICE_ERROR,
            detail=f"{service} service error: {detail}",
            retryable=True,
        )


class RequestTimeoutError(AppException):
    """Request exceeded the server-side time budget (504)."""

    def __init__(self, timeout_seconds: float, retry_after: int = 5):
        super().__init__(
            status_code=504,
            code=ErrorCode.TIMEOUT,
            detail=f"Request did not complete within {timeout_seconds:g} seconds",
            retryable=True,
            retry_after=retry_after,
            headers={"Retry-After": str(retry_after)},
        )


# Exception handlers for FastAPI

def create_problem_response(
    status_code: int,
    code: ErrorCode,
    detail: str,
    request: Request,
    errors: Optional[List[Dict[str, Any]]] = None,
    trace_id: Optional[str] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    """Create a RFC 7807 compliant JSON response."""
    problem = ProblemDetail(
        type=_problem_type(code),
        title=_DEFAULT_TITLES.get(status_code, "Error"),
        status=status_code,
        detail=detail,
        instance=str(request.url.path),
        code=code.value,
        timestamp=_timestamp(),
        trace_id=trace_id or _get_trace_id(),
        errors=errors,
    )

    return JSONResponse(
        status_code=status_code,
        content=problem.model_dump(exclude_none=True),
        media_type="application/problem+json",
        headers=headers,
    )


def problem_response_for(exc: AppException, instance: Optional[str] = None) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_problem_detail(instance).model_dump(exclude_none=True),
        media_type="application/problem+json",
        headers=exc.headers,
    )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handle AppException with RFC 7807 response."""
    logger.warning(
        f"AppException: {exc.code.value} - {exc.detail}",
        extra={
            "trace_id": exc.trace_id,
            "status_code": exc.status_code,
            "path": request.url.path,
        }
    )
    return problem_response_for(exc, instance=str(request.url.path))


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException
) -> JSONResponse:
    """Handle standard HTTPException with RFC 7807 response."""
    code_map = {
        400: ErrorCode.VALIDATION_ERROR,
        401: ErrorCode.UNAUTHORIZED,
        403: ErrorCode.FORBIDDEN,
        404: ErrorCode.NOT_FOUND,
        409: ErrorCode.CONFLICT,
        422: ErrorCode.VALIDATION_ERROR,
        500: ErrorCode.INTERNAL_ERROR,
        502: ErrorCode.EXTERNAL_SERVICE_ERROR,
        503: ErrorCode.SERVICE_UNAVAILABLE,
        504: ErrorCode.TIMEOUT,
    }

    code = code_map.get(exc.status_code, ErrorCode.INTERNAL_ERROR)

    return create_problem_response(
        status_code=exc.status_code,
        code=code,
        detail=str(exc.detail),
        request=request,
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """Handle Pydantic validation errors with field-level details."""
    errors = []
    for error in exc.errors():
        errors.append({
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        })

    return create_problem_response(
        status_code=422,
        code=ErrorCode.VALIDATION_ERROR,
        detail="Request validation failed",
        request=request,
        errors=errors,
    )


async def generic_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """Handle unexpected exceptions with RFC 7807 response.

    Full detail stays in the server log; the client only sees the trace id.
    """
    trace_id = _get_trace_id()

    logger.error(
        f"Unhandled exception: {type(exc).__name__}",
        extra={"trace_id": trace_id, "path": request.url.path, "method": request.method},
    )
    logger.error(traceback.format_exc())

    detail = "An unexpected error occurred"

    return create_problem_response(
        status_code=500,
        code=ErrorCode.INTERNAL_ERROR,
        detail=detail,
        request=request,
        trace_id=trace_id,
    )


def register_exception_handlers(app) -> None:
    """Install the problem-details handlers on a FastAPI app."""
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
