"""
Correlation ID middleware for request tracing.

Headers:
- X-Correlation-ID: Session-level ID from the client (persists across requests)
- X-Request-ID: Per-request unique identifier

Both are exposed through context variables so log records and problem
responses can carry them without threading the request through every call.
"""

import uuid
import logging
from contextvars import ContextVar
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

correlation_id_ctx: ContextVar[str] = ContextVar("correlation_id", default="")
request_id_ctx: ContextVar[str] = ContextVar("request_id", default="")


def generate_id() -> str:
    """Generate a short unique ID suitable for logging."""
    return uuid.uuid4().hex[:12]


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Extract or generate correlation/request IDs and echo them on the response."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Response]
    ) -> Response:
        correlation_id = request.headers.get("X-Correlation-ID") or generate_id()
        request_id = request.headers.get("X-Request-ID") or generate_id()

        correlation_token = correlation_id_ctx.set(correlation_id)
        request_token = request_id_ctx.set(request_id)
        request.state.correlation_id = correlation_id
        request.state.request_id = request_id
        try:
            response = await call_next(request)
        finally:
            correlation_id_ctx.reset(correlation_token)
            request_id_ctx.reset(request_token)

        response.headers["X-Correlation-ID"] = correlation_id
        response.headers["X-Request-ID"] = request_id
        return response


def get_correlation_id() -> str:
    return correlation_id_ctx.get() or "unknown"


def get_request_id() -> str:
    return request_id_ctx.get() or "unknown"


class CorrelationLogFilter(logging.Filter):
    """Inject correlation IDs into every log record passing through a handler."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id()
        record.request_id = get_request_id()
        return True
