"""
Request timeout middleware.

Bounds every request to ``REQUEST_TIMEOUT_SECONDS``. Expiry is reported as a
retryable 504 problem response instead of leaving the client hanging on a
stalled database or identity-provider round-trip.
"""

import asyncio
import logging
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.exceptions import RequestTimeoutError, problem_response_for

logger = logging.getLogger(__name__)


class RequestTimeoutMiddleware(BaseHTTPMiddleware):

    def __init__(self, app, timeout_seconds: float):
        super().__init__(app)
        self.timeout_seconds = timeout_seconds

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await asyncio.wait_for(call_next(request), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            logger.warning(
                "Request timed out after %.1fs: %s %s",
                self.timeout_seconds, request.method, request.url.path,
            )
            return problem_response_for(
                RequestTimeoutError(self.timeout_seconds),
                instance=str(request.url.path),
            )
