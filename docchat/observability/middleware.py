"""
HTTP middleware for request tracing.

CorrelationMiddleware binds X-Correlation-ID to the request context;
RequestLoggingMiddleware writes one completion line per request with the
caller's identity header and the elapsed time.

Dependencies: fastapi, starlette, docchat.observability.correlation
System role: Request/response observability injection
"""

import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from docchat.observability.correlation import clear_correlation_id, set_correlation_id

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


class CorrelationMiddleware(BaseHTTPMiddleware):
    """Echo the caller's correlation ID, or mint one, on every response."""

    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = set_correlation_id(request.headers.get(CORRELATION_HEADER))
        request.state.correlation_id = correlation_id
        try:
            response: Response = await call_next(request)
        finally:
            clear_correlation_id()
        response.headers[CORRELATION_HEADER] = correlation_id
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and latency once the handler returns."""

    async def dispatch(self, request: Request, call_next) -> Response:
        started = time.perf_counter()
        context = {
            "method": request.method,
            "path": request.url.path,
            "owner_id": request.headers.get("X-User-Id"),
        }

        try:
            response: Response = await call_next(request)
        except Exception as e:
            logger.exception(
                f"{__name__}:dispatch - {request.method} {request.url.path} raised {type(e).__name__}",
                extra={**context, "elapsed_ms": _elapsed_ms(started)},
            )
            raise

        # Streaming bodies are still being produced at this point
        logger.info(
            f"{__name__}:dispatch - {request.method} {request.url.path} -> {response.status_code}",
            extra={**context, "status_code": response.status_code, "elapsed_ms": _elapsed_ms(started)},
        )
        return response


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
