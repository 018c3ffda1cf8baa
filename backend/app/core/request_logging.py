"""
Request logging middleware.
Logs method, path, status and duration of every request; failures surface
here with their status even when the route only returned a generic message.
"""
import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger("app.requests")

# Health probes are frequent and uninteresting
QUIET_PATHS = ("/health",)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware that logs one line per request."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("%s %s raised", request.method, request.url.path)
            raise

        path = request.url.path
        if path in QUIET_PATHS:
            return response

        elapsed_ms = (time.perf_counter() - started) * 1000
        level = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(
            level,
            "%s %s -> %d (%.1f ms)",
            request.method, path, response.status_code, elapsed_ms,
        )
        return response
