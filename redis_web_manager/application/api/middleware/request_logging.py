"""
Request Logging Middleware - Educational Documentation
=======================================================

WHAT IS MIDDLEWARE?
-------------------
Middleware wraps every route: it sees the request on the way in and the
response on the way out.

    Client → request id → error handling → request logging → CORS → route

LOGGING STRATEGY:
-----------------
One line per request when it finishes: method, path, status, duration and
the client address. Failures usually arrive here as 500
envelopes (the exception handlers already built them), so the level is
chosen from the status code.

Never logged: request and response bodies. Connection bodies carry store
passwords and value previews can be large.

Frequent polling paths (the health check) are logged at DEBUG.
"""

import time
from collections.abc import Callable, Iterable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from redis_web_manager.core.logging.logger import get_logger

logger = get_logger(__name__)

SENSITIVE_HEADERS = frozenset({"authorization", "cookie", "x-api-key", "x-auth-token"})


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log each request once it completes, with timing."""

    def __init__(self, app, quiet_paths: Iterable[str] = ()):
        super().__init__(app)
        self.quiet_paths = frozenset(quiet_paths)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        method, path = request.method, request.url.path
        context = {
            "method": method,
            "path": path,
            "client_host": request.client.host if request.client else None,
        }

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"{method} {path} raised",
                error_type=type(e).__name__,
                headers=self.sanitize_headers(dict(request.headers)),
                duration_ms=self._elapsed_ms(start_time),
                **context,
            )
            raise

        if path in self.quiet_paths:
            log = logger.debug
        elif response.status_code >= 500:
            log = logger.warning
        else:
            log = logger.info

        log(
            f"{method} {path} -> {response.status_code}",
            status_code=response.status_code,
            duration_ms=self._elapsed_ms(start_time),
            **context,
        )
        return response

    @staticmethod
    def _elapsed_ms(start_time: float) -> float:
        return round((time.perf_counter() - start_time) * 1000, 2)

    @staticmethod
    def sanitize_headers(headers: dict) -> dict:
        """Headers safe to attach to a log line."""
        return {
            key: "[REDACTED]" if key.lower() in SENSITIVE_HEADERS else value
            for key, value in headers.items()
        }


def add_request_logging_middleware(app, quiet_paths: Iterable[str] = ()):
    app.add_middleware(RequestLoggingMiddleware, quiet_paths=quiet_paths)
