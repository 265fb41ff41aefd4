"""
Error Handling Middleware - Educational Documentation
======================================================

WHAT IS CENTRALIZED ERROR HANDLING?
------------------------------------
Known failures (the RedisManagerError hierarchy, request shape errors) are
turned into the `{success: false, message}` envelope by the exception
handlers registered in `app.py`. This middleware is the last line for
everything else: a bug or an unexpected library exception still produces
the same envelope instead of a bare 500 page.

SECURITY CONSIDERATION:
-----------------------
The client gets a generic message unless `include_traceback` is set
(development only). The full stack trace is always logged server-side.
"""

import traceback
from collections.abc import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from redis_web_manager.application.api.models.responses import error_envelope
from redis_web_manager.core.logging.logger import get_logger

logger = get_logger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred while processing your request"


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Catch-all for exceptions no exception handler claimed.

    Args:
        include_traceback: add `error_type` and `traceback` to the response body
    """

    def __init__(self, app, include_traceback: bool = False):
        super().__init__(app)
        self.include_traceback = include_traceback

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)

        except Exception as e:
            method = request.method
            path = request.url.path
            error_type = type(e).__name__

            logger.error(
                f"Unhandled exception in request: {method} {path}",
                method=method,
                path=path,
                error_type=error_type,
                error_message=str(e),
                exc_info=True,
            )

            body = error_envelope(str(e) if self.include_traceback else GENERIC_ERROR_MESSAGE)
            if self.include_traceback:
                body["error_type"] = error_type
                body["traceback"] = traceback.format_exc()

            return JSONResponse(status_code=500, content=body)


def add_error_handling_middleware(app, include_traceback: bool = False):
    """Register the middleware. Add it early so it wraps every other middleware."""
    app.add_middleware(ErrorHandlingMiddleware, include_traceback=include_traceback)
    logger.info("Error handling middleware registered", include_traceback=include_traceback)
