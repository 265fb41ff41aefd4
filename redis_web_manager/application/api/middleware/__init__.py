"""
Middleware Package
==================

AVAILABLE MIDDLEWARE:
---------------------
1. error_handler: last-resort `{success: false, message}` envelope
2. request_logging: one line per completed request

MIDDLEWARE ORDERING:
--------------------
Starlette runs the last-added middleware first. `setup_middleware` adds
request logging before error handling so that error handling is outermost
and also catches failures raised while logging.
"""

from fastapi import FastAPI

from redis_web_manager.core.config.settings import get_settings
from redis_web_manager.core.logging.logger import get_logger

from .error_handler import ErrorHandlingMiddleware, add_error_handling_middleware
from .request_logging import RequestLoggingMiddleware, add_request_logging_middleware

logger = get_logger(__name__)


def setup_middleware(app: FastAPI) -> None:
    settings = get_settings()

    add_request_logging_middleware(
        app, quiet_paths=[f"{settings.app.API_BASE_PATH}/health"]
    )
    add_error_handling_middleware(
        app, include_traceback=(settings.app.ENVIRONMENT == "development")
    )

    logger.info("All middleware configured")


__all__ = [
    "ErrorHandlingMiddleware",
    "RequestLoggingMiddleware",
    "add_error_handling_middleware",
    "add_request_logging_middleware",
    "setup_middleware",
]
