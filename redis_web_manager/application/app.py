"""
FastAPI Application Entry Point

Configures the Redis Web Manager API: lifespan (logging, profile store,
connection registry, keyspace services), middleware, exception handlers
and routes.
"""

import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from redis_web_manager.application.api.middleware import setup_middleware
from redis_web_manager.application.api.models import error_envelope
from redis_web_manager.application.api.routes import (
    collections_router,
    connections_router,
    health_router,
    hyperloglog_router,
    keys_router,
)
from redis_web_manager.core.config.constants import HEADER_REQUEST_ID
from redis_web_manager.core.config.settings import get_settings
from redis_web_manager.core.exceptions import RedisManagerError
from redis_web_manager.core.logging.logger import (
    clear_request_id,
    get_logger,
    set_request_id,
    setup_logging,
)
from redis_web_manager.infrastructure.redis.registry import ConnectionRegistry
from redis_web_manager.infrastructure.storage.profile_store import ConnectionProfileStore
from redis_web_manager.keyspace.inspector import ValueInspector
from redis_web_manager.keyspace.mutations import MutationService
from redis_web_manager.keyspace.scanner import KeyspaceScanner

logger = get_logger(__name__)


# ============================================================================
# Application Lifespan
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle (startup and shutdown).
    """
    settings = get_settings()

    setup_logging(log_level=settings.logging.LOG_LEVEL, log_format=settings.logging.LOG_FORMAT)

    logger.info(
        "Starting Redis Web Manager",
        environment=settings.app.ENVIRONMENT,
        version=settings.app.APP_VERSION,
    )

    profile_store = ConnectionProfileStore.from_settings(settings.storage)
    registry = ConnectionRegistry(profile_store, settings=settings.redis)

    # Stored in app state for dependencies.py
    app.state.profile_store = profile_store
    app.state.registry = registry
    app.state.scanner = KeyspaceScanner(settings.browser)
    app.state.inspector = ValueInspector(settings.browser)
    app.state.mutations = MutationService(registry)

    logger.info("Application startup complete", profiles_file=str(profile_store.file_path))

    try:
        yield
    finally:
        logger.info("Shutting down application")
        await registry.close_all()
        logger.info("Application shutdown complete")


# ============================================================================
# Exception Handlers
# ============================================================================


async def redis_manager_error_handler(request: Request, exc: RedisManagerError):
    """Every service failure surfaces as a flat message in the 500 envelope."""
    logger.error(
        f"Request failed: {exc.message}",
        error_type=type(exc).__name__,
        path=request.url.path,
        details=exc.details,
    )
    return JSONResponse(status_code=500, content=error_envelope(exc.message))


async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed JSON or a non-object body: same envelope as any other failure."""
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request body") if errors else "Invalid request body"
    logger.warning("Invalid request body", path=request.url.path, errors=len(errors))
    return JSONResponse(status_code=500, content=error_envelope(f"Invalid request body: {message}"))


# ============================================================================
# Application Factory
# ============================================================================


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured application instance
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app.APP_NAME,
        version=settings.app.APP_VERSION,
        description="Backend for browsing and editing Redis-compatible key-value stores",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Starlette runs the last-added middleware first. Resulting order:
    # request id -> error handling -> request logging -> CORS -> routes
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.app.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[HEADER_REQUEST_ID],
    )
    setup_middleware(app)

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next):
        """Inject a request ID into every log line of the request."""
        request_id = request.headers.get(HEADER_REQUEST_ID) or str(uuid.uuid4())
        set_request_id(request_id)
        try:
            response = await call_next(request)
            response.headers[HEADER_REQUEST_ID] = request_id
            return response
        finally:
            clear_request_id()

    app.add_exception_handler(RedisManagerError, redis_manager_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)

    base_path = settings.app.API_BASE_PATH

    app.include_router(health_router, prefix=base_path)
    app.include_router(connections_router, prefix=base_path)
    app.include_router(keys_router, prefix=base_path)
    app.include_router(collections_router, prefix=base_path)
    app.include_router(hyperloglog_router, prefix=base_path)

    @app.get("/", tags=["Root"])
    async def root():
        return {
            "name": settings.app.APP_NAME,
            "version": settings.app.APP_VERSION,
            "environment": settings.app.ENVIRONMENT,
            "docs": "/docs",
            "health": f"{base_path}/health",
        }

    return app


# Create application instance
app = create_app()
