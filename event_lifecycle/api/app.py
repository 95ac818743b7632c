"""FastAPI application configuration module."""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Internal imports
from event_lifecycle.config.environment import IS_PRODUCTION_ENVIRONMENT # Environment must be imported first
from event_lifecycle import __version__
from event_lifecycle.config.cors import CORS_CONFIG
from event_lifecycle.utils.logging_config import setup_logging
from event_lifecycle.db import db, TransientStorageError
from event_lifecycle.lifecycle import (
    EventNotFoundError,
    InvalidTransitionError,
    NotReadyToPublishError,
    TransitionConflictError,
)
from .routes import (
    events,
    health
)

# Set up logging
setup_logging()
logger = logging.getLogger(__name__)

# Seconds a client should wait before retrying after a storage failure
RETRY_AFTER_SECONDS = 1

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    # Startup
    try:
        db.ensure_tables_exist()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Startup failed: {e}")
        raise
    yield
    # Shutdown
    db.dispose()

def _error_response(status_code: int, exc: Exception, headers=None, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": type(exc).__name__, "detail": str(exc), **extra},
        headers=headers,
    )

def register_exception_handlers(app: FastAPI) -> None:
    """Map lifecycle and storage errors to HTTP responses."""

    @app.exception_handler(InvalidTransitionError)
    async def invalid_transition_handler(request: Request, exc: InvalidTransitionError):
        return _error_response(
            400, exc,
            current_status=exc.current_status,
            target_status=exc.target_status,
        )

    @app.exception_handler(NotReadyToPublishError)
    async def not_ready_handler(request: Request, exc: NotReadyToPublishError):
        return _error_response(400, exc, missing_fields=exc.missing_fields)

    @app.exception_handler(EventNotFoundError)
    async def not_found_handler(request: Request, exc: EventNotFoundError):
        return _error_response(404, exc)

    @app.exception_handler(TransitionConflictError)
    async def conflict_handler(request: Request, exc: TransitionConflictError):
        return _error_response(
            409, exc,
            expected_status=exc.expected_status,
            actual_status=exc.actual_status,
        )

    @app.exception_handler(TransientStorageError)
    async def storage_handler(request: Request, exc: TransientStorageError):
        logger.error(f"Storage failure on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=503,
            content={"error": type(exc).__name__, "detail": "Storage temporarily unavailable"},
            headers={"Retry-After": str(RETRY_AFTER_SECONDS)},
        )

def create_application() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Event Lifecycle API",
        description="Status transitions, publication readiness and audit history for events",
        version=__version__,
        docs_url=None if IS_PRODUCTION_ENVIRONMENT else '/api/docs',
        redoc_url=None if IS_PRODUCTION_ENVIRONMENT else '/api/redoc',
        lifespan=lifespan
    )

    # Configure CORS
    app.add_middleware(CORSMiddleware, **CORS_CONFIG)

    register_exception_handlers(app)

    # Include health check router without prefix
    app.include_router(health.router)

    # Include routers with prefix
    app.include_router(events.router, prefix="/api")

    return app

# Create the application instance
app = create_application()
