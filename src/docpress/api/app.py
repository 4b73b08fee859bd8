"""
FastAPI Application Setup.

Main application factory for the docpress REST API.
"""

import asyncio
import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from docpress.api.middleware.cors import add_cors_middleware
from docpress.api.middleware.logging import RequestLoggingMiddleware
from docpress.api.routes import files, health
from docpress.api.schemas.exceptions import APIException, TransformFailedError
from docpress.config import Settings, get_settings
from docpress.core.exceptions import TransformFailure
from docpress.files import DeferredTaskScheduler, FileLifecycle, ProcessedFileStore
from docpress.version import __version__

# Configure logging
logging.basicConfig(
    level=os.getenv("DP_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def build_lifecycle(settings: Settings) -> FileLifecycle:
    """Create the store and lifecycle manager described by settings."""
    return FileLifecycle(
        ProcessedFileStore(),
        settings.output_dir,
        ttl=settings.file_ttl,
        grace_seconds=settings.download_grace_seconds,
        scheduler=DeferredTaskScheduler(),
    )


async def _sweep_loop(lifecycle: FileLifecycle, interval_seconds: float) -> None:
    """Periodically remove expired processed files."""
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await asyncio.to_thread(lifecycle.sweep_expired)
        except Exception:
            logger.exception("Scheduled cleanup failed")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Lifespan context manager for startup and shutdown events.

    Builds the lifecycle manager unless one was injected, starts the
    background sweep, and cancels pending work on shutdown.
    """
    settings: Settings = app.state.settings
    logger.info("docpress API starting up...")
    logger.info(f"Version: {__version__}")

    if app.state.lifecycle is None:
        app.state.lifecycle = build_lifecycle(settings)
    lifecycle: FileLifecycle = app.state.lifecycle
    logger.info(
        f"Serving processed files from {lifecycle.output_dir} "
        f"(ttl={lifecycle.ttl}, grace={lifecycle.grace_seconds}s)"
    )

    sweep_task = None
    if settings.cleanup_interval_seconds > 0:
        sweep_task = asyncio.create_task(
            _sweep_loop(lifecycle, settings.cleanup_interval_seconds)
        )

    yield

    logger.info("docpress API shutting down...")
    if sweep_task is not None:
        sweep_task.cancel()
        try:
            await sweep_task
        except asyncio.CancelledError:
            pass
    lifecycle.shutdown()


def create_app(
    settings: Settings | None = None,
    lifecycle: FileLifecycle | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings to use (default: loaded from the environment)
        lifecycle: Prebuilt lifecycle manager (default: built at startup)

    Returns:
        Configured FastAPI application instance
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="docpress API",
        description="Download and cleanup of processed document conversions",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.lifecycle = lifecycle

    app.add_middleware(RequestLoggingMiddleware)
    add_cors_middleware(app, allow_origins=settings.cors_origins)

    app.include_router(health.router, prefix="/health", tags=["Health"])
    app.include_router(files.router, prefix="/api", tags=["Files"])

    @app.exception_handler(APIException)
    async def api_exception_handler(request, exc: APIException) -> JSONResponse:
        """Handle API exceptions with proper error responses."""
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": {
                    "type": exc.error_type,
                    "message": exc.message,
                    "detail": exc.detail,
                }
            },
        )

    @app.exception_handler(TransformFailure)
    async def transform_failure_handler(request, exc: TransformFailure) -> JSONResponse:
        """Report failed conversions without exposing internals."""
        error = TransformFailedError(detail=exc.operation)
        return await api_exception_handler(request, error)

    @app.exception_handler(Exception)
    async def general_exception_handler(request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(f"Unhandled exception: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "type": "internal_error",
                    "message": "An unexpected error occurred",
                    "detail": str(exc) if logger.isEnabledFor(logging.DEBUG) else None,
                }
            },
        )

    @app.get("/", tags=["Root"])
    async def root() -> dict[str, object]:
        """Root endpoint with API information."""
        return {
            "name": "docpress API",
            "version": __version__,
            "status": "operational",
            "docs": "/docs",
            "health": "/health",
        }

    return app
