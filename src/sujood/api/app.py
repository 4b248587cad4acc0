"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sujood import __version__
from sujood.api.dependencies import initialize_app_state, shutdown_app_state
from sujood.api.routes import router as api_router
from sujood.domain.errors import CalculationError, InvalidInput, MissingTomorrowTimes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    logger.info("Sujood starting...")

    await initialize_app_state(
        settings_path=getattr(app.state, "settings_path", None),
        cache_path=getattr(app.state, "cache_path", None),
        retention_days=getattr(app.state, "retention_days", 90),
        days_ahead=getattr(app.state, "days_ahead", 7),
    )

    logger.info("Sujood ready")

    yield

    logger.info("Sujood shutting down...")
    await shutdown_app_state()
    logger.info("Sujood stopped")


async def _unprocessable(request: Request, exc: Exception) -> JSONResponse:
    """Domain validation and calculation failures as 422."""
    logger.warning(f"{request.method} {request.url.path} rejected: {exc}")
    return JSONResponse(status_code=422, content={"detail": str(exc), "error": type(exc).__name__})


def create_app(
    settings_path: Path | None = None,
    cache_path: Path | None = None,
    *,
    retention_days: int = 90,
    days_ahead: int = 7,
) -> FastAPI:
    """
    Create FastAPI application.

    Args:
        settings_path: Settings file path
        cache_path: Cache database path
        retention_days: Cached days kept behind today
        days_ahead: Days computed ahead of today at startup

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="Sujood",
        description="Offline prayer times, Hijri dates and next-prayer countdowns",
        version=__version__,
        lifespan=lifespan,
    )

    # Store config in app state
    app.state.settings_path = settings_path
    app.state.cache_path = cache_path
    app.state.retention_days = retention_days
    app.state.days_ahead = days_ahead

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "PUT", "POST"],
        allow_headers=["*"],
    )

    for error in (InvalidInput, CalculationError, MissingTomorrowTimes):
        app.add_exception_handler(error, _unprocessable)

    app.include_router(api_router, prefix="/api")

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    return app
