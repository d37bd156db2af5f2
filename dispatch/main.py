"""
Main FastAPI application entry point.
"""

import logging
import time as time_module
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from dispatch import __version__
from dispatch.config import get_settings
from dispatch.database import close_db, get_db_context, init_db
from dispatch.exceptions import AppError
from dispatch.services.session import SessionService

logger = logging.getLogger(__name__)

SLOW_REQUEST_MS = 100


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


class TimingMiddleware(BaseHTTPMiddleware):
    """Logs requests slower than SLOW_REQUEST_MS."""

    async def dispatch(self, request, call_next):
        start = time_module.perf_counter()
        response = await call_next(request)
        duration = (time_module.perf_counter() - start) * 1000
        if duration > SLOW_REQUEST_MS:
            logger.warning(
                "Slow request: %s %s took %.0fms", request.method, request.url.path, duration
            )
        return response


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan handler.
    Initializes database on startup and closes connections on shutdown.
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Starting %s v%s (debug=%s)", settings.app_name, __version__, settings.debug)

    await init_db()
    async with get_db_context() as db:
        removed = await SessionService(db).cleanup_expired_sessions()
    if removed:
        logger.info("Removed %d expired sessions", removed)

    yield

    await close_db()
    logger.info("%s shutdown complete", settings.app_name)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        description="Scheduling and calendar API for field-service dispatch",
        lifespan=lifespan,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
        openapi_url="/api/openapi.json" if settings.debug else None,
    )

    # With allow_credentials=True the origins must be explicit
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1|192\.168\.\d+\.\d+)(:\d+)?$",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(TimingMiddleware)

    from dispatch.routers import (
        absences,
        appointments,
        auth,
        calendar,
        health,
        users,
        vehicles,
    )

    app.include_router(health.router, tags=["Health"])
    app.include_router(auth.router, prefix="/api", tags=["Authentication"])
    app.include_router(users.router, prefix="/api", tags=["Users"])
    app.include_router(vehicles.router, prefix="/api", tags=["Vehicles"])
    app.include_router(appointments.router, prefix="/api", tags=["Appointments"])
    app.include_router(absences.router, prefix="/api", tags=["Absences"])
    app.include_router(calendar.router, prefix="/api", tags=["Calendar"])

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        """Render application errors as {"error": ..., "detail": ...}."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail, "detail": exc.extra_detail},
            headers=exc.headers,
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle uncaught exceptions."""
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"},
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "dispatch.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.debug,
    )
