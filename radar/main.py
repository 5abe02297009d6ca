"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any, cast

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from radar.api.v1.router import api_router
from radar.config import settings
from radar.core.database import close_db, init_db
from radar.core.exceptions import StoreUnavailableError
from radar.core.logging import setup_logging

logger = logging.getLogger(__name__)

STORE_UNAVAILABLE_DETAIL = "Storage is temporarily unavailable"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    setup_logging(settings.log_level)

    logger.info(
        "Starting Content Radar",
        extra={
            "environment": settings.environment,
            "version": settings.app_version,
            "store_backend": settings.store_backend,
        },
    )

    if settings.environment == "development" and settings.store_backend == "sql":
        await init_db()
        logger.info("Development database initialized")

    yield

    logger.info("Shutting down Content Radar")
    await close_db()


async def store_unavailable_handler(request: Request, exc: Exception) -> JSONResponse:
    operation = exc.operation if isinstance(exc, StoreUnavailableError) else None
    logger.error(
        "Request failed on store error",
        extra={"path": request.url.path, "operation": operation},
    )
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": STORE_UNAVAILABLE_DETAIL},
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description=(
            "Keyword gap radar and content pipeline orchestration for the admin "
            "dashboard and scheduled jobs"
        ),
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        cast(Any, CORSMiddleware),
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StoreUnavailableError, store_unavailable_handler)

    # Include API router
    app.include_router(api_router, prefix=settings.api_v1_prefix)

    @app.get(
        "/health",
        summary="Health check",
        description="Return service health status and backend version information.",
    )
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy", "version": settings.app_version}

    return app


app = create_app()
