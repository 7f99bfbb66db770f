"""FastAPI application factory and configuration."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from task_api import __version__
from task_api.api import system
from task_api.api.v1.router import api_router
from task_api.cache import TaskCache, build_cache
from task_api.config import Settings, get_settings
from task_api.core.exceptions import register_exception_handlers
from task_api.core.logging import get_logger, setup_logging
from task_api.core.metrics import MetricsMiddleware
from task_api.core.middleware import RequestLoggingMiddleware
from task_api.database import Database

logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Creates missing tables on startup; closes the cache and the connection
    pool on shutdown.
    """
    settings: Settings = app.state.settings
    logger.info(
        "Starting %s v%s",
        settings.app_name,
        __version__,
        extra={"environment": settings.environment, "cache_enabled": settings.cache_enabled},
    )
    await app.state.database.create_all()
    yield
    logger.info("Shutting down...")
    await app.state.cache.close()
    await app.state.database.dispose()


def create_app(
    settings: Settings | None = None,
    *,
    database: Database | None = None,
    cache: TaskCache | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Configuration to build the app from; loaded from the
            environment when omitted.
        database: Database to use instead of one built from ``settings``.
        cache: Task cache to use instead of one built from ``settings``.

    Returns:
        FastAPI: Configured application instance.
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_format)

    app = FastAPI(
        title=settings.app_name,
        description="A REST API for managing tasks with an optional Redis cache.",
        version=__version__,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        openapi_url="/openapi.json" if not settings.is_production else None,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.database = database if database is not None else Database(settings)
    app.state.cache = cache if cache is not None else build_cache(settings)

    register_exception_handlers(app)

    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.debug else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(system.router)
    app.include_router(api_router, prefix=f"/api/{settings.api_version}")

    return app
