"""
Application factory.

Creates the FastAPI application and wires together:
- One CRUD router per registered model view
- Error handlers (centralized domain-to-HTTP mapping)
- Security middleware (headers, rate limiting)
- Logging configuration
- The database pool lifecycle

No business logic belongs here.
"""

import logging
from contextlib import asynccontextmanager
from typing import Iterable, Optional

from fastapi import FastAPI
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy import MetaData

from modelview.core.config import Settings, settings as default_settings
from modelview.infrastructure.database import DatabasePool, get_database
from modelview.interfaces.health import router as health_router
from modelview.interfaces.model_view import ModelView
from modelview.shared.errors.handlers import register_error_handlers
from modelview.shared.logging import configure_logging
from modelview.shared.security.headers import SecurityHeadersMiddleware
from modelview.shared.security.rate_limiting import (
    build_limiter,
    rate_limit_exceeded_handler,
)

logger = logging.getLogger(__name__)


def _metadata_of(views: Iterable[ModelView]) -> list[MetaData]:
    seen: list[MetaData] = []
    for view in views:
        metadata = view.descriptor.model.metadata
        if metadata not in seen:
            seen.append(metadata)
    return seen


def create_app(
    views: Iterable[ModelView],
    settings: Optional[Settings] = None,
    database: Optional[DatabasePool] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    This is the composition root of the application.

    Args:
        views: Model views to expose, each under ``settings.api_prefix``.
        settings: Application settings; the environment-loaded ones by default.
        database: Pool handle; the process-wide pool by default.

    Returns:
        A fully configured FastAPI application instance.
    """
    settings = settings or default_settings
    database = database or get_database(settings)
    views = list(views)

    configure_logging(level=settings.log_level, sql_echo=settings.db_echo)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Create tables on startup when asked to, dispose the pool on shutdown."""
        if settings.create_tables:
            for metadata in _metadata_of(views):
                await database.create_all(metadata)
        yield
        await database.dispose()

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database

    # --- Rate Limiting ---
    limiter = build_limiter(settings)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # --- Security Middleware ---
    app.add_middleware(SecurityHeadersMiddleware)

    # --- Error Handlers ---
    register_error_handlers(app, validation_status=settings.validation_error_status)

    # --- Routers ---
    app.include_router(health_router)
    for view in views:
        app.include_router(view.router(settings, limiter), prefix=settings.api_prefix)
        logger.info("Mounted %s at %s%s", view.name, settings.api_prefix, view.prefix)

    return app
