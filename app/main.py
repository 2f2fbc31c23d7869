"""
Application entry point.

Creates the FastAPI application and wires together:
- Routers (one per bounded context)
- Error handlers (centralized failure-to-HTTP mapping)
- Middleware (trace context, request logging) and the rate-limit dependency
- Logging configuration
- Database engine and page cache lifetimes

No business logic belongs here.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI
from slowapi.errors import RateLimitExceeded

from app.core.config import Settings, get_settings
from app.infrastructure.cache import create_cache_provider
from app.infrastructure.database import build_engine, create_schema
from app.interfaces.health import router as health_router
from app.interfaces.members.router import router as members_router
from app.shared.errors.handlers import register_error_handlers
from app.shared.logging import configure_logging
from app.shared.middleware import RequestLoggingMiddleware, TraceContextMiddleware
from app.shared.security.rate_limiting import (
    build_limiter,
    enforce_rate_limit,
    rate_limit_exceeded_handler,
)

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: ensure the schema, then release resources."""
    settings: Settings = app.state.settings
    if settings.auto_create_schema:
        await create_schema(app.state.engine)
    logger.info("%s %s started.", settings.project_name, settings.version)

    yield

    await app.state.cache.close()
    await app.state.engine.dispose()
    logger.info("%s stopped.", settings.project_name)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    This is the composition root of the application.

    Args:
        settings: Settings to use; loaded from the environment when omitted.

    Returns:
        A fully configured FastAPI application instance.
    """
    settings = settings or get_settings()
    configure_logging(level=settings.log_level, log_file=settings.log_file)

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = build_engine(settings.database_url, echo=settings.debug)
    app.state.cache = create_cache_provider(settings)

    # --- Rate Limiting ---
    app.state.limiter = build_limiter(settings)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    rate_limited = [Depends(enforce_rate_limit)]

    # --- Request Middleware (last added runs first) ---
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(TraceContextMiddleware)

    # --- Error Handlers ---
    register_error_handlers(app)

    # --- Routers ---
    app.include_router(health_router, prefix=API_PREFIX, dependencies=rate_limited)
    app.include_router(members_router, prefix=API_PREFIX, dependencies=rate_limited)

    return app


app = create_app()
