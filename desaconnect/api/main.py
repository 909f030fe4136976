"""FastAPI application entry point for DesaConnect."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from desaconnect import __version__
from desaconnect.api.middleware.logging_middleware import LoggingMiddleware
from desaconnect.api.middleware.metrics_middleware import MetricsMiddleware
from desaconnect.api.routes.admin_debug import router as admin_debug_router
from desaconnect.api.routes.admin_roster import router as admin_roster_router
from desaconnect.api.routes.admin_session import router as admin_session_router
from desaconnect.api.routes.admin_stats import router as admin_stats_router
from desaconnect.api.routes.admin_submissions import (
    router as admin_submissions_router,
)
from desaconnect.api.routes.health import router as health_router
from desaconnect.api.routes.metrics import router as metrics_router
from desaconnect.api.routes.submissions import router as submissions_router
from desaconnect.bootstrap.database import close_database_engine
from desaconnect.bootstrap.logging import configure_structlog
from desaconnect.bootstrap.settings import get_settings


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Load settings and configure logging before serving.

    A ConfigurationError here is fatal: the app refuses to start without
    its store credentials.
    """
    settings = get_settings()
    configure_structlog(settings.environment)
    log = structlog.get_logger().bind(component="api")
    if settings.auth.session_secret_is_fallback:
        log.warning("admin_session_secret_fallback")
    log.info(
        "application_started",
        environment=settings.environment,
        store_backend=settings.store.backend,
        transactional_removal=settings.store.database_url is not None,
    )
    yield
    await close_database_engine()
    log.info("application_stopped")


def create_app() -> FastAPI:
    """Build the FastAPI application with all routers and middleware."""
    app = FastAPI(
        title="DesaConnect API",
        description="Village complaint and aspiration portal",
        version=__version__,
        lifespan=lifespan,
    )
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(LoggingMiddleware)

    app.include_router(health_router)
    app.include_router(metrics_router)
    app.include_router(submissions_router)
    app.include_router(admin_session_router)
    app.include_router(admin_submissions_router)
    app.include_router(admin_stats_router)
    app.include_router(admin_roster_router)
    app.include_router(admin_debug_router)
    return app


app = create_app()
