"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI

from pgs3.app.exception_handlers import configure_exception_handlers
from pgs3.app.lifespan import lifespan
from pgs3.app.middleware import RequestIDMiddleware, RequestSizeLimitMiddleware
from pgs3.core.settings import (
    AppSettings,
    PostgresSettings,
    get_app_settings,
    get_db_settings,
)
from pgs3.features.objects.router import router as objects_router


def create_app(
    app_settings: AppSettings | None = None,
    db_settings: PostgresSettings | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        app_settings: HTTP settings. Defaults to the cached environment settings.
        db_settings: Connection settings. Defaults to the cached environment settings.

    Returns:
        Configured FastAPI application. The gateway is attached by the lifespan.
    """
    app_settings = app_settings or get_app_settings()
    db_settings = db_settings or get_db_settings()

    app = FastAPI(
        title=app_settings.title,
        version=app_settings.version,
        debug=app_settings.debug,
        # Every top-level path is a bucket name
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.app_settings = app_settings
    app.state.db_settings = db_settings
    app.state.gateway = None

    configure_exception_handlers(app)

    # Last added runs first: request IDs are assigned before size checks
    app.add_middleware(RequestSizeLimitMiddleware, max_size=app_settings.max_upload_bytes)
    app.add_middleware(RequestIDMiddleware)

    app.include_router(objects_router)

    return app
