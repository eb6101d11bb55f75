"""Application lifespan management.

Startup:
1. Logging (no-op when an entry point already configured it)
2. PostgreSQL pool, object store and gateway

Shutdown runs in reverse: the pool is closed when the lifespan exits.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from pgs3.features.objects.gateway import ObjectGateway
from pgs3.features.objects.store import ObjectStore
from pgs3.infra.database.psycopg_pool import open_pool
from pgs3.infra.logging.config import setup_logging

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI

    from pgs3.core.settings import AppSettings, PostgresSettings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Own the connection pool for the lifetime of the server.

    Settings are read from ``app.state`` where :func:`create_app` put them.
    With ``PGSTARTUP_REQUIRE_DB`` enabled, startup fails if the pool cannot
    reach PostgreSQL within the pool timeout.
    """
    setup_logging()

    app_settings: AppSettings = app.state.app_settings
    db_settings: PostgresSettings = app.state.db_settings

    logger.info(
        "Starting %s",
        app_settings.title,
        extra={"version": app_settings.version, "database": db_settings.safe_description},
    )

    async with open_pool(db_settings, wait=db_settings.startup_require_db) as pool:
        app.state.gateway = ObjectGateway(ObjectStore(pool, db_settings.schema_name))
        try:
            yield
        finally:
            app.state.gateway = None
            logger.info("Stopping %s", app_settings.title)
