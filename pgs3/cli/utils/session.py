"""Gateway construction for one-shot CLI commands."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from pgs3.core.settings import PostgresSettings
from pgs3.features.objects.gateway import ObjectGateway
from pgs3.features.objects.store import ObjectStore
from pgs3.infra.database.psycopg_pool import open_pool


def session_timeout(db_settings: PostgresSettings) -> float:
    """Acquire timeout for a single command: at most ``connect_timeout``."""
    return min(db_settings.pool_timeout, float(db_settings.connect_timeout))


@asynccontextmanager
async def gateway_session(db_settings: PostgresSettings) -> AsyncIterator[ObjectGateway]:
    """Open a pool, yield a gateway over it, close the pool on exit.

    The pool opens without waiting for connections, so an unreachable server
    surfaces as a CONNECTION result from the first gateway call, after
    :func:`session_timeout` seconds rather than the server's pool timeout.
    """
    async with open_pool(db_settings, wait=False, timeout=session_timeout(db_settings)) as pool:
        yield ObjectGateway(ObjectStore(pool, db_settings.schema_name))
