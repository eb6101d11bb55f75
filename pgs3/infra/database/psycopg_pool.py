"""psycopg native connection pool for the object store.

The pool is the only state shared between concurrent requests. It is created
by whoever drives the gateway (the HTTP lifespan or a single CLI command) and
closed by the same owner; there is no module-level pool.

Usage:
    ```python
    from pgs3.infra.database.psycopg_pool import open_pool

    async with open_pool(get_db_settings()) as pool:
        async with pool.connection() as conn:
            async with conn.cursor() as cur:
                await cur.execute("SELECT 1")
    ```
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from psycopg import AsyncConnection
from psycopg_pool import AsyncConnectionPool

from pgs3.core.settings.postgres import PostgresSettings

logger = logging.getLogger(__name__)


def create_pool(
    db_settings: PostgresSettings,
    *,
    timeout: float | None = None,
) -> AsyncConnectionPool:
    """Build an unopened AsyncConnectionPool from settings.

    The pool is configured with:
    - min_size: Minimum number of connections to keep
    - max_size: Maximum number of connections allowed
    - max_idle: Maximum idle time before connection recycling
    - timeout: Timeout for acquiring a connection

    Args:
        db_settings: Connection and pool settings.
        timeout: Acquire timeout in seconds. Defaults to ``pool_timeout``.

    Returns:
        A pool that still has to be opened with ``await pool.open()``.
    """
    return AsyncConnectionPool(
        conninfo=db_settings.conninfo,
        min_size=db_settings.pool_min_size,
        max_size=db_settings.pool_max_size,
        max_idle=db_settings.pool_max_idle,
        timeout=db_settings.pool_timeout if timeout is None else timeout,
        configure=configure_connection,
        name=db_settings.application_name,
        open=False,
    )


async def configure_connection(conn: AsyncConnection) -> None:
    """Configure individual connections in the pool.

    Pins the session time zone to UTC so ``TIMESTAMP`` columns written with
    ``CURRENT_TIMESTAMP`` hold UTC wall-clock time.

    Args:
        conn: The connection to configure.
    """
    await conn.execute("SET timezone = 'UTC'")
    # The pool rejects connections handed back inside a transaction
    await conn.commit()


@asynccontextmanager
async def open_pool(
    db_settings: PostgresSettings,
    *,
    wait: bool = False,
    timeout: float | None = None,
) -> AsyncIterator[AsyncConnectionPool]:
    """Open a pool for the duration of the block and close it afterwards.

    Args:
        db_settings: Connection and pool settings.
        wait: Block until ``pool_min_size`` connections are established.
            Raises ``psycopg_pool.PoolTimeout`` if that does not happen
            within the acquire timeout.
        timeout: Acquire timeout in seconds. Defaults to ``pool_timeout``.

    Yields:
        The open AsyncConnectionPool.
    """
    acquire_timeout = db_settings.pool_timeout if timeout is None else timeout
    pool = create_pool(db_settings, timeout=acquire_timeout)

    logger.debug(
        "Opening psycopg connection pool",
        extra={
            "target": db_settings.safe_description,
            "min_size": db_settings.pool_min_size,
            "max_size": db_settings.pool_max_size,
        },
    )

    try:
        await pool.open(wait=wait, timeout=acquire_timeout)
        yield pool
    finally:
        logger.debug("Closing psycopg connection pool")
        await pool.close()
