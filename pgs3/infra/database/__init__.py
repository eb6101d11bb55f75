"""Database infrastructure package.

- **Pool management**: psycopg native AsyncConnectionPool creation and lifecycle

Example:
    from pgs3.infra.database import open_pool

    async with open_pool(get_db_settings()) as pool:
        ...
"""

from .psycopg_pool import configure_connection, create_pool, open_pool

__all__ = [
    "configure_connection",
    "create_pool",
    "open_pool",
]
