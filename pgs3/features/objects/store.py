"""PostgreSQL store adapter for objects.

Translates object operations into statements against a single table,
``<schema>.objects``, in a schema dedicated to the gateway. Every connection
comes from an :class:`psycopg_pool.AsyncConnectionPool` owned by the caller;
the adapter holds no other state and never retries a failed statement.

Table layout:
    path          TEXT PRIMARY KEY
    content       BYTEA
    content_type  TEXT
    size          BIGINT
    last_modified TIMESTAMP (server time of the last write, UTC)
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime

import psycopg
from psycopg import errors, sql
from psycopg.rows import class_row
from psycopg_pool import AsyncConnectionPool, PoolClosed, PoolTimeout

from pgs3.core.exceptions import (
    GatewayError,
    ObjectNotFoundError,
    StoreConnectionError,
    StoreExecutionError,
)

logger = logging.getLogger(__name__)

TABLE_NAME = "objects"

# SQLSTATE classes that mean the server went away or refused the session
_CONNECTION_SQLSTATE_PREFIXES = ("08", "28", "57P")

# Raised when a concurrent caller created the object first
_ALREADY_EXISTS = (
    errors.DuplicateSchema,
    errors.DuplicateTable,
    errors.DuplicateObject,
    errors.UniqueViolation,
)


@dataclass(frozen=True, slots=True)
class ObjectRecord:
    """Listing row: key, stored size and last write time."""

    path: str
    size: int
    last_modified: datetime


@dataclass(frozen=True, slots=True)
class StoredObject:
    """Body and declared content type of one object."""

    content: bytes
    content_type: str


def _is_connection_failure(exc: psycopg.Error) -> bool:
    if isinstance(exc, PoolTimeout | PoolClosed):
        return True
    if not isinstance(exc, psycopg.OperationalError):
        return False
    # Client-side failures (refused, DNS, auth before startup) carry no SQLSTATE
    return exc.sqlstate is None or exc.sqlstate.startswith(_CONNECTION_SQLSTATE_PREFIXES)


class ObjectStore:
    """CRUD over the objects table.

    Args:
        pool: Open connection pool. The store never opens or closes it.
        schema_name: Schema holding the objects table.

    Example:
        ```python
        async with open_pool(get_db_settings()) as pool:
            store = ObjectStore(pool)
            await store.put("a.txt", b"hello", "text/plain")
            stored = await store.get("a.txt")
        ```
    """

    def __init__(self, pool: AsyncConnectionPool, schema_name: str = "s3") -> None:
        self._pool = pool
        self.schema_name = schema_name
        self._schema = sql.Identifier(schema_name)
        self._table = sql.Identifier(schema_name, TABLE_NAME)

    @asynccontextmanager
    async def _translate_errors(self, message: str, **context: object) -> AsyncIterator[None]:
        """Re-raise driver and pool failures as gateway errors.

        Args:
            message: Detail used for statement failures.
            **context: Extra fields attached to the log record and the error.
        """
        try:
            yield
        except GatewayError:
            raise
        except psycopg.Error as e:
            if _is_connection_failure(e):
                logger.error(
                    "PostgreSQL connection failed",
                    extra={"error": str(e), **context},
                )
                raise StoreConnectionError(
                    f"Failed to connect to PostgreSQL: {e}",
                    extra=dict(context),
                ) from e
            logger.warning(
                message,
                extra={"error": str(e), "sqlstate": e.sqlstate, **context},
            )
            raise StoreExecutionError(f"{message}: {e}", extra=dict(context)) from e

    async def ensure_schema(self) -> None:
        """Create the schema and table if they are missing.

        Each statement runs in its own transaction. Losing a creation race to a
        concurrent caller is not an error.
        """
        statements = (
            sql.SQL("CREATE SCHEMA IF NOT EXISTS {schema}").format(schema=self._schema),
            sql.SQL(
                "CREATE TABLE IF NOT EXISTS {table} ("
                " path TEXT PRIMARY KEY,"
                " content BYTEA NOT NULL,"
                " content_type TEXT NOT NULL,"
                " size BIGINT NOT NULL,"
                " last_modified TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP"
                ")"
            ).format(table=self._table),
        )

        async with self._translate_errors("Failed to ensure schema", schema=self.schema_name):
            async with self._pool.connection() as conn:
                for statement in statements:
                    try:
                        async with conn.transaction():
                            await conn.execute(statement)
                    except _ALREADY_EXISTS as e:
                        logger.debug(
                            "Schema object created concurrently",
                            extra={"schema": self.schema_name, "sqlstate": e.sqlstate},
                        )

    async def list_all(self) -> list[ObjectRecord]:
        """Return every object ordered by key in byte order."""
        await self.ensure_schema()

        query = sql.SQL(
            'SELECT path, size, last_modified FROM {table} ORDER BY path COLLATE "C"'
        ).format(table=self._table)

        async with self._translate_errors("Failed to query objects"):
            async with self._pool.connection() as conn:
                async with conn.cursor(row_factory=class_row(ObjectRecord)) as cur:
                    await cur.execute(query)
                    return await cur.fetchall()

    async def get(self, path: str) -> StoredObject:
        """Fetch one object.

        Raises:
            ObjectNotFoundError: If no row exists for ``path``.
        """
        await self.ensure_schema()

        query = sql.SQL("SELECT content, content_type FROM {table} WHERE path = %s").format(
            table=self._table
        )

        async with self._translate_errors("Failed to query object", key=path):
            async with self._pool.connection() as conn:
                async with conn.cursor(row_factory=class_row(StoredObject)) as cur:
                    await cur.execute(query, (path,))
                    row = await cur.fetchone()

        if row is None:
            raise ObjectNotFoundError(extra={"key": path})
        return row

    async def put(self, path: str, content: bytes, content_type: str) -> datetime:
        """Insert or fully replace an object.

        The write is a single upsert statement, so a failure leaves any previous
        version untouched. The stored timestamp never moves backwards for a key.

        Returns:
            The ``last_modified`` value recorded for this write.
        """
        await self.ensure_schema()

        query = sql.SQL(
            "INSERT INTO {table} AS o (path, content, content_type, size, last_modified)"
            " VALUES (%s, %s, %s, %s, CURRENT_TIMESTAMP)"
            " ON CONFLICT (path) DO UPDATE SET"
            " content = EXCLUDED.content,"
            " content_type = EXCLUDED.content_type,"
            " size = EXCLUDED.size,"
            " last_modified = GREATEST(EXCLUDED.last_modified, o.last_modified)"
            " RETURNING last_modified"
        ).format(table=self._table)

        async with self._translate_errors("Failed to store object", key=path):
            async with self._pool.connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(query, (path, content, content_type, len(content)))
                    row = await cur.fetchone()

        if row is None:
            raise StoreExecutionError("Failed to store object: no row returned", extra={"key": path})
        return row[0]

    async def delete(self, path: str) -> bool:
        """Remove an object.

        Returns:
            True if a row was deleted, False if ``path`` did not exist.
        """
        query = sql.SQL("DELETE FROM {table} WHERE path = %s").format(table=self._table)

        async with self._translate_errors("Failed to delete object", key=path):
            try:
                async with self._pool.connection() as conn:
                    async with conn.cursor() as cur:
                        await cur.execute(query, (path,))
                        return cur.rowcount > 0
            except (errors.UndefinedTable, errors.InvalidSchemaName):
                # Nothing was ever stored
                return False
