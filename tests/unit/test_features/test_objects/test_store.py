"""Unit tests for ObjectStore against mocked psycopg connections."""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime

import psycopg
import pytest
from psycopg import errors
from psycopg_pool import PoolTimeout

from pgs3.core.exceptions import (
    ObjectNotFoundError,
    StoreConnectionError,
    StoreExecutionError,
)
from pgs3.features.objects.store import ObjectRecord, ObjectStore, StoredObject


class FakeCursor:
    def __init__(self) -> None:
        self.rows: list = []
        self.rowcount = 0
        self.error: Exception | None = None
        self.executed: list[tuple[str, tuple | None]] = []

    async def __aenter__(self) -> FakeCursor:
        return self

    async def __aexit__(self, *exc_info) -> bool:
        return False

    async def execute(self, query, params=None) -> None:
        self.executed.append((query.as_string(None), params))
        if self.error is not None:
            raise self.error

    async def fetchall(self) -> list:
        return list(self.rows)

    async def fetchone(self):
        return self.rows[0] if self.rows else None


class FakeConnection:
    def __init__(self) -> None:
        self.cursor_obj = FakeCursor()
        self.row_factory = None
        self.statements: list[str] = []
        self.statement_errors: list[Exception | None] = []
        self.transactions = 0

    def cursor(self, row_factory=None) -> FakeCursor:
        self.row_factory = row_factory
        return self.cursor_obj

    @asynccontextmanager
    async def transaction(self):
        self.transactions += 1
        yield

    async def execute(self, statement) -> None:
        self.statements.append(statement.as_string(None))
        if self.statement_errors:
            error = self.statement_errors.pop(0)
            if error is not None:
                raise error


class FakePool:
    def __init__(self, conn: FakeConnection) -> None:
        self.conn = conn
        self.error: Exception | None = None

    @asynccontextmanager
    async def connection(self):
        if self.error is not None:
            raise self.error
        yield self.conn


@pytest.fixture
def conn() -> FakeConnection:
    return FakeConnection()


@pytest.fixture
def pool(conn) -> FakePool:
    return FakePool(conn)


@pytest.fixture
def object_store(pool) -> ObjectStore:
    return ObjectStore(pool, schema_name="s3")


@pytest.mark.unit
class TestEnsureSchema:
    @pytest.mark.asyncio
    async def test_creates_schema_then_table(self, object_store, conn):
        await object_store.ensure_schema()

        assert len(conn.statements) == 2
        assert conn.statements[0] == 'CREATE SCHEMA IF NOT EXISTS "s3"'
        assert conn.statements[1].startswith('CREATE TABLE IF NOT EXISTS "s3"."objects"')
        assert "path TEXT PRIMARY KEY" in conn.statements[1]
        assert "content BYTEA NOT NULL" in conn.statements[1]
        assert conn.transactions == 2

    @pytest.mark.asyncio
    async def test_custom_schema_is_quoted(self, pool, conn):
        await ObjectStore(pool, schema_name="Objects_v2").ensure_schema()

        assert conn.statements[0] == 'CREATE SCHEMA IF NOT EXISTS "Objects_v2"'

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "race",
        [errors.UniqueViolation, errors.DuplicateSchema, errors.DuplicateTable, errors.DuplicateObject],
    )
    async def test_concurrent_creation_is_not_an_error(self, object_store, conn, race):
        conn.statement_errors = [race("already exists"), race("already exists")]

        await object_store.ensure_schema()

        assert len(conn.statements) == 2

    @pytest.mark.asyncio
    async def test_other_failures_raise(self, object_store, conn):
        conn.statement_errors = [errors.InsufficientPrivilege("permission denied for database")]

        with pytest.raises(StoreExecutionError) as exc_info:
            await object_store.ensure_schema()

        assert exc_info.value.detail.startswith("Failed to ensure schema")


@pytest.mark.unit
class TestListAll:
    @pytest.mark.asyncio
    async def test_orders_by_byte_collation(self, object_store, conn):
        record = ObjectRecord(path="a", size=1, last_modified=datetime(2024, 1, 1))
        conn.cursor_obj.rows = [record]

        records = await object_store.list_all()

        assert records == [record]
        (query, params), = conn.cursor_obj.executed
        assert query.endswith('FROM "s3"."objects" ORDER BY path COLLATE "C"')
        assert params is None
        assert conn.row_factory is not None

    @pytest.mark.asyncio
    async def test_bootstraps_schema_first(self, object_store, conn):
        await object_store.list_all()

        assert len(conn.statements) == 2


@pytest.mark.unit
class TestGet:
    @pytest.mark.asyncio
    async def test_returns_stored_object(self, object_store, conn):
        conn.cursor_obj.rows = [StoredObject(content=b"\x00\xff", content_type="x/y")]

        stored = await object_store.get("k")

        assert stored.content == b"\x00\xff"
        assert stored.content_type == "x/y"
        assert conn.cursor_obj.executed[0][1] == ("k",)

    @pytest.mark.asyncio
    async def test_missing_row(self, object_store):
        with pytest.raises(ObjectNotFoundError) as exc_info:
            await object_store.get("missing")

        assert exc_info.value.detail == "Object not found"


@pytest.mark.unit
class TestPut:
    @pytest.mark.asyncio
    async def test_single_statement_upsert(self, object_store, conn):
        written = datetime(2024, 3, 1, 10, 0, 0)
        conn.cursor_obj.rows = [(written,)]

        result = await object_store.put("k", b"hello", "text/plain")

        assert result == written
        (query, params), = conn.cursor_obj.executed
        assert "ON CONFLICT (path) DO UPDATE" in query
        assert "GREATEST(EXCLUDED.last_modified, o.last_modified)" in query
        assert query.endswith("RETURNING last_modified")
        assert params == ("k", b"hello", "text/plain", 5)

    @pytest.mark.asyncio
    async def test_statement_failure(self, object_store, conn):
        conn.cursor_obj.error = errors.ProgramLimitExceeded("value too large")

        with pytest.raises(StoreExecutionError) as exc_info:
            await object_store.put("k", b"x", "text/plain")

        assert exc_info.value.detail == "Failed to store object: value too large"
        assert exc_info.value.extra == {"key": "k"}


@pytest.mark.unit
class TestDelete:
    @pytest.mark.asyncio
    async def test_reports_removed_row(self, object_store, conn):
        conn.cursor_obj.rowcount = 1

        assert await object_store.delete("k") is True
        assert conn.cursor_obj.executed[0][1] == ("k",)

    @pytest.mark.asyncio
    async def test_missing_row(self, object_store, conn):
        conn.cursor_obj.rowcount = 0

        assert await object_store.delete("k") is False

    @pytest.mark.asyncio
    async def test_does_not_bootstrap_schema(self, object_store, conn):
        await object_store.delete("k")

        assert conn.statements == []

    @pytest.mark.asyncio
    async def test_missing_table_means_nothing_removed(self, object_store, conn):
        conn.cursor_obj.error = errors.UndefinedTable('relation "s3.objects" does not exist')

        assert await object_store.delete("k") is False


@pytest.mark.unit
class TestErrorTranslation:
    @pytest.mark.asyncio
    async def test_pool_timeout_is_connection_error(self, object_store, pool):
        pool.error = PoolTimeout("couldn't get a connection after 30.00 sec")

        with pytest.raises(StoreConnectionError) as exc_info:
            await object_store.list_all()

        assert exc_info.value.detail.startswith("Failed to connect to PostgreSQL")

    @pytest.mark.asyncio
    async def test_client_side_operational_error(self, object_store, pool):
        pool.error = psycopg.OperationalError("connection refused")

        with pytest.raises(StoreConnectionError):
            await object_store.delete("k")

    @pytest.mark.asyncio
    async def test_server_shutdown_is_connection_error(self, object_store, conn):
        conn.cursor_obj.error = errors.AdminShutdown("terminating connection")

        with pytest.raises(StoreConnectionError):
            await object_store.get("k")

    @pytest.mark.asyncio
    async def test_query_cancel_is_execution_error(self, object_store, conn):
        conn.cursor_obj.error = errors.QueryCanceled("canceling statement due to statement timeout")

        with pytest.raises(StoreExecutionError) as exc_info:
            await object_store.list_all()

        assert exc_info.value.detail.startswith("Failed to query objects")

    @pytest.mark.asyncio
    async def test_original_exception_is_chained(self, object_store, conn):
        cause = errors.UndefinedColumn("column does not exist")
        conn.cursor_obj.error = cause

        with pytest.raises(StoreExecutionError) as exc_info:
            await object_store.get("k")

        assert exc_info.value.__cause__ is cause
        assert exc_info.value.detail == "Failed to query object: column does not exist"
