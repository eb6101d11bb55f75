"""Unit tests for CLI gateway sessions."""

from __future__ import annotations

from contextlib import asynccontextmanager
from unittest.mock import MagicMock

import pytest

from pgs3.cli.utils.session import gateway_session, session_timeout
from pgs3.core.settings import PostgresSettings
from pgs3.features.objects.gateway import ObjectGateway


@pytest.mark.unit
class TestSessionTimeout:
    def test_capped_by_connect_timeout(self):
        settings = PostgresSettings(pool_timeout=30.0, connect_timeout=5)

        assert session_timeout(settings) == 5.0

    def test_shorter_pool_timeout_wins(self):
        settings = PostgresSettings(pool_timeout=2.0, connect_timeout=5)

        assert session_timeout(settings) == 2.0


@pytest.mark.unit
class TestGatewaySession:
    @pytest.mark.asyncio
    async def test_opens_pool_with_short_timeout(self, monkeypatch):
        pool = MagicMock()
        calls = []

        @asynccontextmanager
        async def fake_open_pool(db_settings, *, wait=False, timeout=None):
            calls.append((wait, timeout))
            yield pool

        monkeypatch.setattr("pgs3.cli.utils.session.open_pool", fake_open_pool)
        settings = PostgresSettings(pool_timeout=30.0, connect_timeout=3, schema_name="objs")

        async with gateway_session(settings) as gateway:
            assert isinstance(gateway, ObjectGateway)
            assert gateway.store.schema_name == "objs"

        assert calls == [(False, 3.0)]
