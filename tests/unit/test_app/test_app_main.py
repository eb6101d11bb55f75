"""Unit tests for the application factory and lifespan."""

from __future__ import annotations

from contextlib import asynccontextmanager
from unittest.mock import MagicMock

import pytest

from pgs3.app.main import create_app
from pgs3.core.settings import AppSettings, PostgresSettings
from pgs3.features.objects.gateway import ObjectGateway


@pytest.mark.unit
class TestCreateApp:
    def test_uses_given_settings(self):
        app_settings = AppSettings(title="Test Gateway", max_upload_bytes=10)
        db_settings = PostgresSettings(host="db.internal")

        app = create_app(app_settings=app_settings, db_settings=db_settings)

        assert app.title == "Test Gateway"
        assert app.state.app_settings is app_settings
        assert app.state.db_settings is db_settings
        assert app.state.gateway is None
        assert app.openapi_url is None

    def test_defaults_to_environment_settings(self, monkeypatch):
        monkeypatch.setenv("APP_MAX_UPLOAD_BYTES", "2048")

        app = create_app()

        assert app.state.app_settings.max_upload_bytes == 2048


@pytest.mark.unit
class TestLifespan:
    @pytest.mark.asyncio
    async def test_builds_gateway_and_closes_pool(self, monkeypatch):
        events = []
        pool = MagicMock(name="pool")

        @asynccontextmanager
        async def fake_open_pool(db_settings, *, wait=False):
            events.append(("open", db_settings.schema_name, wait))
            yield pool
            events.append(("close",))

        monkeypatch.setattr("pgs3.app.lifespan.open_pool", fake_open_pool)
        monkeypatch.setattr("pgs3.app.lifespan.setup_logging", lambda: None)

        app = create_app(
            app_settings=AppSettings(),
            db_settings=PostgresSettings(schema_name="objects_test", startup_require_db=False),
        )

        async with app.router.lifespan_context(app):
            gateway = app.state.gateway
            assert isinstance(gateway, ObjectGateway)
            assert gateway.store.schema_name == "objects_test"
            assert events == [("open", "objects_test", False)]

        assert events[-1] == ("close",)
        assert app.state.gateway is None
