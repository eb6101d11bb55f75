"""Pytest configuration and shared fixtures.

Organization:
    - Environment Fixtures: isolate settings from the developer's environment
    - Gateway Fixtures: in-memory store and gateway
    - Application Fixtures: FastAPI app and HTTP client wired to the gateway
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from pgs3.app.main import create_app
from pgs3.core.settings import AppSettings, PostgresSettings, clear_all_caches
from pgs3.features.objects.dependencies import get_gateway
from pgs3.features.objects.gateway import ObjectGateway
from tests.utils import InMemoryObjectStore

_SETTINGS_PREFIXES = ("PG", "APP_", "LOG_")


# ============================================================================
# Environment Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Drop PG*/APP_*/LOG_* variables and reset the settings caches.

    Keeps a developer's libpq environment from leaking into assertions about
    defaults.
    """
    for name in list(os.environ):
        if name.upper().startswith(_SETTINGS_PREFIXES):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(os.path.dirname(__file__))
    clear_all_caches()
    yield
    clear_all_caches()


# ============================================================================
# Gateway Fixtures
# ============================================================================


@pytest.fixture
def store() -> InMemoryObjectStore:
    """Empty in-memory object store."""
    return InMemoryObjectStore()


@pytest.fixture
def gateway(store) -> ObjectGateway:
    """Gateway over the in-memory store."""
    return ObjectGateway(store)


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest.fixture
def app_settings() -> AppSettings:
    """HTTP settings with a small upload cap so limits are cheap to hit."""
    return AppSettings(max_upload_bytes=1024)


@pytest.fixture
def app(app_settings, gateway):
    """FastAPI application with the gateway dependency overridden.

    ASGITransport does not run the lifespan, so no pool is ever opened.
    """
    application = create_app(app_settings=app_settings, db_settings=PostgresSettings())
    application.dependency_overrides[get_gateway] = lambda: gateway
    return application


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client for the application."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
