"""Pydantic Settings v2 configuration.

Settings are split by concern and read from the environment (or a local .env):

- ``PostgresSettings`` (PG*): connection string or components, pool sizing
- ``AppSettings`` (APP_*): HTTP bind address and upload size cap
- ``LoggingSettings`` (LOG_*): levels, JSON output, optional log file

Import settings via the cached loaders:
    from pgs3.core.settings import get_db_settings

Configuration precedence (highest to lowest):
    1. init kwargs (testing/overrides)
    2. Environment variables
    3. .env file
"""

from __future__ import annotations

from .app import AppSettings
from .loader import (
    clear_all_caches,
    get_app_settings,
    get_db_settings,
    get_logging_settings,
)
from .logs import LoggingSettings
from .postgres import PostgresSettings

__all__ = [
    "AppSettings",
    "LoggingSettings",
    "PostgresSettings",
    "clear_all_caches",
    "get_app_settings",
    "get_db_settings",
    "get_logging_settings",
]
