"""PostgreSQL connection settings for the object store.

Supports both a single override string and individual component fields,
mirroring the libpq environment variables:

1. Override: PGCONNSTRING="host=db port=5432 dbname=objects user=app password=..."
   (keyword/value form or a postgresql:// URI)
2. Components: PGHOST, PGPORT, PGDATABASE, PGUSER, PGPASSWORD

If the override string is set it wins over every component. It is still parsed
so that the component fields describe where the pool actually connects.
"""

from __future__ import annotations

from typing import Any

import psycopg
from psycopg.conninfo import conninfo_to_dict, make_conninfo
from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PostgresSettings(BaseSettings):
    """PostgreSQL connection and pool settings.

    Environment variables use the PG prefix (PGHOST, PGPORT, PGPOOL_MAX_SIZE...).
    """

    # ─────────────────────────────────────────────────────
    # Optional override string
    # ─────────────────────────────────────────────────────
    connstring: str | None = Field(
        default=None,
        description=(
            "Complete libpq connection string or URI. "
            "When set, it overrides every component field."
        ),
    )

    # ─────────────────────────────────────────────────────
    # Connection Parameters (components)
    # ─────────────────────────────────────────────────────
    host: str = Field(
        default="localhost",
        min_length=1,
        max_length=255,
        description="PostgreSQL server hostname, IP address or socket directory.",
    )
    port: int = Field(
        default=5432,
        ge=1,
        le=65535,
        description="PostgreSQL server port.",
    )
    database: str = Field(
        default="postgres",
        min_length=1,
        max_length=100,
        description="Database name.",
    )
    user: str = Field(
        default="postgres",
        min_length=1,
        max_length=100,
        description="Database username.",
    )
    password: SecretStr = Field(
        default=SecretStr("postgres"),
        description="Database password.",
    )
    application_name: str = Field(
        default="pgs3",
        min_length=1,
        max_length=63,
        description="Application name reported to PostgreSQL (visible in pg_stat_activity).",
    )
    connect_timeout: int = Field(
        default=5,
        ge=1,
        le=60,
        description="Connection timeout in seconds.",
    )

    # ─────────────────────────────────────────────────────
    # Object table location
    # ─────────────────────────────────────────────────────
    schema_name: str = Field(
        default="s3",
        pattern=r"^[A-Za-z_][A-Za-z0-9_]*$",
        max_length=63,
        description="Schema that holds the objects table.",
    )

    # ─────────────────────────────────────────────────────
    # psycopg3 Native Pool Settings
    # ─────────────────────────────────────────────────────
    pool_min_size: int = Field(
        default=1,
        ge=0,
        le=100,
        description="psycopg_pool minimum pool size.",
    )
    pool_max_size: int = Field(
        default=10,
        ge=1,
        le=100,
        description="psycopg_pool maximum pool size.",
    )
    pool_max_idle: float = Field(
        default=600.0,
        ge=1.0,
        description="Seconds a connection may stay idle in the pool before it is closed.",
    )
    pool_timeout: float = Field(
        default=30.0,
        ge=0.1,
        le=300.0,
        description="psycopg_pool acquire timeout in seconds.",
    )
    startup_require_db: bool = Field(
        default=True,
        description=(
            "If True, the HTTP server refuses to start while the database is unreachable. "
            "If False, it starts and reports connection errors per request."
        ),
    )

    model_config = SettingsConfigDict(
        env_prefix="PG",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    # ─────────────────────────────────────────────────────
    # Validators
    # ─────────────────────────────────────────────────────
    @model_validator(mode="after")
    def _apply_connstring(self) -> PostgresSettings:
        """Populate connection components from the override string if provided.

        Uses object.__setattr__ because the model is frozen.
        """
        if not self.connstring:
            return self

        try:
            params = conninfo_to_dict(self.connstring)
        except psycopg.ProgrammingError as e:
            raise ValueError(f"Invalid PostgreSQL connection string: {e}") from e

        if params.get("host"):
            object.__setattr__(self, "host", str(params["host"]))
        if params.get("port"):
            object.__setattr__(self, "port", int(params["port"]))
        if params.get("dbname"):
            object.__setattr__(self, "database", str(params["dbname"]))
        if params.get("user"):
            object.__setattr__(self, "user", str(params["user"]))
        if params.get("password"):
            object.__setattr__(self, "password", SecretStr(str(params["password"])))

        return self

    # ─────────────────────────────────────────────────────
    # Computed Properties
    # ─────────────────────────────────────────────────────
    @property
    def conninfo(self) -> str:
        """Connection string handed to psycopg.

        The override string is passed through verbatim; otherwise a keyword/value
        string is assembled from the component fields.
        """
        if self.connstring:
            return self.connstring

        return make_conninfo(
            host=self.host,
            port=self.port,
            dbname=self.database,
            user=self.user,
            password=self.password.get_secret_value(),
            application_name=self.application_name,
            connect_timeout=self.connect_timeout,
        )

    @property
    def safe_description(self) -> str:
        """Connection target without credentials, for logs and CLI output."""
        return f"{self.user}@{self.host}:{self.port}/{self.database}"

    def with_connstring(self, connstring: str | None) -> PostgresSettings:
        """Return a copy that connects through ``connstring`` instead.

        Args:
            connstring: Override string, or None to keep the current settings.
        """
        if not connstring:
            return self
        data: dict[str, Any] = self.model_dump()
        data["connstring"] = connstring
        data["password"] = self.password.get_secret_value()
        return PostgresSettings(**data)
