"""HTTP binding settings."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_HTTP_PORT = 9000
DEFAULT_MAX_UPLOAD_BYTES = 64 * 1024 * 1024


class AppSettings(BaseSettings):
    """HTTP gateway settings.

    Environment variables use APP_ prefix.
    Example: APP_PORT=9000, APP_MAX_UPLOAD_BYTES=1048576
    """

    service_name: str = Field(
        default="pgs3",
        min_length=1,
        max_length=100,
        pattern=r"^[a-z0-9]+(-[a-z0-9]+)*$",
        description="Service name for logging (lowercase, hyphens allowed)",
    )
    title: str = Field(
        default="pgs3 Object Gateway",
        min_length=1,
        max_length=200,
        description="API title reported by the application",
    )
    version: str = Field(
        default="0.1.0",
        pattern=r"^\d+\.\d+\.\d+(-[a-zA-Z0-9]+)?$",
        description="API version (semver format)",
    )
    debug: bool = Field(default=False, description="Enable FastAPI debug mode")

    host: str = Field(
        default="0.0.0.0",
        min_length=1,
        description="Interface the HTTP server binds to",
    )
    port: int = Field(
        default=DEFAULT_HTTP_PORT,
        ge=1,
        le=65535,
        description="Port the HTTP server binds to",
    )
    max_upload_bytes: int = Field(
        default=DEFAULT_MAX_UPLOAD_BYTES,
        ge=1,
        le=1024 * 1024 * 1024,
        description=(
            "Largest accepted object body in bytes. PostgreSQL caps a bytea value "
            "at 1 GiB, so larger values are rejected."
        ),
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )
