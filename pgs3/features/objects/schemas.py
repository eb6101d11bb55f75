"""Wire schemas and the gateway result envelope.

The JSON shapes follow S3's capitalised field names (``Key``, ``Size``,
``LastModified``...). Models are populated by Python field name and serialized
by alias so the wire format stays exact.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_serializer

from pgs3.core.enums import GatewayStatus
from pgs3.core.exceptions import GatewayError

PUBLIC_BUCKET = "public"
DEFAULT_CONTENT_TYPE = "application/octet-stream"
JSON_CONTENT_TYPE = "application/json"

# Buckets are not stored; the served bucket reports a fixed creation date
BUCKET_CREATION_DATE = datetime(2023, 1, 1, tzinfo=UTC)


def format_timestamp(value: datetime) -> str:
    """Render a timestamp as ``YYYY-MM-DDTHH:MM:SS.mmmZ``.

    Naive values are taken to be UTC (the pool pins sessions to UTC).
    Sub-millisecond precision is truncated, not rounded.

    Example:
        >>> format_timestamp(datetime(2024, 5, 1, 12, 30, 0, 123999))
        '2024-05-01T12:30:00.123Z'
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    value = value.astimezone(UTC)
    return f"{value:%Y-%m-%dT%H:%M:%S}.{value.microsecond // 1000:03d}Z"


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class BucketEntry(_WireModel):
    """One element of the bucket listing."""

    name: str = Field(alias="Name")
    creation_date: datetime = Field(alias="CreationDate")

    @field_serializer("creation_date")
    def _serialize_creation_date(self, value: datetime) -> str:
        return format_timestamp(value)


class ObjectEntry(_WireModel):
    """One element of an object listing."""

    key: str = Field(alias="Key")
    size: int = Field(alias="Size", ge=0)
    last_modified: datetime = Field(alias="LastModified")

    @field_serializer("last_modified")
    def _serialize_last_modified(self, value: datetime) -> str:
        return format_timestamp(value)


class PutObjectResponse(_WireModel):
    """Body returned after a successful upload."""

    etag: str = Field(alias="ETag")
    last_modified: datetime = Field(alias="LastModified")

    @field_serializer("last_modified")
    def _serialize_last_modified(self, value: datetime) -> str:
        return format_timestamp(value)


_bucket_list_adapter = TypeAdapter(list[BucketEntry])
_object_list_adapter = TypeAdapter(list[ObjectEntry])


def encode_bucket_listing(entries: list[BucketEntry]) -> bytes:
    """Serialize bucket entries to a compact JSON array."""
    return _bucket_list_adapter.dump_json(entries, by_alias=True)


def encode_object_listing(entries: list[ObjectEntry]) -> bytes:
    """Serialize object entries to a compact JSON array (``[]`` when empty)."""
    return _object_list_adapter.dump_json(entries, by_alias=True)


def decode_object_listing(payload: bytes | str) -> list[ObjectEntry]:
    """Parse a listing payload produced by :func:`encode_object_listing`.

    Raises:
        pydantic.ValidationError: If the payload is not a valid listing.
    """
    return _object_list_adapter.validate_json(payload)


@dataclass(slots=True)
class GatewayResult:
    """Uniform return value of every gateway operation.

    Exactly one transport receives each result and renders it; results are
    never cached or shared.

    Attributes:
        status: Outcome of the operation.
        data: Payload bytes on success (JSON or raw object content).
        content_type: Declared type of ``data``.
        error_message: Human-readable failure description.
    """

    status: GatewayStatus = GatewayStatus.SUCCESS
    data: bytes | None = None
    content_type: str | None = None
    error_message: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is GatewayStatus.SUCCESS

    @classmethod
    def success(cls, data: bytes, content_type: str = JSON_CONTENT_TYPE) -> GatewayResult:
        return cls(status=GatewayStatus.SUCCESS, data=data, content_type=content_type)

    @classmethod
    def failure(cls, status: GatewayStatus, message: str) -> GatewayResult:
        return cls(status=status, error_message=message)

    @classmethod
    def from_error(cls, exc: GatewayError) -> GatewayResult:
        return cls.failure(exc.status, exc.detail)

    def json(self) -> Any:
        """Decode a JSON payload. Only meaningful for JSON results."""
        if self.data is None:
            return None
        return json.loads(self.data)
