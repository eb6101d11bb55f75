"""Object gateway: S3-like semantics over the object store.

The gateway validates bucket and key arguments, drives the store, and shapes
every outcome into a :class:`GatewayResult`. It never raises for expected
failures; transports only render the result they get back.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Protocol

from pgs3.core.enums import GatewayStatus
from pgs3.core.exceptions import BucketNotFoundError, GatewayError, InvalidInputError

from .etag import compute_etag
from .schemas import (
    BUCKET_CREATION_DATE,
    DEFAULT_CONTENT_TYPE,
    PUBLIC_BUCKET,
    BucketEntry,
    GatewayResult,
    ObjectEntry,
    PutObjectResponse,
    encode_bucket_listing,
    encode_object_listing,
)
from .store import ObjectRecord, StoredObject

logger = logging.getLogger(__name__)

EMPTY_OBJECT = b"{}"


class ObjectStoreProtocol(Protocol):
    """What the gateway needs from a store."""

    async def list_all(self) -> list[ObjectRecord]: ...

    async def get(self, path: str) -> StoredObject: ...

    async def put(self, path: str, content: bytes, content_type: str) -> datetime: ...

    async def delete(self, path: str) -> bool: ...


def _check_bucket(bucket: str) -> None:
    if bucket != PUBLIC_BUCKET:
        raise BucketNotFoundError(extra={"bucket": bucket})


def _check_key(key: str) -> None:
    if not key:
        raise InvalidInputError("Object key is required")


class ObjectGateway:
    """Bucket/object operations for the single ``public`` bucket.

    Args:
        store: Store adapter the gateway owns for its lifetime.
    """

    def __init__(self, store: ObjectStoreProtocol) -> None:
        self.store = store

    def _failed(self, operation: str, exc: GatewayError, **context: object) -> GatewayResult:
        level = logging.INFO if exc.status is GatewayStatus.NOT_FOUND else logging.WARNING
        logger.log(
            level,
            "Gateway %s failed: %s",
            operation,
            exc.detail,
            extra={"operation": operation, "status": str(exc.status), **context},
        )
        return GatewayResult.from_error(exc)

    def _out_of_memory(self, operation: str, **context: object) -> GatewayResult:
        logger.error(
            "Gateway %s ran out of memory",
            operation,
            extra={"operation": operation, **context},
        )
        return GatewayResult.failure(GatewayStatus.OUT_OF_MEMORY, "Out of memory")

    async def list_buckets(self) -> GatewayResult:
        """List buckets. Always the single ``public`` bucket."""
        entries = [BucketEntry(name=PUBLIC_BUCKET, creation_date=BUCKET_CREATION_DATE)]
        return GatewayResult.success(encode_bucket_listing(entries))

    async def list_objects(self, bucket: str, prefix: str | None = None) -> GatewayResult:
        """List objects in ``bucket`` ordered by key.

        Args:
            bucket: Must be ``public``.
            prefix: Keep only keys starting with this string. None or empty
                keeps everything.
        """
        try:
            _check_bucket(bucket)
            records = await self.store.list_all()
            entries = [
                ObjectEntry(key=r.path, size=r.size, last_modified=r.last_modified)
                for r in records
                if not prefix or r.path.startswith(prefix)
            ]
            payload = encode_object_listing(entries)
        except GatewayError as e:
            return self._failed("list_objects", e, bucket=bucket, prefix=prefix)
        except MemoryError:
            return self._out_of_memory("list_objects", bucket=bucket)

        logger.debug(
            "Listed objects",
            extra={"bucket": bucket, "prefix": prefix, "count": len(entries)},
        )
        return GatewayResult.success(payload)

    async def get_object(self, bucket: str, key: str) -> GatewayResult:
        """Return the stored bytes of ``key`` with their content type."""
        try:
            _check_bucket(bucket)
            _check_key(key)
            stored = await self.store.get(key)
        except GatewayError as e:
            return self._failed("get_object", e, bucket=bucket, key=key)
        except MemoryError:
            return self._out_of_memory("get_object", bucket=bucket, key=key)

        return GatewayResult.success(stored.content, content_type=stored.content_type)

    async def put_object(
        self,
        bucket: str,
        key: str,
        content: bytes,
        content_type: str | None = None,
    ) -> GatewayResult:
        """Create or replace ``key``.

        Args:
            bucket: Must be ``public``.
            key: Object key, stored verbatim.
            content: Object body; must not be empty.
            content_type: Declared type. Defaults to ``application/octet-stream``.

        Returns:
            On success a JSON ``{"ETag": ..., "LastModified": ...}`` payload.
        """
        if not bucket or not key or not content:
            return self._failed(
                "put_object",
                InvalidInputError("Bucket name, key, and data are required"),
                bucket=bucket,
                key=key,
            )

        try:
            _check_bucket(bucket)
            # Hashing large bodies would otherwise stall the event loop
            etag = await asyncio.to_thread(compute_etag, content)
            last_modified = await self.store.put(key, content, content_type or DEFAULT_CONTENT_TYPE)
            payload = PutObjectResponse(etag=etag, last_modified=last_modified).model_dump_json(
                by_alias=True
            )
        except GatewayError as e:
            return self._failed("put_object", e, bucket=bucket, key=key)
        except MemoryError:
            return self._out_of_memory("put_object", bucket=bucket, key=key, size=len(content))

        logger.info(
            "Stored object",
            extra={"bucket": bucket, "key": key, "size": len(content), "etag": etag},
        )
        return GatewayResult.success(payload.encode())

    async def delete_object(self, bucket: str, key: str) -> GatewayResult:
        """Delete ``key``. Deleting a missing key also succeeds."""
        try:
            _check_bucket(bucket)
            _check_key(key)
            removed = await self.store.delete(key)
        except GatewayError as e:
            return self._failed("delete_object", e, bucket=bucket, key=key)

        if removed:
            logger.info("Deleted object", extra={"bucket": bucket, "key": key})
        else:
            logger.debug("Delete of missing object", extra={"bucket": bucket, "key": key})
        return GatewayResult.success(EMPTY_OBJECT)
