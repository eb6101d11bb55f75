"""Test doubles shared across the suite."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from pgs3.core.exceptions import GatewayError, ObjectNotFoundError
from pgs3.features.objects.store import ObjectRecord, StoredObject


class InMemoryObjectStore:
    """Dict-backed stand-in for :class:`pgs3.features.objects.store.ObjectStore`.

    Timestamps advance by one second per write so ordering assertions are
    deterministic. Set ``fail_with`` to make every call raise that error.
    """

    def __init__(self, start: datetime | None = None) -> None:
        self.objects: dict[str, tuple[bytes, str, datetime]] = {}
        self.clock = start or datetime(2024, 1, 1, tzinfo=UTC)
        self.fail_with: GatewayError | None = None
        self.calls: list[str] = []

    def _enter(self, operation: str) -> None:
        self.calls.append(operation)
        if self.fail_with is not None:
            raise self.fail_with

    async def list_all(self) -> list[ObjectRecord]:
        self._enter("list_all")
        return [
            ObjectRecord(path=path, size=len(content), last_modified=modified)
            for path, (content, _, modified) in sorted(
                self.objects.items(), key=lambda item: item[0].encode()
            )
        ]

    async def get(self, path: str) -> StoredObject:
        self._enter("get")
        if path not in self.objects:
            raise ObjectNotFoundError(extra={"key": path})
        content, content_type, _ = self.objects[path]
        return StoredObject(content=content, content_type=content_type)

    async def put(self, path: str, content: bytes, content_type: str) -> datetime:
        self._enter("put")
        self.clock += timedelta(seconds=1)
        self.objects[path] = (bytes(content), content_type, self.clock)
        return self.clock

    async def delete(self, path: str) -> bool:
        self._enter("delete")
        return self.objects.pop(path, None) is not None
