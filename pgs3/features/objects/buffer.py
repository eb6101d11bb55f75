"""Bounded accumulation buffer for upload bodies."""

from __future__ import annotations

from pgs3.core.exceptions import UploadTooLargeError


class UploadBuffer:
    """Growable byte buffer with a hard size cap.

    Chunks are appended as they arrive (HTTP body chunks or stdin reads).
    Exceeding ``max_size`` raises :class:`UploadTooLargeError` and leaves the
    buffer holding only the bytes accepted so far. ``clear()`` makes the
    buffer reusable for another upload.

    Example:
        ```python
        buffer = UploadBuffer(max_size=1024)
        async for chunk in request.stream():
            buffer.extend(chunk)
        payload = buffer.getvalue()
        ```
    """

    __slots__ = ("_data", "max_size")

    def __init__(self, max_size: int) -> None:
        if max_size < 1:
            raise ValueError("max_size must be positive")
        self.max_size = max_size
        self._data = bytearray()

    def __len__(self) -> int:
        return len(self._data)

    def extend(self, chunk: bytes) -> None:
        """Append ``chunk``.

        Raises:
            UploadTooLargeError: If the buffer would grow past ``max_size``.
        """
        if not chunk:
            return
        received = len(self._data) + len(chunk)
        if received > self.max_size:
            raise UploadTooLargeError(self.max_size, received)
        self._data += chunk

    def getvalue(self) -> bytes:
        """Return an immutable copy of the accumulated bytes."""
        return bytes(self._data)

    def clear(self) -> None:
        self._data.clear()
