"""Request size limit middleware."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pgs3.core.exceptions import UploadTooLargeError

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Receive, Scope, Send

logger = logging.getLogger(__name__)


async def send_payload_too_large(send: Send, exc: UploadTooLargeError) -> None:
    """Write a plain-text ``413 Payload Too Large`` response."""
    body = exc.detail.encode()
    await send(
        {
            "type": "http.response.start",
            "status": 413,
            "headers": [
                (b"content-type", b"text/plain; charset=utf-8"),
                (b"content-length", str(len(body)).encode()),
            ],
        }
    )
    await send({"type": "http.response.body", "body": body})


class RequestSizeLimitMiddleware:
    """Reject requests whose announced size exceeds the upload cap.

    Pure ASGI middleware. Only the ``Content-Length`` header is inspected, so
    the body is never read for rejected requests. Chunked bodies without a
    length are bounded later by the upload buffer.
    """

    def __init__(self, app: ASGIApp, max_size: int) -> None:
        """Initialize middleware.

        Args:
            app: ASGI application.
            max_size: Maximum request body size in bytes.
        """
        self.app = app
        self.max_size = max_size

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        for header_name, header_value in scope.get("headers", []):
            if header_name == b"content-length":
                try:
                    content_length = int(header_value.decode())
                except (ValueError, UnicodeDecodeError):
                    # Malformed header; the server rejects or ignores it
                    break
                if content_length > self.max_size:
                    logger.warning(
                        "Rejected oversized request",
                        extra={"content_length": content_length, "max_size": self.max_size},
                    )
                    await send_payload_too_large(
                        send, UploadTooLargeError(self.max_size, content_length)
                    )
                    return
                break

        await self.app(scope, receive, send)
