"""Custom exception classes for the gateway and its store."""

from __future__ import annotations

from typing import Any

from pgs3.core.enums import GatewayStatus


class GatewayError(Exception):
    """Base gateway exception.

    Every failure raised below the transport layer derives from this class and
    carries the :class:`GatewayStatus` it should be reported as. The gateway
    turns these into ``GatewayResult`` values; transports only render them.

    Attributes:
        status: Outcome reported to the transport.
        detail: Human-readable error message.
        extra: Additional context-specific information about the error.

    Example:
            raise GatewayError(
            detail="Failed to query objects",
            extra={"operation": "list"},
        )
    """

    status: GatewayStatus = GatewayStatus.EXECUTION

    def __init__(self, detail: str, extra: dict[str, Any] | None = None) -> None:
        """Initialize gateway exception.

        Args:
            detail: Human-readable error message.
            extra: Additional context about the error.
        """
        self.detail = detail
        self.extra = extra or {}
        super().__init__(detail)

    @property
    def http_status(self) -> int:
        """HTTP status code for this error."""
        return self.status.http_status


class StoreConnectionError(GatewayError):
    """Raised when the relational backend is unreachable or rejects the login."""

    status = GatewayStatus.CONNECTION


class StoreExecutionError(GatewayError):
    """Raised when a statement against the relational backend fails."""

    status = GatewayStatus.EXECUTION


class ObjectNotFoundError(GatewayError):
    """Raised when a requested key does not exist.

    Example:
            raise ObjectNotFoundError(
            "Object not found",
            extra={"key": "reports/2024.pdf"},
        )
    """

    status = GatewayStatus.NOT_FOUND

    def __init__(
        self,
        detail: str = "Object not found",
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(detail, extra)


class BucketNotFoundError(GatewayError):
    """Raised when a bucket other than the served one is addressed."""

    status = GatewayStatus.NOT_FOUND

    def __init__(
        self,
        detail: str = "Bucket not found",
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(detail, extra)


class AccessDeniedError(GatewayError):
    """Reserved for permission failures. Nothing raises it yet."""

    status = GatewayStatus.PERMISSION_DENIED


class InvalidInputError(GatewayError):
    """Raised when a required argument is missing or empty."""

    status = GatewayStatus.INVALID_INPUT


class UploadTooLargeError(InvalidInputError):
    """Raised when an upload grows past the configured size cap.

    The HTTP binding answers these with ``413 Payload Too Large`` before the
    gateway is ever involved.

    Attributes:
        max_size: The cap in bytes that was exceeded.
    """

    def __init__(self, max_size: int, received: int | None = None) -> None:
        """Initialize upload size error.

        Args:
            max_size: Maximum accepted upload size in bytes.
            received: Number of bytes received (or announced) so far.
        """
        self.max_size = max_size
        self.received = received
        if received is None:
            detail = f"Upload exceeds maximum {max_size} bytes"
        else:
            detail = f"Upload size {received} exceeds maximum {max_size} bytes"
        super().__init__(detail, extra={"max_size": max_size, "received": received})
