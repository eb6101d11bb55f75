"""Enumerations shared across the gateway and its transports."""

from __future__ import annotations

from enum import StrEnum


class GatewayStatus(StrEnum):
    """Closed set of outcomes a gateway operation can report.

    Transports render these into exit codes or HTTP status codes; they never
    invent statuses of their own.
    """

    SUCCESS = "success"
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    INVALID_INPUT = "invalid_input"
    EXECUTION = "execution"
    CONNECTION = "connection"
    OUT_OF_MEMORY = "out_of_memory"

    @property
    def http_status(self) -> int:
        """HTTP status code used by the HTTP binding for this outcome."""
        return _HTTP_STATUS.get(self, 500)


_HTTP_STATUS: dict[GatewayStatus, int] = {
    GatewayStatus.SUCCESS: 200,
    GatewayStatus.NOT_FOUND: 404,
    GatewayStatus.PERMISSION_DENIED: 403,
}
