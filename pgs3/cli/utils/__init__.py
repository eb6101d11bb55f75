"""CLI utilities for running async operations and formatting output."""

from pgs3.cli.utils.async_runner import coro
from pgs3.cli.utils.formatters import error, format_bytes, info, success, warning
from pgs3.cli.utils.session import gateway_session

__all__ = [
    "coro",
    "error",
    "format_bytes",
    "gateway_session",
    "info",
    "success",
    "warning",
]
