"""Context management for structured logging.

Request-scoped fields (request id, method, path) are kept in a ContextVar and
copied onto every LogRecord by :class:`ContextInjectingFilter`, so handlers
and formatters see them without any change to the logging calls.

Each asyncio task gets its own copy of the context, which keeps concurrent
requests from leaking fields into each other's records.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any

_log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})


def set_log_context(**kwargs: Any) -> None:
    """Add fields to the logging context of the current task.

    Example:
        ```python
        set_log_context(request_id="abc-123", path="/public/a.txt")
        logger.info("Fetching object")  # record carries request_id and path
        ```
    """
    current = _log_context.get().copy()
    current.update(kwargs)
    _log_context.set(current)


def get_log_context() -> dict[str, Any]:
    """Return a copy of the current logging context."""
    return _log_context.get().copy()


def clear_log_context() -> None:
    """Drop every field from the current logging context."""
    _log_context.set({})


class ContextInjectingFilter(logging.Filter):
    """Logging filter that copies the current context onto each record.

    Attached to the root queue handler by ``configure_logging`` so records from
    every logger in the process pass through it. Existing record attributes
    are never overwritten.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _log_context.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True
