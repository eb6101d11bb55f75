"""Logging infrastructure.

Provides structured logging with:
- JSONL or plain text output
- Automatic context injection (request_id, method, path)
- QueueHandler + QueueListener for non-blocking I/O

Basic usage:
    from pgs3.infra.logging import set_log_context, setup_logging
    import logging

    setup_logging()
    logger = logging.getLogger(__name__)

    set_log_context(request_id="abc-123")
    logger.info("Processing request")  # Automatically includes request_id
"""

from pgs3.infra.logging.config import (
    complete,
    configure_logging,
    setup_logging,
    shutdown,
)
from pgs3.infra.logging.context import (
    ContextInjectingFilter,
    clear_log_context,
    get_log_context,
    set_log_context,
)
from pgs3.infra.logging.formatters import JSONFormatter

__all__ = [
    "ContextInjectingFilter",
    "JSONFormatter",
    "clear_log_context",
    "complete",
    "configure_logging",
    "get_log_context",
    "set_log_context",
    "setup_logging",
    "shutdown",
]
