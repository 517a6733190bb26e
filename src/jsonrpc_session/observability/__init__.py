"""Observability module for jsonrpc-session.

Structured logging via structlog, with JSON output for production and
colored console output for development.

Example:
    >>> from jsonrpc_session.observability import bound_context, get_logger
    >>>
    >>> logger = get_logger(__name__)
    >>> with bound_context(method="ws.getTime"):
    ...     logger.info("jsonrpc_session.session.send", request_id=0)
"""

from jsonrpc_session.observability.logging import (
    bound_context,
    configure_logging,
    get_logger,
    is_debug_mode,
    sanitize_for_logging,
)

__all__ = [
    "bound_context",
    "configure_logging",
    "get_logger",
    "is_debug_mode",
    "sanitize_for_logging",
]
