"""Structured logging for jsonrpc-session.

Events are emitted through structlog and rendered by the standard library
``logging`` handler installed on the root logger, either as JSON lines or
as colored console output. Event names are dotted and namespaced, e.g.
``jsonrpc_session.session.response``.

A session binds ``target_url`` and ``method`` for the duration of each call
(see :func:`bound_context`), so events logged by the cookie store or the
decompressor during that call carry them too.

Environment Variables:
    JSONRPC_SESSION_LOG_FORMAT: "json" or "console" (default)
    JSONRPC_SESSION_LOG_LEVEL: Minimum level name, e.g. "DEBUG" (default "INFO")
    JSONRPC_SESSION_SERVICE_NAME: Value of the ``service`` key on every event
    JSONRPC_SESSION_DEBUG: "true"/"1" to log request params unredacted

Example:
    >>> from jsonrpc_session.observability.logging import configure_logging, get_logger
    >>>
    >>> configure_logging(log_format="json", log_level="DEBUG")
    >>> get_logger(__name__).debug("jsonrpc_session.example.ready", port=8080)
"""

import logging
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog
from structlog.typing import Processor

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "console"
DEFAULT_SERVICE_NAME = "jsonrpc-session"

ENV_LOG_FORMAT = "JSONRPC_SESSION_LOG_FORMAT"
ENV_LOG_LEVEL = "JSONRPC_SESSION_LOG_LEVEL"
ENV_SERVICE_NAME = "JSONRPC_SESSION_SERVICE_NAME"
ENV_DEBUG = "JSONRPC_SESSION_DEBUG"

REDACTED_PLACEHOLDER = "***REDACTED***"

# Case-insensitive substrings of keys whose values are never logged
_SENSITIVE_KEY_PATTERNS = (
    "password",
    "secret",
    "token",
    "key",
    "auth",
    "cookie",
)

_TRUTHY = frozenset({"1", "true", "yes", "on"})

_logging_configured = False


def _redact(value: Any) -> Any:
    if isinstance(value, dict):
        return sanitize_for_logging(value)
    if isinstance(value, list):
        return [_redact(item) if isinstance(item, dict) else item for item in value]
    return value


def sanitize_for_logging(data: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of ``data`` with the values of sensitive keys redacted.

    A key is sensitive when it contains password, secret, token, key, auth
    (which covers authorization) or cookie, ignoring case. Nested dicts,
    including dicts inside lists, are redacted the same way.

    Example:
        >>> sanitize_for_logging({"user": "alice", "api_key": "k-123"})
        {'user': 'alice', 'api_key': '***REDACTED***'}
    """
    return {
        key: REDACTED_PLACEHOLDER
        if any(pattern in key.lower() for pattern in _SENSITIVE_KEY_PATTERNS)
        else _redact(value)
        for key, value in (data or {}).items()
    }


def is_debug_mode() -> bool:
    """Whether JSONRPC_SESSION_DEBUG asks for unredacted request params."""
    return os.environ.get(ENV_DEBUG, "").strip().lower() in _TRUTHY


def _renderer(log_format: str) -> Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=True, exception_formatter=structlog.dev.plain_traceback
    )


def configure_logging(
    log_format: str | None = None,
    log_level: str | None = None,
    service_name: str | None = None,
    force: bool = False,
) -> None:
    """Install the structlog pipeline and the root ``logging`` handler.

    Only the first call takes effect unless ``force`` is set. Arguments left
    as None are read from the environment, then fall back to the defaults.

    Args:
        log_format: "json" or "console"
        log_level: Minimum level name for the root logger
        service_name: Bound as ``service`` on every event
        force: Reconfigure even if logging was already configured
    """
    global _logging_configured

    if _logging_configured and not force:
        return

    log_format = (log_format or os.environ.get(ENV_LOG_FORMAT, DEFAULT_LOG_FORMAT)).lower()
    log_level = (log_level or os.environ.get(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL)).upper()
    service_name = service_name or os.environ.get(ENV_SERVICE_NAME, DEFAULT_SERVICE_NAME)

    pre_chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_format),
            ],
        )
    )
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, log_level))

    structlog.contextvars.bind_contextvars(service=service_name)
    _logging_configured = True


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger, configuring logging with defaults on first use."""
    if not _logging_configured:
        configure_logging()
    return structlog.stdlib.get_logger(name)


@contextmanager
def bound_context(**kwargs: Any) -> Iterator[None]:
    """Bind context variables for the duration of a ``with`` block.

    Every event logged inside the block carries the bound keys, whichever
    module logs it. Values bound before the block are restored on exit.

    Example:
        >>> with bound_context(target_url="https://rpc.example.com/", method="ping"):
        ...     get_logger(__name__).info("jsonrpc_session.session.send")
    """
    with structlog.contextvars.bound_contextvars(**kwargs):
        yield
