"""Value types for jsonrpc-session.

Public exports:
    SessionBaseModel: Shared pydantic configuration
    SessionOptions: Per-session HTTP and parsing tunables
"""

from jsonrpc_session.models.base import SessionBaseModel
from jsonrpc_session.models.options import (
    DEFAULT_ALLOWED_RESPONSE_CONTENT_TYPES,
    DEFAULT_REQUEST_CONTENT_TYPE,
    SessionOptions,
)

__all__ = [
    "DEFAULT_ALLOWED_RESPONSE_CONTENT_TYPES",
    "DEFAULT_REQUEST_CONTENT_TYPE",
    "SessionBaseModel",
    "SessionOptions",
]
