"""JSON-RPC session error taxonomy.

Every failure raised by :meth:`JsonRpcSession.send` is a :class:`SessionError`
carrying a human-readable message, a cause-category tag (``kind``) and, where
applicable, the underlying exception that triggered it.

Categories:
    NETWORK: connection, I/O, timeout, decompression or cookie-merge failure
    UNEXPECTED_CONTENT_TYPE: response Content-Type missing or not allowed
    BAD_RESPONSE: malformed JSON-RPC 2.0 response or identifier mismatch
"""
from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Cause category of a session failure."""

    NETWORK = "network"
    UNEXPECTED_CONTENT_TYPE = "unexpected_content_type"
    BAD_RESPONSE = "bad_response"


class SessionError(Exception):
    """Base exception for all JSON-RPC session failures.

    Callers that only care about the category can catch this class and
    switch on ``kind``; the subclasses exist for ``except`` clauses that
    want a single category.

    Attributes:
        kind: Cause category of the failure
        code: Error code following the jsonrpc-session:<kind> pattern
        message: Human-readable error message
        details: Optional additional error context
        cause: Underlying exception, if any
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        cause: BaseException | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.code = f"jsonrpc-session:{kind.value}"
        self.message = message
        self.cause = cause
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize to ``{code, kind, message, details}`` dict."""
        return {
            "code": self.code,
            "kind": self.kind.value,
            "message": self.message,
            "details": self.details,
        }


class NetworkError(SessionError):
    """Raised when the HTTP exchange itself fails.

    Covers connection set-up, writing the request, reading the response,
    timeouts, undecodable compressed bodies and failures while storing
    response cookies. The transport exception is always attached.
    """

    def __init__(
        self,
        cause: BaseException,
        prefix: str = "Network exception",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            ErrorKind.NETWORK,
            f"{prefix}: {cause}",
            cause=cause,
            details={"error_type": type(cause).__name__, **(details or {})},
        )


class UnexpectedContentTypeError(SessionError):
    """Raised when the response Content-Type is missing or not allowed.

    Attributes:
        content_type: The reported Content-Type, ``None`` if the header was missing
    """

    def __init__(self, content_type: str | None, details: dict[str, Any] | None = None) -> None:
        if content_type is None:
            message = "Missing Content-Type header in the HTTP response"
        else:
            message = f'Unexpected "{content_type}" content type of the HTTP response'
        super().__init__(
            ErrorKind.UNEXPECTED_CONTENT_TYPE,
            message,
            details={"content_type": content_type, **(details or {})},
        )
        self.content_type = content_type


class BadResponseError(SessionError):
    """Raised when the response is not a valid answer to the request.

    Either the body failed to parse as a JSON-RPC 2.0 response (``cause`` is
    the parse error) or the response identifier does not correspond to the
    request identifier (``expected_id`` / ``returned_id`` are set).
    """

    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        expected_id: Any = None,
        returned_id: Any = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(ErrorKind.BAD_RESPONSE, message, cause=cause, details=details)
        self.expected_id = expected_id
        self.returned_id = returned_id

    @classmethod
    def id_mismatch(cls, returned: str, expected: str) -> "BadResponseError":
        """Build the error for a response whose id does not match the request."""
        return cls(
            f"Invalid JSON-RPC 2.0 response: ID mismatch: Returned {returned}, expected {expected}",
            expected_id=expected,
            returned_id=returned,
            details={"expected_id": expected, "returned_id": returned},
        )


__all__ = [
    "BadResponseError",
    "ErrorKind",
    "NetworkError",
    "SessionError",
    "UnexpectedContentTypeError",
]
