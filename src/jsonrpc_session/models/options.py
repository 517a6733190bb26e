"""Client-session options.

SessionOptions is an immutable snapshot of the tunables a JsonRpcSession
applies to every call: HTTP timeouts, proxying, request/response content
types, the Origin header, compression and cookie acceptance, and the flags
passed to the JSON-RPC 2.0 response parser.

Options are replaced wholesale on the session, never mutated in place, so an
in-flight call always sees one consistent snapshot.

Example:
    >>> from jsonrpc_session.models.options import SessionOptions
    >>>
    >>> options = SessionOptions(read_timeout=5.0, accept_cookies=True)
    >>> tighter = options.with_changes(connect_timeout=1.0)
    >>> tighter.accept_cookies
    True
"""

from collections.abc import Iterable
from typing import Any
from urllib.parse import urlparse

from pydantic import Field, field_validator

from jsonrpc_session.models.base import SessionBaseModel

DEFAULT_REQUEST_CONTENT_TYPE = "application/json"

DEFAULT_ALLOWED_RESPONSE_CONTENT_TYPES: frozenset[str] = frozenset(
    {"application/json", "text/plain"}
)

# Proxy URL schemes understood by httpx
PROXY_SCHEMES = frozenset({"http", "https", "socks5", "socks5h"})


def media_type(content_type: str) -> str:
    """Return the lower-cased media type of a Content-Type value, without parameters.

    Example:
        >>> media_type("Application/JSON; charset=UTF-8")
        'application/json'
    """
    return content_type.split(";", 1)[0].strip().lower()


class SessionOptions(SessionBaseModel):
    """Tunables applied by a JSON-RPC 2.0 client session.

    Attributes:
        request_content_type: Content-Type header sent with requests, None to omit it
        allowed_response_content_types: Accepted response media types, None to accept
            any content type including a missing Content-Type header
        origin: Origin header value, None to omit it
        connect_timeout: Connect timeout in seconds, None for no timeout
        read_timeout: Read timeout in seconds, None for no timeout
        proxy: Proxy URL (http, https or socks5), None to connect directly
        enable_compression: Advertise gzip/deflate response compression
        accept_cookies: Store cookies set by the server and send them back
        preserve_parse_order: Parse JSON objects in responses into ordered dicts
        ignore_version: Do not require the "jsonrpc": "2.0" response member
        parse_non_std_attributes: Keep non-standard top-level response members
        trust_all_certs: Skip TLS certificate verification (testing only)
        follow_redirects: Follow HTTP redirects returned by the server
    """

    request_content_type: str | None = Field(
        default=DEFAULT_REQUEST_CONTENT_TYPE, description="Content-Type of outgoing requests"
    )
    allowed_response_content_types: frozenset[str] | None = Field(
        default=DEFAULT_ALLOWED_RESPONSE_CONTENT_TYPES,
        description="Accepted response media types (None accepts any)",
    )
    origin: str | None = Field(default=None, description="Origin header value")
    connect_timeout: float | None = Field(
        default=None, ge=0, description="Connect timeout in seconds"
    )
    read_timeout: float | None = Field(default=None, ge=0, description="Read timeout in seconds")
    proxy: str | None = Field(default=None, description="Proxy URL")
    enable_compression: bool = Field(default=False, description="Accept gzip/deflate responses")
    accept_cookies: bool = Field(default=False, description="Keep and replay HTTP cookies")
    preserve_parse_order: bool = Field(default=False, description="Parse into ordered dicts")
    ignore_version: bool = Field(default=False, description="Skip the jsonrpc version check")
    parse_non_std_attributes: bool = Field(
        default=False, description="Keep non-standard response members"
    )
    trust_all_certs: bool = Field(default=False, description="Disable TLS verification")
    follow_redirects: bool = Field(default=False, description="Follow HTTP redirects")

    @field_validator("allowed_response_content_types", mode="before")
    @classmethod
    def _normalize_content_types(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            # A bare string is rejected by the frozenset validation below
            return value
        if isinstance(value, Iterable):
            # Non-string entries are left for the frozenset[str] validation to reject
            return [media_type(item) if isinstance(item, str) else item for item in value]
        return value

    @field_validator("proxy")
    @classmethod
    def _validate_proxy(cls, value: str | None) -> str | None:
        if value is None:
            return None
        parsed = urlparse(value)
        if parsed.scheme.lower() not in PROXY_SCHEMES or not parsed.netloc:
            raise ValueError(
                f"Invalid proxy URL: {value}. Expected one of "
                f"{', '.join(sorted(PROXY_SCHEMES))} with a host (e.g. http://proxy:3128)"
            )
        return value

    def is_allowed_response_content_type(self, content_type: str | None) -> bool:
        """Check a response Content-Type against the allow-list.

        Parameters such as ``charset`` are ignored. A missing header is only
        allowed when the allow-list is None (any content type accepted).
        """
        if self.allowed_response_content_types is None:
            return True
        if content_type is None:
            return False
        return media_type(content_type) in self.allowed_response_content_types

    def with_changes(self, **changes: Any) -> "SessionOptions":
        """Return a validated copy with the given fields replaced.

        Example:
            >>> SessionOptions().with_changes(enable_compression=True).enable_compression
            True
        """
        return type(self).model_validate({**self.model_dump(), **changes})
