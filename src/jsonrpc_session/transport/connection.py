"""Outbound HTTP POST connection builder.

For every call the session builds an :class:`HttpConnection` describing the
POST to the JSON-RPC endpoint: target URL, proxy, timeouts, TLS verification
and request headers derived from the session options. An optional
connection configurator gets the last word and may change any of it before
the request is sent.

Headers applied, in order:
    Accept-Charset: UTF-8 (always)
    Content-Type: the configured request content type (if set)
    Origin: the configured origin (if set)
    Accept-Encoding: "gzip, deflate" if compression is enabled, else "identity"
    Cookie: the held cookies, "; "-joined (if cookies are accepted)
"""

from collections.abc import Callable
from dataclasses import dataclass, field

import httpx

from jsonrpc_session.errors import NetworkError
from jsonrpc_session.models.options import SessionOptions
from jsonrpc_session.transport.compression import get_accept_encoding_header

HTTP_METHOD_POST = "POST"


@dataclass
class HttpConnection:
    """A configured, not yet sent, HTTP request to the JSON-RPC endpoint.

    Connection configurators receive this object and may mutate any field:
    add or replace headers, tighten timeouts, route through another proxy.

    Attributes:
        url: Target URL
        method: HTTP method, POST for JSON-RPC
        headers: Request headers (case-insensitive)
        connect_timeout: Seconds to wait for the TCP/TLS connection, None for no limit
        read_timeout: Seconds to wait for response data, None for no limit
        write_timeout: Seconds to wait while sending the body, None for no limit
        proxy: Proxy URL, None to connect directly
        verify: Verify the server's TLS certificate
        follow_redirects: Follow HTTP redirects
    """

    url: httpx.URL
    method: str = HTTP_METHOD_POST
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    connect_timeout: float | None = None
    read_timeout: float | None = None
    write_timeout: float | None = None
    proxy: str | None = None
    verify: bool = True
    follow_redirects: bool = False

    @property
    def timeout(self) -> httpx.Timeout:
        return httpx.Timeout(
            None,
            connect=self.connect_timeout,
            read=self.read_timeout,
            write=self.write_timeout,
        )

    @property
    def client_key(self) -> tuple[str | None, bool]:
        """Settings that require a dedicated ``httpx.Client`` (proxy, TLS verification)."""
        return self.proxy, self.verify

    def set_header(self, name: str, value: str) -> None:
        """Set a request header, replacing any previous value."""
        self.headers[name] = value


ConnectionConfigurator = Callable[[HttpConnection], None]
"""Callable applied to each new connection after the session options."""


def apply_headers(
    headers: httpx.Headers, options: SessionOptions, cookie_header: str | None = None
) -> None:
    """Apply the option-derived request headers.

    Args:
        headers: Headers to update in place
        options: Session options
        cookie_header: Serialized cookies, used only if the options accept cookies
    """
    headers["Accept-Charset"] = "UTF-8"

    if options.request_content_type is not None:
        headers["Content-Type"] = options.request_content_type

    if options.origin is not None:
        headers["Origin"] = options.origin

    headers["Accept-Encoding"] = get_accept_encoding_header(options.enable_compression)

    if options.accept_cookies:
        headers["Cookie"] = cookie_header or ""


def build_connection(
    url: str,
    options: SessionOptions,
    cookie_header: str | None = None,
    configurator: ConnectionConfigurator | None = None,
) -> HttpConnection:
    """Create and configure a POST connection to ``url``.

    Raises:
        NetworkError: If the URL cannot be turned into a connection target
    """
    try:
        target = httpx.URL(url)
    except httpx.InvalidURL as e:
        raise NetworkError(e) from e

    connection = HttpConnection(
        url=target,
        connect_timeout=options.connect_timeout,
        read_timeout=options.read_timeout,
        proxy=options.proxy,
        verify=not options.trust_all_certs,
        follow_redirects=options.follow_redirects,
    )
    apply_headers(connection.headers, options, cookie_header)

    if configurator is not None:
        configurator(connection)

    return connection
