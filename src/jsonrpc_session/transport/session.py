"""Blocking JSON-RPC 2.0 client session over HTTP(S).

A JsonRpcSession sends JSON-RPC 2.0 requests and notifications to one
server URL by HTTP POST and turns the replies into validated
:class:`JsonRpcResponse` objects.

The session provides:
- Per-call connection configuration from immutable SessionOptions
- Optional connection configurator and raw response inspector hooks
- Optional cookie store replayed on later calls
- gzip/deflate response decompression
- Response Content-Type enforcement
- Request/response identifier matching as required by JSON-RPC 2.0
- Structured logging for observability

A session is safe to share between threads. Each call builds its own
request and raw response; the options are read once per call.

Example:
    >>> from jsonrpc_session import JsonRpcRequest, JsonRpcSession
    >>>
    >>> with JsonRpcSession("https://jsonrpc.example.com:8080") as session:
    ...     response = session.send(JsonRpcRequest(method="getServerTime", id=0))
    ...     if response.indicates_success:
    ...         print(response.result)
    ...     else:
    ...         print(response.error.message)
"""

import json
import threading
import time
from collections.abc import Callable
from http.cookiejar import Cookie, CookieJar, DefaultCookiePolicy
from typing import Any, overload
from urllib.parse import urlparse

import httpx

from jsonrpc_session.errors import (
    BadResponseError,
    NetworkError,
    SessionError,
    UnexpectedContentTypeError,
)
from jsonrpc_session.models.options import SessionOptions
from jsonrpc_session.observability import (
    bound_context,
    get_logger,
    is_debug_mode,
    sanitize_for_logging,
)
from jsonrpc_session.transport.connection import (
    ConnectionConfigurator,
    HttpConnection,
    build_connection,
)
from jsonrpc_session.transport.cookies import CookieStore
from jsonrpc_session.transport.jsonrpc import (
    INTERNAL_ERROR,
    INVALID_REQUEST,
    PARSE_ERROR,
    JsonRpcNotification,
    JsonRpcParseError,
    JsonRpcRequest,
    JsonRpcResponse,
    parse_response,
)
from jsonrpc_session.transport.raw_response import RawResponse
from jsonrpc_session.utils.sanitization import sanitize_url

# Module logger
logger = get_logger(__name__)

ALLOWED_URL_SCHEMES = frozenset({"http", "https"})

# Errors a server may return before it has read the request id
ID_MISMATCH_TOLERATED_CODES = frozenset({PARSE_ERROR, INVALID_REQUEST, INTERNAL_ERROR})

RawResponseInspector = Callable[[RawResponse], None]
"""Callable invoked with every raw HTTP response before it is processed."""


def format_id(value: Any) -> str:
    """String form of an identifier used for matching and error messages.

    Strings are used as-is; numbers, booleans and null use their JSON text,
    so ``1`` and ``"1"`` compare equal.
    """
    if isinstance(value, str):
        return value
    return json.dumps(value)


def ids_correspond(request: JsonRpcRequest, response: JsonRpcResponse) -> bool:
    """Check the response identifier against the request identifier.

    Accepted when both ids are set and their string forms are equal, when
    neither is set (absent and null are treated alike), or when the
    response is a parse error, invalid request or internal error, which a
    server may report before it knows the request id.
    """
    request_id = request.id
    response_id = response.id

    if request_id is not None and response_id is not None:
        if format_id(request_id) == format_id(response_id):
            return True
    elif request_id is None and response_id is None:
        return True

    return response.error is not None and response.error.code in ID_MISMATCH_TOLERATED_CODES


def validate_url(url: str | httpx.URL) -> str:
    """Return ``url`` as a string if it is an absolute HTTP or HTTPS URL.

    Raises:
        ValueError: If the URL is empty, relative or uses another scheme
    """
    if url is None:
        raise ValueError("The server URL must not be None")
    url = str(url)
    parsed = urlparse(url)
    if parsed.scheme.lower() not in ALLOWED_URL_SCHEMES:
        raise ValueError(
            f"The URL protocol must be HTTP or HTTPS. Received: {sanitize_url(url)}"
        )
    if not parsed.netloc:
        raise ValueError(f"The URL must include a host. Received: {sanitize_url(url)}")
    return url


def _loggable_params(params: Any) -> Any:
    if is_debug_mode():
        return params
    if isinstance(params, dict):
        return sanitize_for_logging(params)
    if isinstance(params, list):
        return [sanitize_for_logging(item) if isinstance(item, dict) else item for item in params]
    return params


def _close_streams(request: httpx.Request | None, response: httpx.Response | None) -> None:
    """Release the response and request streams, never raising.

    The pooled connection itself is kept for reuse.
    """
    if response is not None:
        try:
            response.close()
        except Exception as e:
            logger.debug(
                "jsonrpc_session.session.stream_close_failed",
                stream="response",
                error=str(e),
                error_type=type(e).__name__,
            )

    if request is not None and isinstance(request.stream, httpx.SyncByteStream):
        try:
            request.stream.close()
        except Exception as e:
            logger.debug(
                "jsonrpc_session.session.stream_close_failed",
                stream="request",
                error=str(e),
                error_type=type(e).__name__,
            )


class JsonRpcSession:
    """Sends JSON-RPC 2.0 requests and notifications to a server URL by HTTP POST.

    Attributes:
        url: Server URL, HTTP or HTTPS
        options: Session options, replaced wholesale to change settings
        connection_configurator: Optional hook applied to each new connection
        raw_response_inspector: Optional hook receiving each raw HTTP response
        cookies: Non-expired cookies held by the session
    """

    def __init__(
        self,
        url: str | httpx.URL,
        options: SessionOptions | None = None,
        connection_configurator: ConnectionConfigurator | None = None,
        raw_response_inspector: RawResponseInspector | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize a client session.

        Args:
            url: Server URL, e.g. "https://jsonrpc.example.com:8080"
            options: Session options (default: SessionOptions())
            connection_configurator: Optional hook applied to every connection
                after the session options
            raw_response_inspector: Optional hook invoked with every raw response
            transport: Optional custom transport (for testing). Must be an
                instance of httpx.BaseTransport (e.g., httpx.MockTransport).
                Proxy settings do not apply to a custom transport.

        Raises:
            ValueError: If the URL is not an absolute HTTP or HTTPS URL
        """
        self._url = validate_url(url)
        self._options = options if options is not None else SessionOptions()
        self._check_options(self._options)
        self._connection_configurator = connection_configurator
        self._raw_response_inspector = raw_response_inspector
        self._transport = transport
        self._cookie_store: CookieStore | None = None
        self._clients: dict[tuple[str | None, bool], httpx.Client] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _check_options(options: SessionOptions | None) -> None:
        if options is None:
            raise ValueError("The client session options must not be None")
        if not isinstance(options, SessionOptions):
            raise TypeError(
                f"The client session options must be SessionOptions, got {type(options).__name__}"
            )

    @property
    def url(self) -> str:
        return self._url

    @url.setter
    def url(self, url: str | httpx.URL) -> None:
        self._url = validate_url(url)

    @property
    def options(self) -> SessionOptions:
        return self._options

    @options.setter
    def options(self, options: SessionOptions) -> None:
        self._check_options(options)
        self._options = options

    @property
    def connection_configurator(self) -> ConnectionConfigurator | None:
        return self._connection_configurator

    @connection_configurator.setter
    def connection_configurator(self, configurator: ConnectionConfigurator | None) -> None:
        self._connection_configurator = configurator

    @property
    def raw_response_inspector(self) -> RawResponseInspector | None:
        return self._raw_response_inspector

    @raw_response_inspector.setter
    def raw_response_inspector(self, inspector: RawResponseInspector | None) -> None:
        self._raw_response_inspector = inspector

    @property
    def cookies(self) -> list[Cookie]:
        """All non-expired cookies, empty if none were set or cookies are not accepted."""
        if self._cookie_store is None:
            return []
        return self._cookie_store.get_cookies()

    def _get_cookie_store(self) -> CookieStore:
        with self._lock:
            if self._cookie_store is None:
                self._cookie_store = CookieStore()
            return self._cookie_store

    def _get_client(self, connection: HttpConnection) -> httpx.Client:
        key = connection.client_key
        with self._lock:
            client = self._clients.get(key)
            if client is not None:
                return client
            # Cookies are handled by the session's own store, never by httpx
            no_cookies = CookieJar(policy=DefaultCookiePolicy(allowed_domains=[]))
            if self._transport is not None:
                client = httpx.Client(
                    transport=self._transport, verify=connection.verify, cookies=no_cookies
                )
            else:
                client = httpx.Client(
                    proxy=connection.proxy, verify=connection.verify, cookies=no_cookies
                )
            self._clients[key] = client
            return client

    def _create_connection(self, options: SessionOptions) -> HttpConnection:
        cookie_header = None
        if options.accept_cookies:
            cookie_header = self._get_cookie_store().header_value()
        return build_connection(
            self._url, options, cookie_header, self._connection_configurator
        )

    def _store_cookies(self, raw: RawResponse) -> None:
        store = self._get_cookie_store()
        try:
            store.put(raw.url, raw.get_header_list("set-cookie"))
        except httpx.InvalidURL as e:
            raise NetworkError(e) from e
        except OSError as e:
            raise NetworkError(e, prefix="I/O exception") from e

    def _post(
        self,
        connection: HttpConnection,
        body: str,
        options: SessionOptions,
        strict_decoding: bool = True,
    ) -> RawResponse:
        """POST ``body`` and capture the raw response.

        Invokes the raw response inspector and stores cookies if required.
        Streams are closed on every exit path.
        """
        request: httpx.Request | None = None
        response: httpx.Response | None = None
        try:
            try:
                client = self._get_client(connection)
            except (ValueError, ImportError) as e:
                # httpx rejects unusable proxy URLs, and socks5 needs the socks extra
                raise NetworkError(e) from e

            try:
                request = client.build_request(
                    connection.method,
                    connection.url,
                    headers=connection.headers,
                    content=body.encode("utf-8"),
                    timeout=connection.timeout,
                )
                response = client.send(
                    request, stream=True, follow_redirects=connection.follow_redirects
                )
                raw = RawResponse.from_httpx(response, strict=strict_decoding)
            except (httpx.HTTPError, httpx.InvalidURL, OSError) as e:
                raise NetworkError(e) from e

            if self._raw_response_inspector is not None:
                self._raw_response_inspector(raw)

            if options.accept_cookies:
                self._store_cookies(raw)

            return raw
        finally:
            _close_streams(request, response)

    @staticmethod
    def _check_content_type(raw: RawResponse, options: SessionOptions) -> None:
        content_type = raw.content_type
        if not options.is_allowed_response_content_type(content_type):
            raise UnexpectedContentTypeError(content_type, details={"status_code": raw.status_code})

    @staticmethod
    def _parse(raw: RawResponse, options: SessionOptions) -> JsonRpcResponse:
        try:
            return parse_response(
                raw.content,
                preserve_order=options.preserve_parse_order,
                ignore_version=options.ignore_version,
                parse_non_std_attributes=options.parse_non_std_attributes,
            )
        except JsonRpcParseError as e:
            raise BadResponseError(
                "Invalid JSON-RPC 2.0 response",
                cause=e,
                details={"reason": e.message, "status_code": raw.status_code},
            ) from e

    def send_request(self, request: JsonRpcRequest) -> JsonRpcResponse:
        """Send a JSON-RPC 2.0 request and return the server's response.

        Args:
            request: The request to send

        Returns:
            The JSON-RPC 2.0 response returned by the server. Error responses
            are returned, not raised.

        Raises:
            NetworkError: On connection, I/O or timeout failures
            UnexpectedContentTypeError: If the response Content-Type is missing
                or not allowed by the options
            BadResponseError: If the response is not valid JSON-RPC 2.0 or its
                id does not match the request id
        """
        if not isinstance(request, JsonRpcRequest):
            raise TypeError(f"Expected JsonRpcRequest, got {type(request).__name__}")

        options = self._options
        start_time = time.perf_counter()

        with bound_context(target_url=sanitize_url(self._url), method=request.method):
            logger.debug(
                "jsonrpc_session.session.send",
                request_id=request.id,
                params=_loggable_params(request.params),
            )
            try:
                connection = self._create_connection(options)
                raw = self._post(connection, request.to_json(), options)
                self._check_content_type(raw, options)
                response = self._parse(raw, options)
                if not ids_correspond(request, response):
                    raise BadResponseError.id_mismatch(
                        returned=format_id(response.id), expected=format_id(request.id)
                    )
            except SessionError as e:
                logger.warning(
                    "jsonrpc_session.session.error",
                    request_id=request.id,
                    kind=e.kind.value,
                    error=e.message,
                    duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
                )
                raise

            logger.info(
                "jsonrpc_session.session.response",
                request_id=request.id,
                status_code=raw.status_code,
                success=response.indicates_success,
                error_code=None if response.error is None else response.error.code,
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )
        return response

    def send_notification(self, notification: JsonRpcNotification) -> None:
        """Send a JSON-RPC 2.0 notification. Notifications produce no response.

        Whatever the server replies is captured for the inspector and cookie
        store but never parsed: an error status or an undecodable body does
        not fail the call.

        Raises:
            NetworkError: On connection, I/O or timeout failures
        """
        if not isinstance(notification, JsonRpcNotification):
            raise TypeError(f"Expected JsonRpcNotification, got {type(notification).__name__}")

        options = self._options
        start_time = time.perf_counter()

        with bound_context(target_url=sanitize_url(self._url), method=notification.method):
            try:
                connection = self._create_connection(options)
                raw = self._post(
                    connection, notification.to_json(), options, strict_decoding=False
                )
            except SessionError as e:
                logger.warning(
                    "jsonrpc_session.session.error",
                    kind=e.kind.value,
                    error=e.message,
                    duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
                )
                raise

            log = logger.info if raw.is_success else logger.warning
            log(
                "jsonrpc_session.session.notified",
                status_code=raw.status_code,
                decoding_error=raw.decoding_error,
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )

    @overload
    def send(self, message: JsonRpcRequest) -> JsonRpcResponse: ...

    @overload
    def send(self, message: JsonRpcNotification) -> None: ...

    def send(self, message: JsonRpcRequest | JsonRpcNotification) -> JsonRpcResponse | None:
        """Send a request (returns its response) or a notification (returns None)."""
        if isinstance(message, JsonRpcRequest):
            return self.send_request(message)
        if isinstance(message, JsonRpcNotification):
            self.send_notification(message)
            return None
        raise TypeError(
            f"Expected JsonRpcRequest or JsonRpcNotification, got {type(message).__name__}"
        )

    def close(self) -> None:
        """Close pooled HTTP connections. Cookies and options are kept."""
        with self._lock:
            clients = list(self._clients.values())
            self._clients.clear()
        for client in clients:
            client.close()

    def __enter__(self) -> "JsonRpcSession":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        self.close()
