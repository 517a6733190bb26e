"""Raw HTTP response captured by the JSON-RPC session.

A RawResponse is an immutable snapshot of one HTTP exchange, taken before
any JSON-RPC interpretation: status line, headers and body. gzip and deflate
bodies are decompressed on capture, so callers (and response inspectors)
always see plain content while ``content_encoding`` still reports what the
server sent. Replies to notifications are captured leniently: a body that
cannot be decompressed is kept as received.
"""

import codecs
from dataclasses import dataclass, field

import httpx

from jsonrpc_session.observability import get_logger
from jsonrpc_session.transport.compression import decompress_payload

# Module logger
logger = get_logger(__name__)

DEFAULT_CHARSET = "utf-8"


def _charset_of(content_type: str | None) -> str | None:
    if not content_type:
        return None
    for param in content_type.split(";")[1:]:
        name, _, value = param.partition("=")
        if name.strip().lower() == "charset" and value.strip():
            return value.strip().strip('"')
    return None


@dataclass(frozen=True)
class RawResponse:
    """Unparsed HTTP response to a JSON-RPC 2.0 request or notification.

    Attributes:
        status_code: HTTP status code
        reason_phrase: HTTP reason phrase (may be empty)
        headers: Case-insensitive, multi-valued response headers
        content: Response body, decompressed if it was gzip or deflate encoded
        url: URL the request was sent to
        decoding_error: Why the body could not be decompressed, if it was kept
            as received (lenient capture only)
    """

    status_code: int
    reason_phrase: str
    headers: httpx.Headers = field(repr=False)
    content: bytes = field(repr=False)
    url: str = ""
    decoding_error: str | None = None

    @classmethod
    def from_httpx(cls, response: httpx.Response, strict: bool = True) -> "RawResponse":
        """Capture a streamed httpx response.

        The body is read with ``iter_raw`` so decompression is done here
        rather than by httpx. A response whose body httpx already loaded
        (e.g. built with ``content=`` by a mock handler) was decoded by
        httpx, and its content is taken as-is.

        Args:
            response: Response sent with ``stream=True`` and not yet read
            strict: Raise on undecodable gzip/deflate bodies. When False the
                body is kept as received and ``decoding_error`` says why.

        Raises:
            httpx.HTTPError: On transport failures while reading the body
            OSError: If a gzip/deflate body cannot be decompressed and
                ``strict`` is set
        """
        headers = httpx.Headers(response.headers)
        decoding_error = None
        if response.is_stream_consumed:
            content = response.content
        else:
            content = b"".join(response.iter_raw())
            try:
                content = decompress_payload(content, headers.get("content-encoding"))
            except OSError as e:
                if strict:
                    raise
                decoding_error = str(e)
                logger.debug(
                    "jsonrpc_session.decompression.failed",
                    encoding=headers.get("content-encoding"),
                    error=decoding_error,
                )
        return cls(
            status_code=response.status_code,
            reason_phrase=response.reason_phrase,
            headers=headers,
            content=content,
            url=str(response.request.url),
            decoding_error=decoding_error,
        )

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value, None if absent."""
        return self.headers.get("content-type")

    @property
    def content_encoding(self) -> str | None:
        """The Content-Encoding header as reported by the server, None if absent."""
        return self.headers.get("content-encoding")

    @property
    def charset(self) -> str:
        charset = _charset_of(self.content_type)
        if charset:
            try:
                codecs.lookup(charset)
            except LookupError:
                return DEFAULT_CHARSET
            return charset
        return DEFAULT_CHARSET

    @property
    def text(self) -> str:
        """The body decoded with the Content-Type charset (UTF-8 by default)."""
        return self.content.decode(self.charset, errors="replace")

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    def get_header_list(self, name: str) -> list[str]:
        """All values of a (possibly repeated) header, e.g. ``Set-Cookie``."""
        return self.headers.get_list(name)
