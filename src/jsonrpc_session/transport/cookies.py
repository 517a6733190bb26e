"""Per-session HTTP cookie store.

Cookies set by the JSON-RPC server are merged into an ``httpx.Cookies`` jar
and replayed on every later call as a single ``Cookie`` header, regardless
of domain or path. The jar accepts every cookie the server sends, whatever
its ``Domain`` or ``Path`` attributes; only expiry is enforced.
"""

import threading
from http.cookiejar import Cookie, CookieJar, DefaultCookiePolicy
from urllib.request import Request

import httpx

from jsonrpc_session.observability import get_logger

# Module logger
logger = get_logger(__name__)

COOKIE_DELIMITER = "; "


class AcceptAllCookiePolicy(DefaultCookiePolicy):
    """Cookie policy that stores every well-formed cookie it is offered."""

    def set_ok(self, cookie: Cookie, request: Request) -> bool:
        return True


class CookieStore:
    """Thread-safe cookie jar keyed by (domain, path, name).

    Example:
        >>> store = CookieStore()
        >>> store.put("https://rpc.example.com/", ["session=abc"])
        >>> store.header_value()
        'session=abc'
    """

    def __init__(self) -> None:
        self._cookies = httpx.Cookies(CookieJar(policy=AcceptAllCookiePolicy()))
        self._lock = threading.Lock()

    def put(self, url: str, set_cookie: list[str]) -> None:
        """Merge the ``Set-Cookie`` header values of a response received from ``url``.

        Raises:
            httpx.InvalidURL: If ``url`` cannot be used as a cookie origin
        """
        if not set_cookie:
            return
        request = httpx.Request("POST", url)
        response = httpx.Response(
            200, headers=[("set-cookie", value) for value in set_cookie], request=request
        )
        with self._lock:
            before = len(self._cookies.jar)
            self._cookies.extract_cookies(response)
            after = len(self._cookies.jar)
        logger.debug(
            "jsonrpc_session.cookies.stored",
            host=request.url.host,
            received=len(set_cookie),
            stored=after,
            new=after - before,
        )

    def get_cookies(self) -> list[Cookie]:
        """Return all cookies that have not expired, dropping expired ones."""
        with self._lock:
            self._cookies.jar.clear_expired_cookies()
            return list(self._cookies.jar)

    def header_value(self) -> str:
        """Serialize the held cookies for a ``Cookie`` request header."""
        return COOKIE_DELIMITER.join(
            cookie.name if cookie.value is None else f"{cookie.name}={cookie.value}"
            for cookie in self.get_cookies()
        )

    def __len__(self) -> int:
        return len(self.get_cookies())
