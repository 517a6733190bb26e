"""Pytest fixtures and context managers for jsonrpc-session tests.

Fixtures (use with pytest, e.g. ``pytest_plugins = ["jsonrpc_session.testing.fixtures"]``):
    mock_server: Scriptable MockJsonRpcServer for request/response tests.
    mock_session: JsonRpcSession wired to ``mock_server`` through httpx.MockTransport.

Context managers:
    test_session(): Sync context manager yielding a (server, session) pair.
"""

from collections.abc import Iterator
from contextlib import contextmanager

import pytest

from jsonrpc_session.models.options import SessionOptions
from jsonrpc_session.testing.mocks import MockJsonRpcServer
from jsonrpc_session.transport.session import JsonRpcSession

DEFAULT_TEST_URL = "http://jsonrpc.test/rpc"


@pytest.fixture
def mock_server() -> MockJsonRpcServer:
    """Create a fresh MockJsonRpcServer for the test."""
    return MockJsonRpcServer()


@pytest.fixture
def mock_session(mock_server: MockJsonRpcServer) -> Iterator[JsonRpcSession]:
    """Provide a JsonRpcSession talking to ``mock_server``.

    The session uses default options and is closed after the test.

    Yields:
        JsonRpcSession instance pointing at DEFAULT_TEST_URL.
    """
    session = JsonRpcSession(DEFAULT_TEST_URL, transport=mock_server.transport)
    yield session
    session.close()


@contextmanager
def test_session(
    options: SessionOptions | None = None, url: str = DEFAULT_TEST_URL
) -> Iterator[tuple[MockJsonRpcServer, JsonRpcSession]]:
    """Context manager that provides a mock server and a session bound to it.

    On exit, the session is closed and the server cleared.

    Example:
        >>> with test_session(SessionOptions(accept_cookies=True)) as (server, session):
        ...     server.set_result("ping", "pong")
        ...     session.send(JsonRpcRequest(method="ping", id=1))
    """
    server = MockJsonRpcServer()
    session = JsonRpcSession(url, options=options, transport=server.transport)
    try:
        yield server, session
    finally:
        session.close()
        server.clear()


# Not a test function despite the name
test_session.__test__ = False  # type: ignore[attr-defined]


__all__ = [
    "DEFAULT_TEST_URL",
    "mock_server",
    "mock_session",
    "test_session",
]
