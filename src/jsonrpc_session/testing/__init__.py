"""jsonrpc-session testing utilities for easier test authoring.

This package provides pytest fixtures, a mock JSON-RPC server and custom
assertions to reduce boilerplate when testing code built on JsonRpcSession.

Modules:
    fixtures: Pytest fixtures (mock_server, mock_session) and the
              test_session() context manager.
    mocks: MockJsonRpcServer, a scriptable endpoint for httpx.MockTransport.
    assertions: assert_response_correlates, assert_success_response,
                assert_error_response.

Example:
    >>> from jsonrpc_session.testing import MockJsonRpcServer, assert_success_response
"""

from jsonrpc_session.testing.assertions import (
    assert_error_response,
    assert_response_correlates,
    assert_success_response,
)
from jsonrpc_session.testing.mocks import OMIT, MockJsonRpcServer

__all__ = [
    "OMIT",
    "MockJsonRpcServer",
    "assert_error_response",
    "assert_response_correlates",
    "assert_success_response",
]
