"""Shared pytest fixtures for jsonrpc-session tests.

The mock server fixtures come from the jsonrpc_session.testing plugin; this
module adds the request/response objects used across test modules.
"""

import pytest

from jsonrpc_session.transport.jsonrpc import JsonRpcNotification, JsonRpcRequest

# Load jsonrpc_session.testing fixtures (mock_server, mock_session)
pytest_plugins = ["jsonrpc_session.testing.fixtures"]


@pytest.fixture
def sample_request() -> JsonRpcRequest:
    """Create a request with positional params and an integer id."""
    return JsonRpcRequest(method="ws.getTime", params=["UTC"], id=1)


@pytest.fixture
def sample_notification() -> JsonRpcNotification:
    """Create a notification with named params."""
    return JsonRpcNotification(method="ws.log", params={"level": "info", "msg": "hello"})
