"""jsonrpc-session: JSON-RPC 2.0 client sessions over HTTP(S).

Example:
    >>> from jsonrpc_session import JsonRpcRequest, JsonRpcSession, SessionOptions
    >>>
    >>> session = JsonRpcSession(
    ...     "https://jsonrpc.example.com/",
    ...     options=SessionOptions(read_timeout=10.0, accept_cookies=True),
    ... )
    >>> response = session.send(JsonRpcRequest(method="ws.getTime", id=1))
"""

from jsonrpc_session.errors import (
    BadResponseError,
    ErrorKind,
    NetworkError,
    SessionError,
    UnexpectedContentTypeError,
)
from jsonrpc_session.models.options import SessionOptions
from jsonrpc_session.transport import (
    ConnectionConfigurator,
    HttpConnection,
    IdState,
    JsonRpcError,
    JsonRpcNotification,
    JsonRpcParseError,
    JsonRpcRequest,
    JsonRpcResponse,
    JsonRpcSession,
    RawResponse,
    RawResponseInspector,
    parse_response,
)

__version__ = "1.0.0"

__all__ = [
    "BadResponseError",
    "ConnectionConfigurator",
    "ErrorKind",
    "HttpConnection",
    "IdState",
    "JsonRpcError",
    "JsonRpcNotification",
    "JsonRpcParseError",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "JsonRpcSession",
    "NetworkError",
    "RawResponse",
    "RawResponseInspector",
    "SessionError",
    "SessionOptions",
    "UnexpectedContentTypeError",
    "__version__",
    "parse_response",
]
