"""JSON-RPC 2.0 over HTTP(S) transport layer.

This package provides the blocking client session and its building blocks:
- JSON-RPC 2.0 message models and response parser
- Connection builder applying session options and configurator hooks
- Raw HTTP response capture with gzip/deflate decompression
- Per-session cookie store

Public exports:
    JsonRpcSession: Client session bound to one server URL
    JsonRpcRequest: JSON-RPC 2.0 request
    JsonRpcNotification: JSON-RPC 2.0 notification
    JsonRpcResponse: JSON-RPC 2.0 response
    JsonRpcError: JSON-RPC 2.0 error object
    JsonRpcParseError: Raised for malformed responses
    IdState: Tri-state identifier presence
    parse_response: JSON-RPC 2.0 response parser
    HttpConnection: Connection handed to configurators
    ConnectionConfigurator: Type alias for connection hooks
    RawResponse: Unparsed HTTP response
    RawResponseInspector: Type alias for response hooks
    CookieStore: Session cookie jar
"""

from jsonrpc_session.transport.connection import ConnectionConfigurator, HttpConnection
from jsonrpc_session.transport.cookies import CookieStore
from jsonrpc_session.transport.jsonrpc import (
    IdState,
    JsonRpcError,
    JsonRpcNotification,
    JsonRpcParseError,
    JsonRpcRequest,
    JsonRpcResponse,
    parse_response,
)
from jsonrpc_session.transport.raw_response import RawResponse
from jsonrpc_session.transport.session import (
    JsonRpcSession,
    RawResponseInspector,
    ids_correspond,
)

__all__ = [
    # JSON-RPC
    "IdState",
    "JsonRpcError",
    "JsonRpcNotification",
    "JsonRpcParseError",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "parse_response",
    # Session
    "JsonRpcSession",
    "ids_correspond",
    # Hooks
    "ConnectionConfigurator",
    "HttpConnection",
    "RawResponse",
    "RawResponseInspector",
    # Cookies
    "CookieStore",
]
