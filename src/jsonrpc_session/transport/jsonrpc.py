"""JSON-RPC 2.0 message models.

This module implements the JSON-RPC 2.0 specification
(https://www.jsonrpc.org/specification) message objects consumed by the
client session: requests, notifications, responses and error objects,
plus the response parser.

Identifiers are tri-state. A response may omit the ``id`` member entirely,
carry ``"id": null`` or carry a value; ``id_state`` tells the three apart.

Standard JSON-RPC Error Codes:
    -32700: Parse error (invalid JSON)
    -32600: Invalid request (malformed JSON-RPC)
    -32601: Method not found
    -32602: Invalid params
    -32603: Internal error

Example:
    >>> from jsonrpc_session.transport.jsonrpc import JsonRpcRequest, parse_response
    >>>
    >>> request = JsonRpcRequest(method="ws.getTime", id=0)
    >>> request.to_json()
    '{"jsonrpc":"2.0","method":"ws.getTime","id":0}'
    >>> response = parse_response(b'{"jsonrpc":"2.0","result":"12:00","id":0}')
    >>> response.indicates_success
    True
"""

import json
from collections import OrderedDict
from enum import Enum
from typing import Any, Literal

from pydantic import Field, ValidationError, model_validator

from jsonrpc_session.models.base import SessionBaseModel

JSONRPC_VERSION = "2.0"

# JSON-RPC 2.0 Standard Error Codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

# Error code descriptions
ERROR_MESSAGES: dict[int, str] = {
    PARSE_ERROR: "Parse error",
    INVALID_REQUEST: "Invalid request",
    METHOD_NOT_FOUND: "Method not found",
    INVALID_PARAMS: "Invalid params",
    INTERNAL_ERROR: "Internal error",
}

# Standard JSON-RPC 2.0 response members
_RESPONSE_MEMBERS = frozenset({"jsonrpc", "result", "error", "id"})

RequestId = str | int | float | bool
"""Non-null identifier value. Null is modelled as ``None``."""

Params = dict[str, Any] | list[Any]


class IdState(str, Enum):
    """Presence of the ``id`` member on a message."""

    ABSENT = "absent"
    NULL = "null"
    VALUE = "value"


class JsonRpcParseError(ValueError):
    """Raised when text cannot be parsed as a JSON-RPC 2.0 message.

    Attributes:
        message: Description of the structural problem
        content: The offending text (may be truncated)
    """

    def __init__(self, message: str, content: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.content = content


def _id_state(message: SessionBaseModel, value: Any) -> IdState:
    if "id" not in message.model_fields_set:
        return IdState.ABSENT
    if value is None:
        return IdState.NULL
    return IdState.VALUE


def _dumps(payload: dict[str, Any]) -> str:
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))


class JsonRpcError(SessionBaseModel):
    """JSON-RPC 2.0 error object.

    Attributes:
        code: Integer error code (standard or application-defined)
        message: Short error description
        data: Optional additional error information, any JSON value

    Example:
        >>> error = JsonRpcError.from_code(INVALID_PARAMS, data={"field": "user"})
        >>> error.message
        'Invalid params'
    """

    code: int = Field(description="Error code (negative integer)")
    message: str = Field(description="Short error description")
    data: Any = Field(default=None, description="Optional additional error information")

    @staticmethod
    def from_code(code: int, data: Any = None) -> "JsonRpcError":
        """Create error from standard error code."""
        message = ERROR_MESSAGES.get(code, "Unknown error")
        return JsonRpcError(code=code, message=message, data=data)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            out["data"] = self.data
        return out


class JsonRpcRequest(SessionBaseModel):
    """JSON-RPC 2.0 request.

    The identifier is required but may be ``None``, which is sent as
    ``"id": null``.

    Attributes:
        jsonrpc: Protocol version (always "2.0")
        method: RPC method name
        params: Positional (list) or named (dict) parameters, None to omit
        id: Request identifier for correlation

    Example:
        >>> JsonRpcRequest(method="sum", params=[1, 2], id="req-1").to_json()
        '{"jsonrpc":"2.0","method":"sum","params":[1,2],"id":"req-1"}'
    """

    jsonrpc: Literal["2.0"] = Field(
        default=JSONRPC_VERSION, description="JSON-RPC protocol version (always '2.0')"
    )
    method: str = Field(min_length=1, description="RPC method name")
    params: Params | None = Field(default=None, description="Request parameters")
    id: RequestId | None = Field(description="Request identifier for correlation")

    @property
    def id_state(self) -> IdState:
        return _id_state(self, self.id)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"jsonrpc": self.jsonrpc, "method": self.method}
        if self.params is not None:
            out["params"] = self.params
        out["id"] = self.id
        return out

    def to_json(self) -> str:
        """Serialize to JSON-RPC 2.0 JSON text."""
        return _dumps(self.to_dict())

    def __str__(self) -> str:
        return self.to_json()


class JsonRpcNotification(SessionBaseModel):
    """JSON-RPC 2.0 notification: a request without identifier, expecting no response.

    Example:
        >>> JsonRpcNotification(method="log", params={"level": "info"}).to_json()
        '{"jsonrpc":"2.0","method":"log","params":{"level":"info"}}'
    """

    jsonrpc: Literal["2.0"] = Field(
        default=JSONRPC_VERSION, description="JSON-RPC protocol version (always '2.0')"
    )
    method: str = Field(min_length=1, description="RPC method name")
    params: Params | None = Field(default=None, description="Notification parameters")

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"jsonrpc": self.jsonrpc, "method": self.method}
        if self.params is not None:
            out["params"] = self.params
        return out

    def to_json(self) -> str:
        """Serialize to JSON-RPC 2.0 JSON text."""
        return _dumps(self.to_dict())

    def __str__(self) -> str:
        return self.to_json()


class JsonRpcResponse(SessionBaseModel):
    """JSON-RPC 2.0 response, either successful (``result``) or failed (``error``).

    A successful response may carry a ``null`` result; success is decided by
    the absence of an error object.

    Attributes:
        jsonrpc: Protocol version as received (None if absent and ignored)
        result: Result of a successful call
        error: Error object of a failed call
        id: Identifier echoed by the server
        non_std_attributes: Non-standard top-level members, when kept by the parser

    Example:
        >>> response = JsonRpcResponse.failure(JsonRpcError.from_code(PARSE_ERROR), id=None)
        >>> response.indicates_success
        False
    """

    jsonrpc: str | None = Field(default=JSONRPC_VERSION, description="JSON-RPC protocol version")
    result: Any = Field(default=None, description="Response data")
    error: JsonRpcError | None = Field(default=None, description="Error object")
    id: RequestId | None = Field(default=None, description="Request identifier (or null)")
    non_std_attributes: dict[str, Any] | None = Field(
        default=None, description="Non-standard top-level members"
    )

    @model_validator(mode="after")
    def _result_xor_error(self) -> "JsonRpcResponse":
        has_result = "result" in self.model_fields_set
        if has_result and self.error is not None:
            raise ValueError("A response cannot have both result and error")
        if not has_result and self.error is None:
            raise ValueError("A response must have either result or error")
        return self

    @classmethod
    def success(cls, result: Any, id: RequestId | None) -> "JsonRpcResponse":
        return cls(result=result, id=id)

    @classmethod
    def failure(cls, error: JsonRpcError, id: RequestId | None) -> "JsonRpcResponse":
        return cls(error=error, id=id)

    @property
    def id_state(self) -> IdState:
        return _id_state(self, self.id)

    @property
    def indicates_success(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.jsonrpc is not None:
            out["jsonrpc"] = self.jsonrpc
        if self.error is not None:
            out["error"] = self.error.to_dict()
        else:
            out["result"] = self.result
        if self.id_state is not IdState.ABSENT:
            out["id"] = self.id
        if self.non_std_attributes:
            out.update(self.non_std_attributes)
        return out

    def to_json(self) -> str:
        """Serialize to JSON-RPC 2.0 JSON text."""
        return _dumps(self.to_dict())

    def __str__(self) -> str:
        return self.to_json()


def _is_id_value(value: Any) -> bool:
    return value is None or isinstance(value, (str, int, float, bool))


def _parse_error_object(raw: Any, content: str) -> dict[str, Any]:
    if not isinstance(raw, dict):
        raise JsonRpcParseError(
            "Invalid JSON-RPC 2.0 response: error member must be an object", content
        )
    code = raw.get("code")
    if not isinstance(code, int) or isinstance(code, bool):
        raise JsonRpcParseError(
            "Invalid JSON-RPC 2.0 response: error code missing or not an integer", content
        )
    message = raw.get("message")
    if not isinstance(message, str):
        raise JsonRpcParseError(
            "Invalid JSON-RPC 2.0 response: error message missing or not a string", content
        )
    error: dict[str, Any] = {"code": code, "message": message}
    if "data" in raw:
        error["data"] = raw["data"]
    return error


def parse_response(
    content: bytes | str,
    preserve_order: bool = False,
    ignore_version: bool = False,
    parse_non_std_attributes: bool = False,
) -> JsonRpcResponse:
    """Parse JSON text into a JSON-RPC 2.0 response.

    Args:
        content: Response body, bytes are decoded as UTF-8
        preserve_order: Build every JSON object as an ``OrderedDict``
        ignore_version: Do not require ``"jsonrpc": "2.0"``
        parse_non_std_attributes: Keep unknown top-level members in
            ``non_std_attributes`` instead of dropping them

    Returns:
        The parsed response

    Raises:
        JsonRpcParseError: If the text is not valid JSON or not a valid
            JSON-RPC 2.0 response object
    """
    if isinstance(content, bytes):
        try:
            text = content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise JsonRpcParseError(f"Invalid JSON-RPC 2.0 response: not UTF-8: {e}") from e
    else:
        text = content

    if not text.strip():
        raise JsonRpcParseError("Invalid JSON-RPC 2.0 response: empty body", text)

    try:
        if preserve_order:
            data = json.loads(text, object_pairs_hook=OrderedDict)
        else:
            data = json.loads(text)
    except json.JSONDecodeError as e:
        raise JsonRpcParseError(f"Invalid JSON: {e}", text[:200]) from e

    if isinstance(data, list):
        raise JsonRpcParseError(
            "Invalid JSON-RPC 2.0 response: batch responses are not supported", text[:200]
        )
    if not isinstance(data, dict):
        raise JsonRpcParseError(
            "Invalid JSON-RPC 2.0 response: message must be a JSON object", text[:200]
        )

    version = data.get("jsonrpc")
    if not ignore_version:
        if "jsonrpc" not in data:
            raise JsonRpcParseError(
                'Invalid JSON-RPC 2.0 response: missing "jsonrpc" version member', text[:200]
            )
        if version != JSONRPC_VERSION:
            raise JsonRpcParseError(
                f'Invalid JSON-RPC 2.0 response: version must be "2.0", got {version!r}',
                text[:200],
            )

    fields: dict[str, Any] = {
        "jsonrpc": version if isinstance(version, str) else None,
    }

    if "id" in data:
        if not _is_id_value(data["id"]):
            raise JsonRpcParseError(
                "Invalid JSON-RPC 2.0 response: id must be a string, number, boolean or null",
                text[:200],
            )
        fields["id"] = data["id"]

    has_result = "result" in data
    has_error = "error" in data
    if has_result and has_error:
        raise JsonRpcParseError(
            "Invalid JSON-RPC 2.0 response: you cannot have result and error at the same time",
            text[:200],
        )
    if has_result:
        fields["result"] = data["result"]
    elif has_error:
        fields["error"] = _parse_error_object(data["error"], text[:200])
    else:
        raise JsonRpcParseError(
            "Invalid JSON-RPC 2.0 response: missing result or error", text[:200]
        )

    if parse_non_std_attributes:
        extra = {k: v for k, v in data.items() if k not in _RESPONSE_MEMBERS}
        if extra:
            fields["non_std_attributes"] = extra

    try:
        return JsonRpcResponse.model_validate(fields)
    except ValidationError as e:
        raise JsonRpcParseError(f"Invalid JSON-RPC 2.0 response: {e}", text[:200]) from e
