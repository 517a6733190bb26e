"""Unit tests for MockJsonRpcServer and the testing helpers."""

import gzip
import json
import zlib

import httpx
import pytest

from jsonrpc_session.models.options import SessionOptions
from jsonrpc_session.testing import (
    OMIT,
    MockJsonRpcServer,
    assert_error_response,
    assert_response_correlates,
    assert_success_response,
)
from jsonrpc_session.testing.fixtures import test_session as session_scope
from jsonrpc_session.transport.jsonrpc import (
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
)
from jsonrpc_session.transport.session import JsonRpcSession


def _post(server: MockJsonRpcServer, body: bytes | str) -> httpx.Response:
    response = server.handle(httpx.Request("POST", "http://jsonrpc.test/", content=body))
    response.read()
    return response


class TestMockJsonRpcServer:
    """Tests for MockJsonRpcServer pre-set behaviour and recording."""

    def test_result_echoes_id(self) -> None:
        server = MockJsonRpcServer()
        server.set_result("sum", 3)

        response = _post(server, '{"jsonrpc":"2.0","method":"sum","params":[1,2],"id":9}')

        assert response.status_code == 200
        assert response.headers["Content-Type"] == "application/json"
        assert response.json() == {"jsonrpc": "2.0", "result": 3, "id": 9}
        assert server.json_bodies() == [
            {"jsonrpc": "2.0", "method": "sum", "params": [1, 2], "id": 9}
        ]

    def test_error_replaces_result(self) -> None:
        server = MockJsonRpcServer()
        server.set_result("sum", 3)
        server.set_error("sum", JsonRpcError.from_code(INVALID_PARAMS))

        body = _post(server, '{"jsonrpc":"2.0","method":"sum","id":1}').json()

        assert body["error"] == {"code": INVALID_PARAMS, "message": "Invalid params"}
        assert "result" not in body

    def test_unknown_method(self) -> None:
        body = _post(MockJsonRpcServer(), '{"jsonrpc":"2.0","method":"nope","id":1}').json()

        assert body["error"]["code"] == METHOD_NOT_FOUND
        assert body["error"]["data"] == {"method": "nope"}

    def test_invalid_json(self) -> None:
        body = _post(MockJsonRpcServer(), "{not json").json()

        assert body["error"]["code"] == PARSE_ERROR
        assert body["id"] is None

    def test_notification_gets_empty_204(self) -> None:
        response = _post(MockJsonRpcServer(), '{"jsonrpc":"2.0","method":"log"}')

        assert response.status_code == 204
        assert response.content == b""
        assert "Content-Type" not in response.headers

    def test_response_id_overrides(self) -> None:
        server = MockJsonRpcServer()
        server.set_result("m", 1)
        request = '{"jsonrpc":"2.0","method":"m","id":1}'

        server.set_response_id("other")
        assert _post(server, request).json()["id"] == "other"
        server.set_response_id(OMIT)
        assert "id" not in _post(server, request).json()
        server.echo_response_id()
        assert _post(server, request).json()["id"] == 1

    def test_headers_and_members(self) -> None:
        server = MockJsonRpcServer()
        server.set_result("m", 1)
        server.set_cookie("a=1")
        server.set_cookie("b=2")
        server.set_content_type("text/plain")
        server.set_extra_members({"xid": "x"})
        server.omit_version()

        response = _post(server, '{"jsonrpc":"2.0","method":"m","id":1}')

        assert response.headers.get_list("Set-Cookie") == ["a=1", "b=2"]
        assert response.headers["Content-Type"] == "text/plain"
        assert response.json() == {"result": 1, "id": 1, "xid": "x"}

    def test_compression(self) -> None:
        server = MockJsonRpcServer()
        server.set_result("m", 1)
        request = httpx.Request("POST", "http://jsonrpc.test/", content=b'{"method":"m","id":1}')

        server.set_compression("gzip")
        gzipped = server.handle(request)
        server.set_compression("deflate")
        deflated = server.handle(request)

        expected = {"jsonrpc": "2.0", "result": 1, "id": 1}
        assert json.loads(gzip.decompress(b"".join(gzipped.iter_raw()))) == expected
        assert json.loads(zlib.decompress(b"".join(deflated.iter_raw()))) == expected
        assert deflated.headers["Content-Encoding"] == "deflate"

    def test_unsupported_compression(self) -> None:
        with pytest.raises(ValueError):
            MockJsonRpcServer().set_compression("br")

    def test_raw_response_and_failure_are_one_shot(self) -> None:
        server = MockJsonRpcServer()
        server.set_result("m", 1)
        server.set_failure(httpx.ConnectError("refused"))
        server.queue_raw_response("oops", status_code=503)
        request = '{"jsonrpc":"2.0","method":"m","id":1}'

        with pytest.raises(httpx.ConnectError):
            _post(server, request)
        raw = _post(server, request)
        normal = _post(server, request)

        assert raw.status_code == 503
        assert raw.text == "oops"
        assert normal.json()["result"] == 1
        assert len(server.requests) == 3

    def test_clear(self) -> None:
        server = MockJsonRpcServer()
        server.set_result("m", 1)
        server.set_content_type(None)
        _post(server, '{"jsonrpc":"2.0","method":"m","id":1}')

        server.clear()
        response = _post(server, '{"jsonrpc":"2.0","method":"m","id":1}')

        assert len(server.requests) == 1
        assert response.headers["Content-Type"] == "application/json"
        assert response.json()["error"]["code"] == METHOD_NOT_FOUND


class TestFixtures:
    """Tests for the pytest fixtures and the session context manager."""

    def test_mock_session_uses_mock_server(
        self, mock_server: MockJsonRpcServer, mock_session: JsonRpcSession
    ) -> None:
        mock_server.set_result("ping", "pong")

        response = mock_session.send(JsonRpcRequest(method="ping", id=1))

        assert_success_response(response, "pong")
        assert len(mock_server.requests) == 1

    def test_context_manager_applies_options(self) -> None:
        with session_scope(SessionOptions(origin="https://app.example.com")) as (server, session):
            server.set_result("ping", "pong")
            session.send(JsonRpcRequest(method="ping", id=1))

            assert server.requests[0].headers["Origin"] == "https://app.example.com"

        assert server.requests == []


class TestAssertions:
    """Tests for the custom assertions."""

    def test_correlates(self) -> None:
        request = JsonRpcRequest(method="m", id=5)

        assert_response_correlates(request, JsonRpcResponse.success(1, id="5"))
        with pytest.raises(AssertionError):
            assert_response_correlates(request, JsonRpcResponse.success(1, id=6))

    def test_success_and_error(self) -> None:
        success = JsonRpcResponse.success([1], id=1)
        failure = JsonRpcResponse.failure(JsonRpcError.from_code(PARSE_ERROR), id=None)

        assert_success_response(success)
        assert_success_response(success, [1])
        assert_error_response(failure)
        assert_error_response(failure, PARSE_ERROR)
        with pytest.raises(AssertionError):
            assert_success_response(failure)
        with pytest.raises(AssertionError):
            assert_error_response(failure, METHOD_NOT_FOUND)
        with pytest.raises(AssertionError):
            assert_success_response(success, [2])
