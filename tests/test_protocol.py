"""Tests for the JSON-RPC session state machine, framing and stdio loop."""

import asyncio
import json

import pytest

from effect_solutions.docs.config import DOC_URI_TEMPLATE, TOPICS_URI, doc_uri
from effect_solutions.protocol import (
    LineBuffer,
    ProtocolSession,
    SessionState,
    decode_message,
    encode_message,
    serve_stream,
)
from effect_solutions.protocol.jsonrpc import (
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    RESOURCE_NOT_FOUND,
    jsonrpc_notification,
    jsonrpc_request,
)

TOOL_NAMES = ["search_effect_solutions", "open_issue", "get_help"]

INITIALIZE_PARAMS = {
    "protocolVersion": "2025-06-18",
    "capabilities": {},
    "clientInfo": {"name": "pytest", "version": "0"},
}


@pytest.fixture()
def session(context) -> ProtocolSession:
    return ProtocolSession(context)


@pytest.fixture()
def ready_session(session) -> ProtocolSession:
    session.handle(jsonrpc_request(1, "initialize", INITIALIZE_PARAMS))
    session.handle(jsonrpc_notification("notifications/initialized"))
    assert session.state is SessionState.READY
    return session


# ── State machine ────────────────────────────────────────


def test_requests_before_initialize_are_rejected(session) -> None:
    response = session.handle(jsonrpc_request(7, "tools/list"))

    assert response["id"] == 7
    assert response["error"]["code"] == INVALID_REQUEST
    assert "not initialized" in response["error"]["message"]
    assert "result" not in response


def test_initialize_handshake(session) -> None:
    response = session.handle(jsonrpc_request(1, "initialize", INITIALIZE_PARAMS))

    result = response["result"]
    assert response["id"] == 1
    assert result["protocolVersion"] == "2025-06-18"
    assert result["serverInfo"]["name"] == "effect-solutions"
    assert "tools" in result["capabilities"]
    assert "resources" in result["capabilities"]
    assert session.state is SessionState.INITIALIZING
    assert session.client_info == {"name": "pytest", "version": "0"}

    # Still not ready until the initialized notification arrives
    pending = session.handle(jsonrpc_request(2, "tools/list"))
    assert pending["error"]["code"] == INVALID_REQUEST

    assert session.handle(jsonrpc_notification("notifications/initialized")) is None
    assert session.state is SessionState.READY


def test_initialize_twice_is_rejected(ready_session) -> None:
    response = ready_session.handle(jsonrpc_request(9, "initialize", INITIALIZE_PARAMS))

    assert response["error"]["code"] == INVALID_REQUEST


def test_ping_works_before_initialize(session) -> None:
    assert session.handle(jsonrpc_request("p", "ping"))["result"] == {}


def test_notifications_never_respond(ready_session) -> None:
    assert ready_session.handle(jsonrpc_notification("notifications/cancelled", {"requestId": 1})) is None


def test_closed_session_ignores_messages(ready_session) -> None:
    ready_session.close()

    assert ready_session.state is SessionState.CLOSED
    assert ready_session.handle(jsonrpc_request(3, "tools/list")) is None


def test_unknown_method(ready_session) -> None:
    response = ready_session.handle(jsonrpc_request(4, "prompts/list"))

    assert response["error"]["code"] == METHOD_NOT_FOUND


def test_non_object_params(ready_session) -> None:
    response = ready_session.handle({"jsonrpc": "2.0", "id": 5, "method": "tools/call", "params": [1, 2]})

    assert response["error"]["code"] == INVALID_PARAMS


# ── Tools ────────────────────────────────────────────────


def test_tools_list(ready_session) -> None:
    tools = ready_session.handle(jsonrpc_request(2, "tools/list"))["result"]["tools"]

    assert [tool["name"] for tool in tools] == TOOL_NAMES
    assert all("inputSchema" in tool for tool in tools)


def test_tools_call_round_trip(ready_session) -> None:
    response = ready_session.handle(
        jsonrpc_request(3, "tools/call", {"name": "search_effect_solutions", "arguments": {"query": "error handling"}})
    )

    result = response["result"]
    assert response["id"] == 3
    assert result["isError"] is False
    assert json.loads(result["content"][0]["text"]) == result["structuredContent"]
    assert result["structuredContent"]["results"]


def test_tools_call_invalid_arguments_is_tool_error(ready_session) -> None:
    response = ready_session.handle(
        jsonrpc_request(3, "tools/call", {"name": "search_effect_solutions", "arguments": {}})
    )

    assert "error" not in response
    result = response["result"]
    assert result["isError"] is True
    assert result["structuredContent"]["error"]["code"] == "invalid_argument"


def test_tools_call_unknown_tool_is_tool_error(ready_session) -> None:
    response = ready_session.handle(jsonrpc_request(3, "tools/call", {"name": "rm_rf"}))

    assert response["result"]["isError"] is True
    assert response["result"]["structuredContent"]["error"]["code"] == "unknown_tool"


def test_tools_call_requires_name(ready_session) -> None:
    response = ready_session.handle(jsonrpc_request(3, "tools/call", {"arguments": {}}))

    assert response["error"]["code"] == INVALID_PARAMS


# ── Resources ────────────────────────────────────────────


def test_resources_list(ready_session, context) -> None:
    resources = ready_session.handle(jsonrpc_request(5, "resources/list"))["result"]["resources"]

    uris = [resource["uri"] for resource in resources]
    assert uris[0] == TOPICS_URI
    assert doc_uri("overview") in uris
    assert len(uris) == len(context.store) + 1


def test_resource_templates_list(ready_session) -> None:
    result = ready_session.handle(jsonrpc_request(5, "resources/templates/list"))["result"]

    assert result["resourceTemplates"][0]["uriTemplate"] == DOC_URI_TEMPLATE


def test_read_topics_resource(ready_session) -> None:
    result = ready_session.handle(jsonrpc_request(6, "resources/read", {"uri": TOPICS_URI}))["result"]

    content = result["contents"][0]
    assert content["uri"] == TOPICS_URI
    assert content["mimeType"] == "text/markdown"
    assert "Effect Solutions Documentation Index" in content["text"]
    assert "overview" in content["text"]


def test_read_doc_resource(ready_session) -> None:
    result = ready_session.handle(jsonrpc_request(6, "resources/read", {"uri": doc_uri("error-handling")}))["result"]

    assert result["contents"][0]["text"].startswith("# Error Handling\n(error-handling)\n")


@pytest.mark.parametrize("uri", [doc_uri("missing"), "https://example.com/doc"])
def test_read_unknown_resource(ready_session, uri) -> None:
    response = ready_session.handle(jsonrpc_request(6, "resources/read", {"uri": uri}))

    assert response["error"]["code"] == RESOURCE_NOT_FOUND
    assert uri in response["error"]["message"]


# ── Framing ──────────────────────────────────────────────


def test_line_buffer_keeps_partial_lines() -> None:
    buffer = LineBuffer()

    assert buffer.feed(b'{"a": ') == []
    assert buffer.feed(b'1}\r\n{"b"') == [b'{"a": 1}']
    assert buffer.pending == b'{"b"'
    assert buffer.feed(b": 2}\n\n") == [b'{"b": 2}', b""]
    assert buffer.flush() is None


def test_line_buffer_flush_returns_tail() -> None:
    buffer = LineBuffer()
    buffer.feed(b"tail")

    assert buffer.flush() == b"tail"
    assert buffer.pending == b""


@pytest.mark.parametrize(
    "line",
    [
        b"",
        b"   ",
        b"not json",
        b"[1, 2, 3]",
        b'{"id": 1, "method": "ping"}',
        b'{"jsonrpc": "1.0", "id": 1, "method": "ping"}',
        b'{"jsonrpc": "2.0", "id": 1}',
        b"\xff\xfe",
    ],
)
def test_decode_message_skips_malformed(line) -> None:
    assert decode_message(line) is None


def test_decode_message_accepts_request() -> None:
    message = decode_message(b'{"jsonrpc": "2.0", "id": 1, "method": "ping"}')

    assert message == {"jsonrpc": "2.0", "id": 1, "method": "ping"}


def test_encode_message_is_one_line() -> None:
    data = encode_message({"jsonrpc": "2.0", "id": 1, "result": {"text": "a\nb — c"}})

    assert data.endswith(b"\n")
    assert data.count(b"\n") == 1
    assert json.loads(data)["result"]["text"] == "a\nb — c"


# ── Stdio loop ───────────────────────────────────────────


async def _serve(session, chunks):
    reader = asyncio.StreamReader()
    written = []

    async def write(data: bytes) -> None:
        written.append(data)

    task = asyncio.create_task(serve_stream(session, reader, write))
    for chunk in chunks:
        reader.feed_data(chunk)
        await asyncio.sleep(0)
    reader.feed_eof()
    await task
    return [json.loads(line) for data in written for line in data.splitlines()]


def _line(message) -> bytes:
    return encode_message(message)


@pytest.mark.asyncio
async def test_serve_stream_full_session(session) -> None:
    responses = await _serve(
        session,
        [
            _line(jsonrpc_request(1, "initialize", INITIALIZE_PARAMS)),
            b"this is not json\n",
            _line(jsonrpc_notification("notifications/initialized")),
            _line(jsonrpc_request(2, "tools/list")),
            _line(
                jsonrpc_request(
                    3, "tools/call", {"name": "search_effect_solutions", "arguments": {"query": "error handling"}}
                )
            ),
        ],
    )

    assert [response["id"] for response in responses] == [1, 2, 3]
    assert [tool["name"] for tool in responses[1]["result"]["tools"]] == TOOL_NAMES
    call = responses[2]["result"]
    assert json.loads(call["content"][0]["text"]) == call["structuredContent"]
    assert call["structuredContent"]["results"]
    assert session.state is SessionState.CLOSED


@pytest.mark.asyncio
async def test_serve_stream_reassembles_split_lines(session) -> None:
    data = _line(jsonrpc_request("a", "ping")) + _line(jsonrpc_request("b", "ping"))
    middle = len(data) // 2 + 3

    responses = await _serve(session, [data[:5], data[5:middle], data[middle:]])

    assert [response["id"] for response in responses] == ["a", "b"]


@pytest.mark.asyncio
async def test_serve_stream_handles_unterminated_tail(session) -> None:
    responses = await _serve(session, [json.dumps(jsonrpc_request(1, "ping")).encode()])

    assert responses == [{"jsonrpc": "2.0", "id": 1, "result": {}}]
    assert session.state is SessionState.CLOSED
