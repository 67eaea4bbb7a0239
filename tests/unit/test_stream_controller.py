"""Unit tests for the streaming tool-call loop (StreamController)."""

import asyncio
import json

import httpx
import pytest

from agentflow_client.config import AgentFlowSettings
from agentflow_client.errors import FrameDecodeError, RequestTimeoutError, ServerError
from agentflow_client.messages import Message
from agentflow_client.runs import STREAM_PATH, StreamController, StreamEventType
from agentflow_client.tools import ToolDescriptor, ToolDispatcher, ToolRegistry
from agentflow_client.transport.http import AgentFlowTransport


def _message_frame(message: dict, event: str = "message") -> dict:
    return {"event": event, "message": message, "thread_id": "thread-1", "run_id": "run-1"}


def _state_frame(state: dict) -> dict:
    return {"event": "state", "state": state, "thread_id": "thread-1"}


async def _collect(iterator) -> list:
    return [chunk async for chunk in iterator]


@pytest.fixture
def handler_calls():
    return []


@pytest.fixture
def controller(transport, handler_calls):
    """Create a stream controller with a recording 'add' tool."""

    def add(args):
        handler_calls.append(args)
        return args["a"] + args["b"]

    dispatcher = ToolDispatcher(ToolRegistry([ToolDescriptor(name="add", handler=add)]))
    return StreamController(transport, dispatcher)


@pytest.mark.asyncio
async def test_single_iteration_replays_frames(controller, mock_server, text_message):
    """Test that every frame is yielded in arrival order."""
    mock_server.queue_ndjson(
        [
            _message_frame(text_message("Hel", message_id="m1")),
            _message_frame(text_message("lo", message_id="m1")),
            _state_frame({"step": 1}),
        ],
        chunk_size=7,
    )

    chunks = await _collect(controller.run([Message.text_message("Hi")]))

    assert mock_server.call_count == 1
    assert mock_server.requests[0].url.path == STREAM_PATH
    assert [chunk.event for chunk in chunks] == ["message", "message", "state"]
    assert chunks[0].event == StreamEventType.MESSAGE
    assert chunks[0].message.text() == "Hel"
    assert chunks[0].thread_id == "thread-1"
    assert chunks[0].run_id == "run-1"
    assert chunks[2].message is None
    assert chunks[2].state == {"step": 1}


@pytest.mark.asyncio
async def test_tool_loop_across_two_iterations(
    controller, mock_server, handler_calls, text_message, tool_call_message
):
    """Test that tool calls trigger a second stream and all frames surface."""
    mock_server.queue_ndjson(
        [
            _message_frame(text_message("Let me add that")),
            _message_frame(tool_call_message("add", {"a": 2, "b": 5}, call_id="call-1")),
        ]
    )
    mock_server.queue_ndjson(
        [
            _message_frame(text_message("The sum is 7")),
            _state_frame({"done": True}),
        ]
    )

    chunks = await _collect(controller.run([Message.text_message("2 + 5?")], initial_state={"n": 0}))

    assert mock_server.call_count == 2
    assert len(chunks) == 4
    assert handler_calls == [{"a": 2, "b": 5}]

    first, second = mock_server.json_body(0), mock_server.json_body(1)
    assert first["initial_state"] == {"n": 0}
    assert "initial_state" not in second
    assert second["messages"][0]["role"] == "tool"
    assert second["messages"][0]["content"][0]["call_id"] == "call-1"
    assert second["messages"][0]["content"][0]["output"] == 7


@pytest.mark.asyncio
async def test_frames_surface_before_stream_ends(controller, mock_server, text_message):
    """Test that a frame is yielded before the rest of the body arrives."""
    release = asyncio.Event()
    first_line = json.dumps(_message_frame(text_message("early"))).encode() + b"\n"

    async def body():
        yield first_line
        await release.wait()
        yield b'{"event": "state", "state": {}}\n'

    mock_server.queue(lambda request: httpx.Response(200, content=body()))

    iterator = controller.run([Message.text_message("Hi")])
    first = await iterator.__anext__()
    assert first.message.text() == "early"

    release.set()
    rest = [chunk async for chunk in iterator]
    assert [chunk.event for chunk in rest] == ["state"]


@pytest.mark.asyncio
async def test_recursion_limit_stops_stream_loop(
    controller, mock_server, handler_calls, tool_call_message
):
    """Test that a tool call on every turn stops at the cap."""
    for _ in range(2):
        mock_server.queue_ndjson([_message_frame(tool_call_message("add", {"a": 1, "b": 1}))])

    chunks = await _collect(controller.run([Message.text_message("loop")], recursion_limit=2))

    assert mock_server.call_count == 2
    assert len(chunks) == 2
    assert len(handler_calls) == 2


@pytest.mark.asyncio
async def test_no_dispatcher_stops_after_first_stream(transport, mock_server, tool_call_message):
    """Test that without a dispatcher tool calls end the run."""
    mock_server.queue_ndjson([_message_frame(tool_call_message("add", {"a": 1, "b": 1}))])
    controller = StreamController(transport)

    chunks = await _collect(controller.run([Message.text_message("1 + 1?")]))

    assert mock_server.call_count == 1
    assert len(chunks) == 1


@pytest.mark.asyncio
async def test_error_status_raises(controller, mock_server):
    """Test that a failed stream request raises a typed error."""
    mock_server.queue_json(
        {"metadata": {"request_id": "r1"}, "error": {"code": "", "message": "Stream broke"}},
        status_code=500,
    )

    with pytest.raises(ServerError, match="Stream broke"):
        await _collect(controller.run([Message.text_message("Hi")]))


@pytest.mark.asyncio
async def test_malformed_frame_aborts(controller, mock_server, text_message):
    """Test that a non-JSON line ends the run with FrameDecodeError."""
    good = json.dumps(_message_frame(text_message("ok"))).encode()
    mock_server.queue(lambda request: httpx.Response(200, content=good + b"\n<html>\n"))

    received = []
    with pytest.raises(FrameDecodeError):
        async for chunk in controller.run([Message.text_message("Hi")]):
            received.append(chunk)

    assert len(received) == 1


@pytest.mark.asyncio
async def test_non_object_frame_aborts(controller, mock_server):
    """Test that a JSON line that is not an object is rejected."""
    mock_server.queue(lambda request: httpx.Response(200, content=b"[1, 2]\n"))

    with pytest.raises(FrameDecodeError):
        await _collect(controller.run([Message.text_message("Hi")]))


@pytest.mark.asyncio
async def test_stream_timeout(mock_server, http_client):
    """Test that a server that never answers raises RequestTimeoutError."""
    transport = AgentFlowTransport(
        AgentFlowSettings(base_url="http://agentflow.test", timeout=0.05), http_client=http_client
    )

    async def hang(request):
        await asyncio.sleep(1)
        return httpx.Response(200, content=b"")

    mock_server.queue(hang)

    with pytest.raises(RequestTimeoutError, match="timeout"):
        await _collect(StreamController(transport).run([Message.text_message("Hi")]))


@pytest.mark.asyncio
async def test_invalid_recursion_limit(controller, mock_server):
    """Test that a cap below one is rejected before any request."""
    with pytest.raises(ValueError):
        await _collect(controller.run([Message.text_message("Hi")], recursion_limit=0))

    assert mock_server.call_count == 0


@pytest.mark.asyncio
async def test_unrecognized_block_in_frame_is_kept(controller, mock_server):
    """Test that a frame with an unmodelled block type is yielded, not rejected."""
    message = {
        "role": "assistant",
        "message_id": "m1",
        "content": [{"type": "thinking", "thinking": "hmm"}, {"type": "text", "text": "Hi"}],
    }
    mock_server.queue_ndjson([_message_frame(message)])

    chunks = await _collect(controller.run([Message.text_message("Hi")]))

    assert len(chunks) == 1
    assert chunks[0].message.text() == "Hi"
    assert chunks[0].message.content[0].type == "thinking"
