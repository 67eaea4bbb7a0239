"""Pytest configuration and shared fixtures for agentflow-client tests.

This module provides common fixtures used across all test modules,
including test settings, a scripted agent server served through
httpx.MockTransport, and builders for wire-format payloads.
"""

import inspect
import json
from typing import Any, AsyncIterator, Awaitable, Callable

import httpx
import pytest
import pytest_asyncio

from agentflow_client.config import AgentFlowSettings
from agentflow_client.transport.http import AgentFlowTransport

ResponseFactory = Callable[[httpx.Request], httpx.Response | Awaitable[httpx.Response]]


class MockAgentServer:
    """Scripted agent server for httpx.MockTransport.

    Responses are queued in order and served one per request. Every request
    is recorded so tests can assert on what the client sent.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._responses: list[httpx.Response | ResponseFactory] = []
        self.default: httpx.Response | ResponseFactory | None = None

    def queue(self, response: httpx.Response | ResponseFactory) -> None:
        self._responses.append(response)

    def queue_json(self, payload: Any, status_code: int = 200) -> None:
        self.queue(httpx.Response(status_code, json=payload))

    def queue_ndjson(self, frames: list[dict[str, Any]], chunk_size: int | None = None) -> None:
        """Queue a streaming response with one frame per line.

        Args:
            frames: Frames to encode as NDJSON
            chunk_size: If given, the body is delivered in chunks of this size
        """
        body = "".join(json.dumps(frame) + "\n" for frame in frames).encode("utf-8")

        def factory(request: httpx.Request) -> httpx.Response:
            if chunk_size is None:
                return httpx.Response(
                    200, content=body, headers={"content-type": "application/x-ndjson"}
                )

            async def chunks() -> AsyncIterator[bytes]:
                for start in range(0, len(body), chunk_size):
                    yield body[start : start + chunk_size]

            return httpx.Response(
                200, content=chunks(), headers={"content-type": "application/x-ndjson"}
            )

        self.queue(factory)

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._responses:
            response = self._responses.pop(0)
        elif self.default is not None:
            response = self.default
        else:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")

        if callable(response):
            response = response(request)
            if inspect.isawaitable(response):
                response = await response
        return response

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def json_body(self, index: int) -> Any:
        return json.loads(self.requests[index].content)


def build_invoke_payload(
    messages: list[dict[str, Any]],
    thread_id: str = "thread-1",
    **data: Any,
) -> dict[str, Any]:
    """Build a POST /v1/graph/invoke response envelope."""
    return {
        "data": {
            "messages": messages,
            "meta": {"is_new_thread": False, "thread_id": thread_id},
            **data,
        },
        "metadata": {
            "request_id": "req-1",
            "timestamp": "2026-01-01T00:00:00Z",
            "message": "OK",
        },
    }


def build_text_message(text: str, message_id: str = "msg-text") -> dict[str, Any]:
    return {
        "role": "assistant",
        "message_id": message_id,
        "content": [{"type": "text", "text": text}],
    }


def build_tool_call_message(
    name: str,
    args: dict[str, Any] | None = None,
    call_id: str = "call-1",
    message_id: str = "msg-call",
) -> dict[str, Any]:
    return {
        "role": "assistant",
        "message_id": message_id,
        "content": [
            {
                "type": "remote_tool_call",
                "id": call_id,
                "name": name,
                "args": args or {},
                "tool_type": "remote",
            }
        ],
    }


@pytest.fixture
def test_settings():
    """Create test settings pointing at the mock server.

    Returns:
        AgentFlowSettings: Settings instance configured for testing.
    """
    return AgentFlowSettings(
        base_url="http://agentflow.test/",
        auth_token="test-token",
        timeout=5.0,
        recursion_limit=25,
        response_granularity="low",
        log_level="DEBUG",
    )


@pytest.fixture
def mock_server():
    """Create an empty scripted agent server."""
    return MockAgentServer()


@pytest_asyncio.fixture
async def http_client(mock_server):
    """Create an httpx.AsyncClient routed to the mock server.

    Yields:
        httpx.AsyncClient: Client whose requests are answered by mock_server.
    """
    async with httpx.AsyncClient(transport=httpx.MockTransport(mock_server.handler)) as client:
        yield client


@pytest.fixture
def transport(test_settings, http_client):
    """Create an AgentFlowTransport using the mock HTTP client."""
    return AgentFlowTransport(test_settings, http_client=http_client)


@pytest.fixture
def invoke_payload():
    return build_invoke_payload


@pytest.fixture
def text_message():
    return build_text_message


@pytest.fixture
def tool_call_message():
    return build_tool_call_message
