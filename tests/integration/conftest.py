"""Pytest configuration for integration tests.

This module provides a small FastAPI stub of an AgentFlow server and an
AgentFlowClient wired to it through httpx.ASGITransport, so the whole client
stack (settings, transport, controllers, endpoints) runs against real HTTP
request and response objects without a network.

The stub agent asks for the "add" tool when a user message contains
"add", and answers with the tool output once it receives a tool result.
"""

import json
from typing import Any

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, StreamingResponse

from agentflow_client import AgentFlowClient, AgentFlowSettings


def _envelope(data: Any) -> dict[str, Any]:
    return {
        "data": data,
        "metadata": {"request_id": "stub-req", "timestamp": "2026-01-01T00:00:00Z", "message": "OK"},
    }


def _content_text(message: dict[str, Any]) -> str:
    content = message.get("content")
    if isinstance(content, str):
        return content
    return "".join(block.get("text", "") for block in content or [] if block.get("type") == "text")


def _agent_reply(messages: list[dict[str, Any]]) -> dict[str, Any]:
    """Compute the stub agent's next message."""
    last = messages[-1]
    if last["role"] == "tool":
        result = last["content"][0]
        if result.get("is_error"):
            text = f"Tool failed: {result['output']['error']}"
        else:
            text = f"The answer is {result['output']}"
        return {"role": "assistant", "message_id": "m-final", "content": [{"type": "text", "text": text}]}

    if "add" in _content_text(last):
        return {
            "role": "assistant",
            "message_id": "m-call",
            "content": [
                {
                    "type": "remote_tool_call",
                    "id": "call-add",
                    "name": "add",
                    "args": {"a": 2, "b": 3},
                    "tool_type": "remote",
                }
            ],
        }

    return {
        "role": "assistant",
        "message_id": "m-echo",
        "content": [{"type": "text", "text": f"Echo: {_content_text(last)}"}],
    }


def create_stub_app() -> FastAPI:
    """Create the stub AgentFlow server."""
    app = FastAPI()
    app.state.requests = []
    app.state.threads = {}
    app.state.memories = {}

    def _record(request: Request, payload: dict[str, Any]) -> None:
        app.state.requests.append(
            {
                "path": request.url.path,
                "body": payload,
                "authorization": request.headers.get("authorization"),
            }
        )

    @app.get("/v1/ping")
    async def ping():
        return _envelope("pong")

    @app.get("/v1/graph")
    async def graph():
        return _envelope({"nodes": [{"id": "agent"}, {"id": "tools"}], "edges": []})

    @app.post("/v1/graph/invoke")
    async def invoke(payload: dict[str, Any], request: Request):
        _record(request, payload)
        reply = _agent_reply(payload["messages"])
        return _envelope(
            {
                "messages": [reply],
                "state": {"turn": len(app.state.requests)},
                "meta": {"is_new_thread": False, "thread_id": "stub-thread"},
            }
        )

    @app.post("/v1/graph/stream")
    async def stream(payload: dict[str, Any], request: Request):
        _record(request, payload)
        reply = _agent_reply(payload["messages"])

        async def frames():
            yield json.dumps({"event": "updates", "data": {"node": "agent"}, "thread_id": "stub-thread"}) + "\n"
            yield json.dumps({"event": "message", "message": reply, "thread_id": "stub-thread"}) + "\n"

        return StreamingResponse(frames(), media_type="application/x-ndjson")

    @app.post("/v1/graph/setup")
    async def setup(payload: dict[str, Any], request: Request):
        _record(request, payload)
        app.state.tools = payload["tools"]
        return _envelope({"registered": len(payload["tools"])})

    @app.put("/v1/threads/{thread_id}/state")
    async def put_state(thread_id: str, payload: dict[str, Any]):
        app.state.threads[thread_id] = payload["state"]
        return _envelope({"state": payload["state"]})

    @app.delete("/v1/threads/{thread_id}/state")
    async def clear_state(thread_id: str):
        app.state.threads.pop(thread_id, None)
        return _envelope({"success": True})

    @app.get("/v1/threads/{thread_id}/messages/{message_id}")
    async def get_message(thread_id: str, message_id: str):
        if message_id == "missing":
            return JSONResponse(
                status_code=404,
                content={
                    "metadata": {"request_id": "stub-404"},
                    "error": {"code": "RESOURCE_NOT_FOUND", "message": f"Message {message_id} not found"},
                },
            )
        return _envelope({"role": "assistant", "message_id": message_id, "content": "stored"})

    @app.put("/v1/store/memories/{memory_id}")
    async def put_memory(memory_id: str, payload: dict[str, Any]):
        app.state.memories[memory_id] = payload["content"]
        return _envelope({"memory_id": memory_id})

    @app.post("/v1/store/memories/{memory_id}")
    async def get_memory(memory_id: str):
        return _envelope({"memory": {"id": memory_id, "content": app.state.memories.get(memory_id)}})

    return app


@pytest.fixture
def stub_app():
    return create_stub_app()


@pytest_asyncio.fixture
async def client(stub_app):
    """Create an AgentFlowClient talking to the stub server.

    Yields:
        AgentFlowClient: Client with no tools registered.
    """
    settings = AgentFlowSettings(base_url="http://stub", auth_token="stub-token", timeout=5.0)
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=stub_app)) as http_client:
        async with AgentFlowClient(settings, http_client=http_client) as agent_client:
            yield agent_client
