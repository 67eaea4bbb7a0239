"""HTTP transport and stream decoding for the AgentFlow API.

This package provides the async httpx-based transport used by every endpoint
and the NDJSON decoder the streaming endpoint depends on.
"""

from agentflow_client.transport.http import AgentFlowTransport
from agentflow_client.transport.ndjson import NdjsonDecoder, iter_ndjson

__all__ = ["AgentFlowTransport", "NdjsonDecoder", "iter_ndjson"]
