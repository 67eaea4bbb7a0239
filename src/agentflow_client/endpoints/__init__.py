"""Thin wrappers for the thread, graph and memory endpoints."""

from agentflow_client.endpoints import graph, memory, threads

__all__ = ["graph", "memory", "threads"]
