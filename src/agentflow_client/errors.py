"""Typed errors for the AgentFlow API.

This module maps failed HTTP responses to a hierarchy of exceptions so callers
can react to specific failure kinds (authentication, validation, graph errors)
without inspecting raw status codes. Client-side failures that never produced
a response (timeouts, network errors, malformed stream frames) share the same
base class.
"""

from datetime import datetime, timezone
from typing import Any

import httpx


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class AgentFlowError(Exception):
    """Base error for all AgentFlow API failures.

    Attributes:
        message: Human-readable error message
        status_code: HTTP status code (0 when no response was received)
        error_code: Machine-readable error code from the server
        request_id: Server request id, or "unknown"
        timestamp: ISO 8601 timestamp of the failure
        details: Validation or diagnostic details from the server
        context: Optional extra context
        endpoint: Endpoint path that failed, if known
        method: HTTP method that failed, if known
        recovery_suggestion: Optional hint shown by get_user_message()
    """

    def __init__(
        self,
        message: str,
        status_code: int = 0,
        error_code: str = "UNKNOWN_ERROR",
        request_id: str = "unknown",
        timestamp: str | None = None,
        details: list[dict[str, Any]] | None = None,
        context: dict[str, Any] | None = None,
        endpoint: str | None = None,
        method: str | None = None,
        recovery_suggestion: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.request_id = request_id
        self.timestamp = timestamp or _now_iso()
        self.details = details or []
        self.context = context
        self.endpoint = endpoint
        self.method = method
        self.recovery_suggestion = recovery_suggestion

    def get_user_message(self) -> str:
        """Get the error message with the recovery suggestion appended."""
        if self.recovery_suggestion:
            return f"{self.message}\n\nSuggestion: {self.recovery_suggestion}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": type(self).__name__,
            "message": self.message,
            "status_code": self.status_code,
            "error_code": self.error_code,
            "request_id": self.request_id,
            "timestamp": self.timestamp,
            "details": self.details,
            "context": self.context,
            "endpoint": self.endpoint,
            "method": self.method,
            "recovery_suggestion": self.recovery_suggestion,
        }


class BadRequestError(AgentFlowError):
    def __init__(self, message: str, request_id: str = "unknown", timestamp: str | None = None, details=None):
        super().__init__(message, 400, "BAD_REQUEST", request_id, timestamp, details)


class AuthenticationError(AgentFlowError):
    def __init__(self, message: str, request_id: str = "unknown", timestamp: str | None = None, details=None):
        super().__init__(message, 401, "AUTHENTICATION_FAILED", request_id, timestamp, details)


class PermissionDeniedError(AgentFlowError):
    def __init__(self, message: str, request_id: str = "unknown", timestamp: str | None = None, details=None):
        super().__init__(message, 403, "PERMISSION_ERROR", request_id, timestamp, details)


class NotFoundError(AgentFlowError):
    def __init__(self, message: str, request_id: str = "unknown", timestamp: str | None = None, details=None):
        super().__init__(message, 404, "RESOURCE_NOT_FOUND", request_id, timestamp, details)


class ValidationError(AgentFlowError):
    def __init__(self, message: str, request_id: str = "unknown", timestamp: str | None = None, details=None):
        super().__init__(message, 422, "VALIDATION_ERROR", request_id, timestamp, details)


class ServerError(AgentFlowError):
    def __init__(
        self,
        message: str,
        request_id: str = "unknown",
        timestamp: str | None = None,
        error_code: str = "INTERNAL_SERVER_ERROR",
        details=None,
        status_code: int = 500,
    ):
        super().__init__(message, status_code, error_code, request_id, timestamp, details)


class GraphError(AgentFlowError):
    def __init__(self, message: str, request_id: str = "unknown", timestamp: str | None = None, details=None, context=None):
        super().__init__(
            message,
            500,
            "GRAPH_ERROR",
            request_id,
            timestamp,
            details,
            context,
            recovery_suggestion="Check your graph configuration and ensure all nodes are properly connected.",
        )


class NodeError(AgentFlowError):
    def __init__(
        self,
        message: str,
        request_id: str = "unknown",
        timestamp: str | None = None,
        details=None,
        context=None,
        node_name: str | None = None,
    ):
        super().__init__(
            message,
            500,
            "NODE_ERROR",
            request_id,
            timestamp,
            details,
            context,
            recovery_suggestion="Review the node implementation and ensure all required inputs are provided.",
        )
        self.node_name = node_name


class GraphRecursionError(AgentFlowError):
    def __init__(
        self,
        message: str,
        request_id: str = "unknown",
        timestamp: str | None = None,
        details=None,
        context=None,
        recursion_limit: int | None = None,
    ):
        super().__init__(
            message,
            500,
            "GRAPH_RECURSION_ERROR",
            request_id,
            timestamp,
            details,
            context,
            recovery_suggestion=(
                "Consider increasing the recursion_limit parameter or check for infinite loops in your graph."
            ),
        )
        self.recursion_limit = recursion_limit


class StorageError(AgentFlowError):
    def __init__(self, message: str, request_id: str = "unknown", timestamp: str | None = None, details=None, context=None):
        super().__init__(
            message,
            500,
            "STORAGE_ERROR",
            request_id,
            timestamp,
            details,
            context,
            recovery_suggestion="Check your storage configuration and ensure the storage backend is accessible.",
        )


class TransientStorageError(AgentFlowError):
    def __init__(self, message: str, request_id: str = "unknown", timestamp: str | None = None, details=None, context=None):
        super().__init__(
            message,
            503,
            "TRANSIENT_STORAGE_ERROR",
            request_id,
            timestamp,
            details,
            context,
            recovery_suggestion="This is a temporary issue. Please retry your request after a short delay.",
        )


class MetricsError(AgentFlowError):
    def __init__(self, message: str, request_id: str = "unknown", timestamp: str | None = None, details=None, context=None):
        super().__init__(message, 500, "METRICS_ERROR", request_id, timestamp, details, context)


class SchemaVersionError(AgentFlowError):
    def __init__(self, message: str, request_id: str = "unknown", timestamp: str | None = None, details=None, context=None):
        super().__init__(
            message,
            422,
            "SCHEMA_VERSION_ERROR",
            request_id,
            timestamp,
            details,
            context,
            recovery_suggestion="Update your client or migrate the stored data to the current schema version.",
        )


class SerializationError(AgentFlowError):
    def __init__(self, message: str, request_id: str = "unknown", timestamp: str | None = None, details=None, context=None):
        super().__init__(message, 500, "SERIALIZATION_ERROR", request_id, timestamp, details, context)


class RequestTimeoutError(AgentFlowError):
    """Raised when a transport call exceeds its wall-clock timeout."""

    def __init__(self, timeout: float, endpoint: str | None = None, method: str | None = None):
        super().__init__(
            f"Request timeout after {timeout}s",
            0,
            "REQUEST_TIMEOUT",
            endpoint=endpoint,
            method=method,
        )
        self.timeout = timeout


class NetworkError(AgentFlowError):
    """Raised when the request could not be sent or the connection dropped."""

    def __init__(self, message: str, endpoint: str | None = None, method: str | None = None):
        super().__init__(message, 0, "NETWORK_ERROR", endpoint=endpoint, method=method)


class FrameDecodeError(AgentFlowError):
    """Raised when a streamed NDJSON line is not valid JSON."""

    def __init__(self, message: str, line: str):
        super().__init__(message, 0, "FRAME_DECODE_ERROR")
        self.line = line


# Error-code prefixes take priority over the HTTP status; order matters
# because GRAPH_RECURSION and TRANSIENT_STORAGE share prefixes with others.
_ERROR_CODE_PREFIXES: list[tuple[str, type[AgentFlowError]]] = [
    ("GRAPH_RECURSION", GraphRecursionError),
    ("GRAPH", GraphError),
    ("NODE", NodeError),
    ("TRANSIENT_STORAGE", TransientStorageError),
    ("STORAGE", StorageError),
    ("METRICS", MetricsError),
    ("SCHEMA_VERSION", SchemaVersionError),
    ("SERIALIZATION", SerializationError),
]

_STATUS_ERRORS: dict[int, type[AgentFlowError]] = {
    400: BadRequestError,
    401: AuthenticationError,
    403: PermissionDeniedError,
    404: NotFoundError,
    422: ValidationError,
}

_SERVER_STATUSES = {500, 502, 503, 504}


def parse_error_response(response: httpx.Response) -> dict[str, Any] | None:
    """Parse a structured error body from a failed response.

    Args:
        response: A response whose body has already been read

    Returns:
        dict | None: The parsed `{metadata, error}` envelope, or None if the
        body is not JSON
    """
    content_type = response.headers.get("content-type", "")
    if "application/json" not in content_type:
        return None
    try:
        payload = response.json()
    except ValueError:
        return None
    return payload if isinstance(payload, dict) else None


def create_error_from_response(
    response: httpx.Response,
    fallback_message: str | None = None,
    endpoint: str | None = None,
    method: str | None = None,
) -> AgentFlowError:
    """Create the matching AgentFlowError for a failed HTTP response.

    The server's error code is matched first by prefix, then the HTTP status
    code. Responses without a parseable JSON error body fall back to a
    status-based error with request id "unknown".

    Args:
        response: The failed response (body must already be read)
        fallback_message: Message to use when the body carries none
        endpoint: Endpoint path for the base error type
        method: HTTP method for the base error type

    Returns:
        AgentFlowError: The typed error (not raised)
    """
    status = response.status_code
    error_data = parse_error_response(response)

    if error_data is not None:
        metadata = error_data.get("metadata")
        if not isinstance(metadata, dict):
            metadata = {}
        error = error_data.get("error")
        if not isinstance(error, dict):
            error = {}
        message = error.get("message") or fallback_message or f"HTTP error {status}"
        request_id = metadata.get("request_id") or "unknown"
        timestamp = metadata.get("timestamp") or _now_iso()
        details = error.get("details") or []
        error_code = str(error.get("code") or "")

        for prefix, error_cls in _ERROR_CODE_PREFIXES:
            if error_code.startswith(prefix):
                return error_cls(message, request_id, timestamp, details)
    else:
        message = fallback_message or f"HTTP error! status: {status}"
        request_id = "unknown"
        timestamp = _now_iso()
        details = []
        error_code = ""

    if status in _STATUS_ERRORS:
        return _STATUS_ERRORS[status](message, request_id, timestamp, details)
    if status in _SERVER_STATUSES:
        return ServerError(
            message,
            request_id,
            timestamp,
            error_code or "INTERNAL_SERVER_ERROR",
            details,
            status,
        )
    return AgentFlowError(
        message,
        status,
        error_code or "UNKNOWN_ERROR",
        request_id,
        timestamp,
        details,
        endpoint=endpoint,
        method=method,
    )
