"""Async HTTP transport for the AgentFlow API.

This module wraps httpx.AsyncClient and provides the two call shapes the
client needs: buffered JSON request/response calls and NDJSON frame streams.
Every call is bound to the configured wall-clock timeout and every failure is
translated into an AgentFlowError, so httpx exceptions never reach callers.
"""

import asyncio
import json
import logging
from typing import Any, AsyncGenerator

import httpx

from agentflow_client.config import AgentFlowSettings
from agentflow_client.errors import NetworkError, RequestTimeoutError, create_error_from_response
from agentflow_client.transport.ndjson import iter_ndjson

logger = logging.getLogger(__name__)


class AgentFlowTransport:
    """Async transport for talking to the AgentFlow API.

    The transport is designed to be created once per client and reused. An
    existing httpx.AsyncClient can be passed in (for custom transports or
    connection pools); it is then left open by aclose().

    Attributes:
        settings: Client settings (base URL, auth token, timeout, debug)
        _client: The underlying httpx.AsyncClient instance
    """

    def __init__(
        self,
        settings: AgentFlowSettings,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            settings: Client settings
            http_client: Optional pre-configured httpx.AsyncClient
        """
        self.settings = settings
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(settings.timeout)
        )
        logger.info(f"AgentFlowTransport initialized with base URL: {settings.normalized_base_url}")

    def _url(self, path: str) -> str:
        return f"{self.settings.normalized_base_url}/{path.lstrip('/')}"

    def _headers(self, accept: str = "application/json") -> dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": accept}
        if self.settings.auth_token:
            headers["Authorization"] = f"Bearer {self.settings.auth_token}"
        return headers

    def _log_payload(self, method: str, path: str, body: Any) -> None:
        if self.settings.debug and body is not None:
            logger.debug(f"{method} {path} payload: {json.dumps(body, indent=2, default=str)}")

    async def request_json(
        self,
        method: str,
        path: str,
        *,
        json_body: Any | None = None,
        params: dict[str, Any] | None = None,
        fallback_message: str | None = None,
    ) -> dict[str, Any]:
        """Send a request and return the parsed JSON body.

        Args:
            method: HTTP method
            path: Endpoint path relative to the base URL
            json_body: Optional JSON request body
            params: Optional query parameters; None values are dropped
            fallback_message: Error message used when the server sends none

        Returns:
            dict: The parsed response body (empty for an empty body)

        Raises:
            RequestTimeoutError: If the call exceeds the configured timeout
            NetworkError: If the request could not be completed
            AgentFlowError: If the server answers with a non-2xx status
        """
        self._log_payload(method, path, json_body)
        query = {key: value for key, value in (params or {}).items() if value is not None}

        try:
            response = await asyncio.wait_for(
                self._client.request(
                    method,
                    self._url(path),
                    json=json_body,
                    params=query or None,
                    headers=self._headers(),
                ),
                timeout=self.settings.timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            logger.warning(f"{method} {path} timed out after {self.settings.timeout}s")
            raise RequestTimeoutError(self.settings.timeout, path, method) from e
        except httpx.RequestError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise NetworkError(f"{method} {path} failed: {e}", path, method) from e

        if response.is_error:
            logger.warning(f"{method} {path} failed with HTTP {response.status_code}")
            raise create_error_from_response(response, fallback_message, path, method)

        if not response.content:
            return {}
        data = response.json()
        if self.settings.debug:
            logger.debug(f"{method} {path} response: {json.dumps(data, indent=2, default=str)}")
        return data

    async def stream_json_lines(
        self,
        path: str,
        json_body: Any,
        *,
        fallback_message: str | None = None,
    ) -> AsyncGenerator[dict[str, Any], None]:
        """POST a request and yield the NDJSON records of the response.

        The timeout bounds the wait for the response headers and each
        subsequent read of the body.

        Args:
            path: Endpoint path relative to the base URL
            json_body: JSON request body
            fallback_message: Error message used when the server sends none

        Yields:
            dict: One parsed record per response line, in arrival order

        Raises:
            RequestTimeoutError: If the call exceeds the configured timeout
            NetworkError: If the request or the stream fails
            AgentFlowError: If the server answers with a non-2xx status
            FrameDecodeError: If a line is not valid JSON
        """
        self._log_payload("POST", path, json_body)
        request = self._client.build_request(
            "POST",
            self._url(path),
            json=json_body,
            headers=self._headers(accept="application/x-ndjson"),
        )

        try:
            response = await asyncio.wait_for(
                self._client.send(request, stream=True),
                timeout=self.settings.timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            logger.warning(f"POST {path} stream timed out after {self.settings.timeout}s")
            raise RequestTimeoutError(self.settings.timeout, path, "POST") from e
        except httpx.RequestError as e:
            logger.error(f"POST {path} stream failed: {e}")
            raise NetworkError(f"POST {path} failed: {e}", path, "POST") from e

        try:
            if response.is_error:
                await response.aread()
                logger.warning(f"POST {path} stream failed with HTTP {response.status_code}")
                raise create_error_from_response(response, fallback_message, path, "POST")

            try:
                async for record in iter_ndjson(response.aiter_bytes()):
                    yield record
            except httpx.TimeoutException as e:
                logger.warning(f"POST {path} stream read timed out after {self.settings.timeout}s")
                raise RequestTimeoutError(self.settings.timeout, path, "POST") from e
            except httpx.RequestError as e:
                logger.error(f"POST {path} stream interrupted: {e}")
                raise NetworkError(f"POST {path} stream interrupted: {e}", path, "POST") from e
        finally:
            await response.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()
        logger.debug("AgentFlowTransport closed")
