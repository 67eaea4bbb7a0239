"""Configuration module for agentflow-client using pydantic-settings."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ResponseGranularity = Literal["full", "partial", "low"]


class AgentFlowSettings(BaseSettings):
    """Main configuration settings for agentflow-client.

    All settings can be overridden via environment variables with the AGENTFLOW_ prefix.
    For example, AGENTFLOW_BASE_URL will override the base_url setting.
    """

    # Server
    base_url: str = "http://localhost:8000"
    auth_token: str | None = None

    # Wall-clock limit in seconds for a single transport call
    timeout: float = Field(default=300.0, gt=0)

    # Tool execution loop
    recursion_limit: int = Field(default=25, ge=1)
    response_granularity: ResponseGranularity = "low"

    # Logging
    debug: bool = False
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="AGENTFLOW_")

    @property
    def normalized_base_url(self) -> str:
        """Get the base URL without a trailing slash."""
        return self.base_url.rstrip("/")
