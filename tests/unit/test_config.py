"""Unit tests for AgentFlowSettings."""

import pytest
from pydantic import ValidationError

from agentflow_client.config import AgentFlowSettings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove AGENTFLOW_ variables so defaults are deterministic."""
    for name in (
        "AGENTFLOW_BASE_URL",
        "AGENTFLOW_AUTH_TOKEN",
        "AGENTFLOW_TIMEOUT",
        "AGENTFLOW_RECURSION_LIMIT",
        "AGENTFLOW_RESPONSE_GRANULARITY",
        "AGENTFLOW_DEBUG",
        "AGENTFLOW_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    """Test default settings."""
    settings = AgentFlowSettings()

    assert settings.base_url == "http://localhost:8000"
    assert settings.auth_token is None
    assert settings.timeout == 300.0
    assert settings.recursion_limit == 25
    assert settings.response_granularity == "low"
    assert settings.debug is False
    assert settings.log_level == "INFO"


def test_env_prefix(monkeypatch):
    """Test loading settings from AGENTFLOW_ environment variables."""
    monkeypatch.setenv("AGENTFLOW_BASE_URL", "https://agents.example.com/")
    monkeypatch.setenv("AGENTFLOW_AUTH_TOKEN", "secret")
    monkeypatch.setenv("AGENTFLOW_TIMEOUT", "12.5")
    monkeypatch.setenv("AGENTFLOW_RECURSION_LIMIT", "7")
    monkeypatch.setenv("AGENTFLOW_DEBUG", "true")

    settings = AgentFlowSettings()

    assert settings.base_url == "https://agents.example.com/"
    assert settings.normalized_base_url == "https://agents.example.com"
    assert settings.auth_token == "secret"
    assert settings.timeout == 12.5
    assert settings.recursion_limit == 7
    assert settings.debug is True


def test_explicit_values_override_env(monkeypatch):
    """Test that constructor arguments win over the environment."""
    monkeypatch.setenv("AGENTFLOW_RECURSION_LIMIT", "7")

    settings = AgentFlowSettings(recursion_limit=3)

    assert settings.recursion_limit == 3


@pytest.mark.parametrize(
    "kwargs",
    [
        {"timeout": 0},
        {"recursion_limit": 0},
        {"response_granularity": "everything"},
    ],
)
def test_invalid_values_rejected(kwargs):
    """Test validation of settings values."""
    with pytest.raises(ValidationError):
        AgentFlowSettings(**kwargs)
