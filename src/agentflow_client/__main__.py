"""CLI entry point for agentflow-client.

This module provides a small command-line interface that sends one prompt to
an AgentFlow server and prints the reply. It can be invoked as
`agentflow-client` (via the script entry point) or `python -m agentflow_client`.
"""

import argparse
import asyncio
import logging
import sys

from agentflow_client import __version__
from agentflow_client.client import AgentFlowClient
from agentflow_client.config import AgentFlowSettings
from agentflow_client.errors import AgentFlowError
from agentflow_client.messages.types import Message


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="agentflow-client",
        description="Send a prompt to an AgentFlow agent graph and print the reply",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"agentflow-client {__version__}",
    )

    parser.add_argument(
        "--base-url",
        type=str,
        default=None,
        help="AgentFlow server URL (default: http://localhost:8000, can be set via AGENTFLOW_BASE_URL)",
    )

    parser.add_argument(
        "--auth-token",
        type=str,
        default=None,
        help="Bearer token for the server (can be set via AGENTFLOW_AUTH_TOKEN)",
    )

    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Request timeout in seconds (default: 300, can be set via AGENTFLOW_TIMEOUT)",
    )

    parser.add_argument(
        "--recursion-limit",
        type=int,
        default=None,
        help="Maximum number of turns (default: 25, can be set via AGENTFLOW_RECURSION_LIMIT)",
    )

    parser.add_argument(
        "--stream",
        action="store_true",
        help="Use the streaming endpoint and print messages as they arrive",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO, can be set via AGENTFLOW_LOG_LEVEL)",
    )

    parser.add_argument("prompt", type=str, help="Prompt to send as a user message")

    return parser


def settings_from_args(args: argparse.Namespace) -> AgentFlowSettings:
    """Build settings, CLI args override environment variables."""
    settings_kwargs = {}
    if args.base_url is not None:
        settings_kwargs["base_url"] = args.base_url
    if args.auth_token is not None:
        settings_kwargs["auth_token"] = args.auth_token
    if args.timeout is not None:
        settings_kwargs["timeout"] = args.timeout
    if args.recursion_limit is not None:
        settings_kwargs["recursion_limit"] = args.recursion_limit
    if args.log_level is not None:
        settings_kwargs["log_level"] = args.log_level

    return AgentFlowSettings(**settings_kwargs)


async def run_prompt(settings: AgentFlowSettings, prompt: str, stream: bool) -> None:
    messages = [Message.text_message(prompt)]
    async with AgentFlowClient(settings) as client:
        if stream:
            async for chunk in client.stream(messages):
                if chunk.message is not None and chunk.message.role == "assistant":
                    print(chunk.message.text(), end="" if chunk.message.delta else "\n", flush=True)
            return

        result = await client.invoke(messages)
        for message in result.messages:
            print(message.text())
        if result.recursion_limit_reached:
            print(
                f"Stopped after {result.iterations} turn(s): recursion limit reached",
                file=sys.stderr,
            )


def main() -> int:
    """Main entry point for the agentflow-client CLI.

    Parses command-line arguments, configures logging and sends the prompt.

    Returns:
        int: Process exit code
    """
    args = build_parser().parse_args()
    settings = settings_from_args(args)

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        asyncio.run(run_prompt(settings, args.prompt, args.stream))
    except AgentFlowError as e:
        print(f"Error: {e.get_user_message()}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
