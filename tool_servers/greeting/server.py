"""
Greeting MCP server.

Exposes one tool, ``greeting/hello``, that answers with the configured
default message, optionally personalised with a name.

RUN:
    mcp-greeting server --config config.yml
"""

from __future__ import annotations

import logging
import sys
from typing import List, Optional

from tool_servers.cli import run_cli
from tool_servers.config import Config, GreetingConfig
from tool_servers.dispatch import ToolDispatcher
from tool_servers.greeting.tools import register_all_tools
from tool_servers.transport import transport_from_config

NAME = "mcp-greeting"
USAGE = "A simple MCP server implementation for greetings"


class GreetingServer:
    def __init__(self, cfg: GreetingConfig, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self.default_message = cfg.default_message
        self.logger.info("creating new Greeting server: default_message=%r", self.default_message)

    def generate_greeting(self, name: str = "") -> str:
        if not name:
            return self.default_message
        return self.default_message + " " + name + "!"


def build_dispatcher(cfg: Config, logger: logging.Logger, version: str) -> ToolDispatcher:
    greeter = GreetingServer(cfg.greeting, logger=logger)
    dispatcher = ToolDispatcher(NAME, version, logger=logger)
    register_all_tools(dispatcher, greeter, logger)
    return dispatcher


def run(cfg: Config, logger: logging.Logger, version: str) -> None:
    logger.info("starting MCP Greeting Server")
    dispatcher = build_dispatcher(cfg, logger, version)
    transport_from_config(cfg.transport, logger=logger).serve(dispatcher)


def main(argv: Optional[List[str]] = None) -> int:
    return run_cli(NAME, USAGE, run, argv)


if __name__ == "__main__":
    sys.exit(main())
