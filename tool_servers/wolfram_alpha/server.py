"""
Wolfram Alpha MCP server.

Exposes ``wolfram_query``, which forwards a query to the Wolfram Alpha LLM
API and returns the textual answer. Requires ``wolfram.app_id`` (or
``WOLFRAM_APP_ID``) to be set.

RUN:
    mcp-wolfram-alpha server --config config.yml
"""

from __future__ import annotations

import logging
import sys
from typing import Any, List, Optional

from tool_servers.cli import run_cli
from tool_servers.config import Config, WolframConfig
from tool_servers.dispatch import ToolDispatcher
from tool_servers.errors import (
    ConfigurationError,
    RemoteAuthError,
    RemoteGenericError,
    RemoteInvalidInputError,
    RemoteNetworkError,
    RemoteServerError,
)
from tool_servers.transport import transport_from_config
from tool_servers.wolfram_alpha import client as wolfram
from tool_servers.wolfram_alpha.tools import register_all_tools

NAME = "mcp-wolfram-alpha"
USAGE = "An MCP server for querying the Wolfram Alpha LLM API"


def resolve_max_chars(options: Any, default: int) -> int:
    """Caller's ``max_chars`` when it is a positive value on a QueryOptions, else ``default``."""
    if isinstance(options, wolfram.QueryOptions) and options.max_chars > 0:
        return options.max_chars
    return default


class WolframServer:
    def __init__(self, cfg: WolframConfig, logger: Optional[logging.Logger] = None,
                 client: Optional[wolfram.WolframLLMClient] = None):
        self.cfg = cfg
        self.logger = logger or logging.getLogger(__name__)
        self.logger.info(
            "creating new Wolfram Alpha server: app_id_set=%s timeout=%s use_bearer=%s",
            cfg.app_id != "", cfg.timeout, cfg.use_bearer,
        )

        if not cfg.app_id:
            raise ConfigurationError("Wolfram Alpha AppID is required")

        if client is None:
            try:
                client = wolfram.WolframLLMClient(
                    cfg.app_id,
                    timeout=cfg.timeout,
                    use_bearer=cfg.use_bearer,
                    default_max_chars=cfg.default_max_chars,
                    user_agent=wolfram.DEFAULT_USER_AGENT,
                )
            except ValueError as e:
                self.logger.error("failed to create Wolfram Alpha client: %s", e)
                raise ConfigurationError(f"failed to create Wolfram Alpha client: {e}") from e
        self.client = client

    def execute_query(self, query: str, options: Optional[wolfram.QueryOptions] = None) -> str:
        self.logger.debug(
            "executing Wolfram Alpha query: query=%r max_chars=%d",
            query, resolve_max_chars(options, self.cfg.default_max_chars),
        )

        try:
            response = self.client.query(query, options or wolfram.QueryOptions())
        except Exception as e:
            self.logger.error("Wolfram Alpha query failed: query=%r error=%s", query, e)
            if wolfram.is_auth_error(e):
                raise RemoteAuthError("authentication error with Wolfram Alpha API", e) from e
            if wolfram.is_invalid_input_error(e):
                raise RemoteInvalidInputError("invalid input for Wolfram Alpha API", e) from e
            if wolfram.is_server_error(e):
                raise RemoteServerError("Wolfram Alpha server error", e) from e
            if wolfram.is_network_error(e):
                raise RemoteNetworkError("network error while connecting to Wolfram Alpha", e) from e
            raise RemoteGenericError("failed to execute Wolfram Alpha query", e) from e

        self.logger.debug(
            "received Wolfram Alpha response: query=%r result_length=%d", query, len(response.result),
        )
        return response.result


def build_dispatcher(cfg: Config, logger: logging.Logger, version: str) -> ToolDispatcher:
    logger.debug("creating Wolfram Alpha server")
    wolfram_server = WolframServer(cfg.wolfram, logger=logger)
    dispatcher = ToolDispatcher(NAME, version, logger=logger)
    register_all_tools(dispatcher, wolfram_server, logger)
    return dispatcher


def run(cfg: Config, logger: logging.Logger, version: str) -> None:
    logger.info("starting MCP Wolfram Alpha Server")
    try:
        dispatcher = build_dispatcher(cfg, logger, version)
    except ConfigurationError as e:
        logger.error("failed to create Wolfram Alpha server: %s", e)
        raise
    transport_from_config(cfg.transport, logger=logger).serve(dispatcher)


def main(argv: Optional[List[str]] = None) -> int:
    return run_cli(NAME, USAGE, run, argv)


if __name__ == "__main__":
    sys.exit(main())
