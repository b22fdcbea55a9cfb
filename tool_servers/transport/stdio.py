from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

import anyio
from mcp.server.stdio import stdio_server

if TYPE_CHECKING:
    from tool_servers.dispatch import ToolDispatcher


class StdioTransport:
    """JSON-RPC over the process's stdin/stdout, one request at a time."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    async def serve_async(self, dispatcher: "ToolDispatcher") -> None:
        self.logger.info("starting MCP server %s over stdio", dispatcher.name)
        async with stdio_server() as (read_stream, write_stream):
            await dispatcher.server.run(
                read_stream,
                write_stream,
                dispatcher.initialization_options(),
            )
        self.logger.info("server shutting down")

    def serve(self, dispatcher: "ToolDispatcher") -> None:
        anyio.run(self.serve_async, dispatcher)
