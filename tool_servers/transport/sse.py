from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

import uvicorn
from mcp.server.sse import SseServerTransport
from starlette.applications import Starlette
from starlette.routing import Mount

if TYPE_CHECKING:
    from tool_servers.dispatch import ToolDispatcher

MESSAGES_PATH = "/messages/"


def build_app(dispatcher: "ToolDispatcher", endpoint: str = MESSAGES_PATH) -> Starlette:
    sse = SseServerTransport(endpoint=endpoint)

    async def messages_asgi(scope, receive, send):
        # One mount serves the event stream (GET) and inbound client messages (POST).
        if scope["method"] == "GET":
            async with sse.connect_sse(scope, receive, send) as (r, w):
                await dispatcher.server.run(r, w, dispatcher.initialization_options())
        else:
            await sse.handle_post_message(scope, receive, send)

    return Starlette(routes=[
        Mount(endpoint, app=messages_asgi),
    ])


class SseTransport:
    def __init__(self, host: str = "127.0.0.1", port: int = 8000, logger: Optional[logging.Logger] = None):
        self.host = host
        self.port = port
        self.logger = logger or logging.getLogger(__name__)

    def serve(self, dispatcher: "ToolDispatcher") -> None:
        self.logger.info("starting MCP server %s over SSE on %s:%d", dispatcher.name, self.host, self.port)
        uvicorn.run(build_app(dispatcher), host=self.host, port=self.port)
        self.logger.info("server shutting down")
