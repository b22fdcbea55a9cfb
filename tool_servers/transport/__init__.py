"""Transports a ToolDispatcher can be served over."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional, Protocol

from tool_servers.config import TransportConfig
from tool_servers.errors import ConfigurationError
from tool_servers.transport.sse import SseTransport
from tool_servers.transport.stdio import StdioTransport

if TYPE_CHECKING:
    from tool_servers.dispatch import ToolDispatcher


class Transport(Protocol):
    def serve(self, dispatcher: "ToolDispatcher") -> None:
        """Block serving requests until the transport terminates."""


def transport_from_config(cfg: TransportConfig, logger: Optional[logging.Logger] = None) -> Transport:
    if cfg.type == "stdio":
        return StdioTransport(logger=logger)
    if cfg.type == "sse":
        return SseTransport(host=cfg.host, port=cfg.port, logger=logger)
    raise ConfigurationError(f"unsupported transport: {cfg.type!r}")


__all__ = ["SseTransport", "StdioTransport", "Transport", "transport_from_config"]
