from __future__ import annotations

import logging
from typing import Protocol

from pydantic import BaseModel, Field

from tool_servers.dispatch import ToolDispatcher

GREETING_HELLO = "greeting/hello"


class GreetingHelloArgs(BaseModel):
    name: str = Field("", description="Optional name for personalized greeting")


class Greeter(Protocol):
    def generate_greeting(self, name: str = "") -> str: ...


def register_greeting_hello_tool(dispatcher: ToolDispatcher, greeter: Greeter,
                                 logger: logging.Logger) -> None:
    logger.debug("registering %s tool", GREETING_HELLO)

    @dispatcher.tool(GREETING_HELLO, "Generate a greeting message", GreetingHelloArgs)
    def greeting_hello(args: GreetingHelloArgs) -> str:
        logger.debug("executing %s: name=%r", GREETING_HELLO, args.name)
        return greeter.generate_greeting(args.name)


def register_all_tools(dispatcher: ToolDispatcher, greeter: Greeter, logger: logging.Logger) -> None:
    logger.info("registering all tools")
    register_greeting_hello_tool(dispatcher, greeter, logger)
    logger.info("all tools registered successfully")
