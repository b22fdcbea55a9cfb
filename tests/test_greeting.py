from __future__ import annotations

import pytest
from mcp.shared.memory import create_connected_server_and_client_session

from tool_servers.config import GreetingConfig
from tool_servers.greeting.server import GreetingServer, build_dispatcher
from tool_servers.greeting.tools import GREETING_HELLO, GreetingHelloArgs


@pytest.mark.parametrize(
    ("default_message", "name", "expected"),
    [
        ("Hello!", "", "Hello!"),
        ("Hello!", "Tanaka", "Hello! Tanaka!"),
        ("Hi!", "Smith", "Hi! Smith!"),
        ("Good morning", "Test User", "Good morning Test User!"),
    ],
)
def test_generate_greeting(default_message: str, name: str, expected: str, logger) -> None:
    server = GreetingServer(GreetingConfig(default_message=default_message), logger=logger)
    assert server.generate_greeting(name) == expected


def test_generate_greeting_without_argument(greeting_config, logger) -> None:
    server = GreetingServer(greeting_config, logger=logger)
    assert server.default_message == "Hello!"
    assert server.generate_greeting() == "Hello!"


def test_greeting_hello_args_default() -> None:
    assert GreetingHelloArgs().name == ""
    assert GreetingHelloArgs(name="Test User").name == "Test User"


def test_greeting_tool_is_registered(config, logger) -> None:
    dispatcher = build_dispatcher(config, logger, "0.0.1")
    tools = dispatcher.list_tools()
    assert [t.name for t in tools] == [GREETING_HELLO]
    assert tools[0].description == "Generate a greeting message"
    assert tools[0].inputSchema["required"] == []
    assert tools[0].inputSchema["properties"]["name"]["type"] == "string"


@pytest.mark.asyncio
async def test_greeting_hello_direct_call(config, logger) -> None:
    dispatcher = build_dispatcher(config, logger, "0.0.1")

    content = await dispatcher.call_tool(GREETING_HELLO, {})
    assert content[0].text == "Hello!"

    content = await dispatcher.call_tool(GREETING_HELLO, {"name": "Tanaka"})
    assert content[0].text == "Hello! Tanaka!"

    # A mistyped optional name behaves like an absent one.
    content = await dispatcher.call_tool(GREETING_HELLO, {"name": 42})
    assert content[0].text == "Hello!"


@pytest.mark.asyncio
async def test_greeting_hello_over_session(config, logger) -> None:
    dispatcher = build_dispatcher(config, logger, "0.0.1")

    async with create_connected_server_and_client_session(dispatcher.server) as session:
        tools = await session.list_tools()
        assert [t.name for t in tools.tools] == [GREETING_HELLO]

        result = await session.call_tool(GREETING_HELLO, {"name": "Tanaka"})
        assert not result.isError
        assert result.content[0].type == "text"
        assert result.content[0].text == "Hello! Tanaka!"

        result = await session.call_tool(GREETING_HELLO, {})
        assert not result.isError
        assert result.content[0].text == "Hello!"
