from __future__ import annotations

from typing import List

import pytest
from mcp.shared.memory import create_connected_server_and_client_session
from pydantic import BaseModel, Field

from tool_servers.dispatch import ArgumentField, ToolDescriptor, ToolDispatcher
from tool_servers.errors import ArgumentValidationError, ToolRegistrationError, UnknownToolError
from tool_servers.wolfram_alpha.tools import WolframQueryArgs


class EchoArgs(BaseModel):
    text: str = Field(..., description="Text to echo")
    times: int = Field(1, description="How many times")


class PairArgs(BaseModel):
    left: str = Field(..., description="Left side")
    right: int = Field(..., description="Right side")
    verbose: bool = Field(False, description="Say more")


def echo(args: EchoArgs) -> str:
    return " ".join([args.text] * args.times)


@pytest.fixture
def dispatcher(logger) -> ToolDispatcher:
    d = ToolDispatcher("test-dispatcher", "0.0.1", logger=logger)
    d.register("echo", "Echo text back", EchoArgs, echo)
    return d


class TestDecode:
    def setup_method(self) -> None:
        self.descriptor = ToolDescriptor.build("wolfram_query", "query", WolframQueryArgs, lambda a: "")

    def test_fields_follow_model_order(self) -> None:
        assert [f.name for f in self.descriptor.fields] == [
            "query", "max_chars", "units", "country_code", "language_code", "show_steps",
        ]
        query = self.descriptor.fields[0]
        assert query == ArgumentField(
            name="query", type=str, required=True, description="The Wolfram Alpha query to execute",
        )

    def test_input_schema(self) -> None:
        schema = self.descriptor.input_schema()
        assert schema["type"] == "object"
        assert schema["required"] == ["query"]
        assert schema["properties"]["max_chars"]["type"] == "integer"
        assert schema["properties"]["units"]["enum"] == ["metric", "nonmetric"]
        assert schema["properties"]["show_steps"]["type"] == "boolean"

    def test_all_fields(self) -> None:
        args = self.descriptor.decode({
            "query": "integrate x^2",
            "max_chars": 500,
            "units": "metric",
            "country_code": "JP",
            "language_code": "ja",
            "show_steps": True,
        })
        assert args == WolframQueryArgs(
            query="integrate x^2", max_chars=500, units="metric",
            country_code="JP", language_code="ja", show_steps=True,
        )

    def test_optional_fields_default_when_absent(self) -> None:
        args = self.descriptor.decode({"query": "pi"})
        assert args.max_chars == 0
        assert args.units == ""
        assert args.country_code == ""
        assert args.show_steps is False

    @pytest.mark.parametrize(
        ("field", "value", "expected"),
        [
            ("max_chars", "1000", 0),
            ("max_chars", True, 0),
            ("max_chars", 12.5, 0),
            ("max_chars", 1500.0, 1500),
            ("units", "imperial", ""),
            ("units", 3, ""),
            ("country_code", ["JP"], ""),
            ("show_steps", "yes", False),
            ("show_steps", 1, False),
        ],
    )
    def test_mistyped_optional_field_falls_back(self, field: str, value, expected) -> None:
        args = self.descriptor.decode({"query": "pi", field: value})
        assert getattr(args, field) == expected

    @pytest.mark.parametrize("arguments", [None, {}, {"query": None}, {"max_chars": 10}])
    def test_missing_required_field(self, arguments) -> None:
        with pytest.raises(ArgumentValidationError) as exc_info:
            self.descriptor.decode(arguments)
        assert exc_info.value.fields == ["query"]
        assert "query" in str(exc_info.value)

    @pytest.mark.parametrize("query", ["", "   "])
    def test_empty_required_string(self, query: str) -> None:
        with pytest.raises(ArgumentValidationError) as exc_info:
            self.descriptor.decode({"query": query})
        assert exc_info.value.problems == {"query": "cannot be empty"}

    def test_mistyped_required_field(self) -> None:
        with pytest.raises(ArgumentValidationError) as exc_info:
            self.descriptor.decode({"query": 42})
        assert exc_info.value.fields == ["query"]
        assert "expected string" in str(exc_info.value)

    def test_every_failing_field_is_reported(self) -> None:
        descriptor = ToolDescriptor.build("pair", "pair", PairArgs, lambda a: "")
        with pytest.raises(ArgumentValidationError) as exc_info:
            descriptor.decode({"right": "not a number", "verbose": "nope"})
        assert exc_info.value.fields == ["left", "right"]
        message = str(exc_info.value)
        assert message.startswith("invalid arguments for pair:")
        assert "left: missing required argument" in message
        assert "right: expected integer" in message


class TestRegistration:
    def test_duplicate_name(self, dispatcher: ToolDispatcher) -> None:
        with pytest.raises(ToolRegistrationError):
            dispatcher.register("echo", "again", EchoArgs, echo)
        assert len(dispatcher.tools) == 1

    def test_empty_name(self, dispatcher: ToolDispatcher) -> None:
        with pytest.raises(ToolRegistrationError):
            dispatcher.register("", "nameless", EchoArgs, echo)

    def test_unsupported_argument_type(self, dispatcher: ToolDispatcher) -> None:
        class ListArgs(BaseModel):
            items: List[str] = Field(default_factory=list)

        with pytest.raises(ToolRegistrationError):
            dispatcher.register("list", "lists", ListArgs, lambda a: "")

    def test_decorator_registration(self, dispatcher: ToolDispatcher) -> None:
        @dispatcher.tool("shout", "Upper-case text", EchoArgs)
        def shout(args: EchoArgs) -> str:
            return args.text.upper()

        assert [t.name for t in dispatcher.list_tools()] == ["echo", "shout"]
        assert shout(EchoArgs(text="hi")) == "HI"


class TestCallTool:
    @pytest.mark.asyncio
    async def test_success(self, dispatcher: ToolDispatcher) -> None:
        content = await dispatcher.call_tool("echo", {"text": "hi", "times": 3})
        assert len(content) == 1
        assert content[0].type == "text"
        assert content[0].text == "hi hi hi"

    @pytest.mark.asyncio
    async def test_async_handler(self, dispatcher: ToolDispatcher) -> None:
        async def reverse(args: EchoArgs) -> str:
            return args.text[::-1]

        dispatcher.register("reverse", "Reverse text", EchoArgs, reverse)
        content = await dispatcher.call_tool("reverse", {"text": "abc"})
        assert content[0].text == "cba"

    @pytest.mark.asyncio
    async def test_unknown_tool(self, dispatcher: ToolDispatcher) -> None:
        with pytest.raises(UnknownToolError, match="Unknown tool: nope"):
            await dispatcher.call_tool("nope", {})

    @pytest.mark.asyncio
    async def test_validation_error_skips_handler(self, logger) -> None:
        calls = []

        def handler(args: EchoArgs) -> str:
            calls.append(args)
            return "called"

        d = ToolDispatcher("t", "0.0.1", logger=logger)
        d.register("echo", "Echo", EchoArgs, handler)
        with pytest.raises(ArgumentValidationError):
            await d.call_tool("echo", {"times": 2})
        assert calls == []

    @pytest.mark.asyncio
    async def test_errors_become_error_results(self, dispatcher: ToolDispatcher) -> None:
        async with create_connected_server_and_client_session(dispatcher.server) as session:
            result = await session.call_tool("echo", {"times": 2})
            assert result.isError
            assert "text: missing required argument" in result.content[0].text

            result = await session.call_tool("missing", {})
            assert result.isError
            assert "Unknown tool: missing" in result.content[0].text

            # Still serving after errors.
            result = await session.call_tool("echo", {"text": "ok", "times": "x"})
            assert not result.isError
            assert result.content[0].text == "ok"

    def test_initialization_options(self, dispatcher: ToolDispatcher) -> None:
        opts = dispatcher.initialization_options()
        assert opts.server_name == "test-dispatcher"
        assert opts.server_version == "0.0.1"
        assert opts.capabilities.tools is not None
