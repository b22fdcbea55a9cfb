"""
Tool dispatch adapter.

Bridges the low-level MCP ``Server`` and plain Python capability providers:

1. each tool is declared with a pydantic model describing its arguments;
2. incoming untyped argument bags are decoded against that model;
3. the handler's string result goes back as a single ``TextContent``;
4. errors are logged and re-raised so the SDK turns them into an error
   result (``isError: true``) carrying the message text.

Decoding is deliberately forgiving for optional fields: a missing, mistyped
or out-of-enum optional value falls back to the model default. Required
fields must be present, correctly typed and (for strings) non-empty; all
failures are reported together.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Tuple, Type, Union

import anyio
import mcp.types as types
from mcp.server.lowlevel import NotificationOptions, Server
from mcp.server.models import InitializationOptions
from pydantic import BaseModel

from tool_servers.errors import ArgumentValidationError, ToolRegistrationError, ToolServerError, UnknownToolError

Handler = Callable[[Any], Union[str, Awaitable[str]]]

JSON_TYPES: Dict[type, str] = {
    str: "string",
    int: "integer",
    float: "number",
    bool: "boolean",
}


@dataclass(frozen=True)
class ArgumentField:
    name: str
    type: type
    required: bool
    description: str = ""
    enum: Optional[Tuple[Any, ...]] = None

    def json_schema(self) -> Dict[str, Any]:
        schema: Dict[str, Any] = {"type": JSON_TYPES[self.type]}
        if self.description:
            schema["description"] = self.description
        if self.enum is not None:
            schema["enum"] = list(self.enum)
        return schema

    def coerce(self, value: Any) -> Tuple[bool, Any]:
        """Return ``(ok, value)`` where value is converted to the declared type."""
        if self.type is bool:
            ok = isinstance(value, bool)
        elif self.type is int:
            # JSON numbers may arrive as 3.0; bool is an int subclass and is rejected.
            if isinstance(value, float) and value.is_integer():
                value = int(value)
            ok = isinstance(value, int) and not isinstance(value, bool)
        elif self.type is float:
            ok = isinstance(value, (int, float)) and not isinstance(value, bool)
            if ok:
                value = float(value)
        else:
            ok = isinstance(value, self.type)
        if ok and self.enum is not None and value not in self.enum:
            ok = False
        return ok, value


def fields_from_model(model: Type[BaseModel]) -> Tuple[ArgumentField, ...]:
    fields = []
    for name, info in model.model_fields.items():
        if info.annotation not in JSON_TYPES:
            raise ToolRegistrationError(
                f"argument {name!r} of {model.__name__} has unsupported type {info.annotation!r}"
            )
        extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
        enum = extra.get("enum")
        fields.append(
            ArgumentField(
                name=name,
                type=info.annotation,
                required=info.is_required(),
                description=info.description or "",
                enum=tuple(enum) if enum is not None else None,
            )
        )
    return tuple(fields)


@dataclass(frozen=True)
class ToolDescriptor:
    name: str
    description: str
    args_model: Type[BaseModel]
    handler: Handler
    fields: Tuple[ArgumentField, ...]

    @classmethod
    def build(cls, name: str, description: str, args_model: Type[BaseModel], handler: Handler) -> "ToolDescriptor":
        if not name:
            raise ToolRegistrationError("tool name cannot be empty")
        return cls(name, description, args_model, handler, fields_from_model(args_model))

    def input_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {f.name: f.json_schema() for f in self.fields},
            "required": [f.name for f in self.fields if f.required],
        }

    def to_tool(self) -> types.Tool:
        return types.Tool(name=self.name, description=self.description, inputSchema=self.input_schema())

    def decode(self, arguments: Optional[Mapping[str, Any]]) -> BaseModel:
        arguments = arguments or {}
        values: Dict[str, Any] = {}
        problems: Dict[str, str] = {}

        for field in self.fields:
            raw = arguments.get(field.name)
            if raw is None:
                if field.required:
                    problems[field.name] = "missing required argument"
                continue

            ok, value = field.coerce(raw)
            if not ok:
                if field.required:
                    expected = JSON_TYPES[field.type]
                    if field.enum is not None:
                        expected = " or ".join(str(v) for v in field.enum)
                    problems[field.name] = f"expected {expected}, got {raw!r}"
                continue
            if field.required and field.type is str and not value.strip():
                problems[field.name] = "cannot be empty"
                continue
            values[field.name] = value

        if problems:
            raise ArgumentValidationError(self.name, problems)
        return self.args_model.model_validate(values)

    async def invoke(self, args: BaseModel) -> str:
        if inspect.iscoroutinefunction(self.handler):
            return await self.handler(args)
        # Providers may block on network I/O; keep them off the event loop.
        return await anyio.to_thread.run_sync(self.handler, args)


class ToolDispatcher:
    """Registry of tools plus the low-level MCP ``Server`` that serves them."""

    def __init__(self, name: str, version: str, logger: Optional[logging.Logger] = None):
        self.name = name
        self.version = version
        self.logger = logger or logging.getLogger(__name__)
        self._tools: Dict[str, ToolDescriptor] = {}
        self.server: Server = Server(name, version=version)
        self._install_handlers()

    # -------------------- registration --------------------

    def register(self, name: str, description: str, args_model: Type[BaseModel],
                 handler: Handler) -> ToolDescriptor:
        if name in self._tools:
            raise ToolRegistrationError(f"tool {name!r} is already registered")
        descriptor = ToolDescriptor.build(name, description, args_model, handler)
        self._tools[name] = descriptor
        self.logger.debug("registered tool %s with arguments %s", name, [f.name for f in descriptor.fields])
        return descriptor

    def tool(self, name: str, description: str, args_model: Type[BaseModel]) -> Callable[[Handler], Handler]:
        def decorator(func: Handler) -> Handler:
            self.register(name, description, args_model, func)
            return func

        return decorator

    @property
    def tools(self) -> List[ToolDescriptor]:
        return list(self._tools.values())

    # -------------------- request handling --------------------

    def list_tools(self) -> List[types.Tool]:
        return [descriptor.to_tool() for descriptor in self._tools.values()]

    async def call_tool(self, name: str, arguments: Optional[Mapping[str, Any]]) -> List[types.TextContent]:
        descriptor = self._tools.get(name)
        if descriptor is None:
            self.logger.error("unknown tool requested: %s", name)
            raise UnknownToolError(name)

        try:
            args = descriptor.decode(arguments)
            self.logger.debug("executing %s: %s", name, args.model_dump())
            result = await descriptor.invoke(args)
        except ToolServerError as e:
            self.logger.error("tool %s failed: arguments=%r error=%s", name, dict(arguments or {}), e)
            raise
        except Exception:
            self.logger.exception("tool %s raised unexpectedly: arguments=%r", name, dict(arguments or {}))
            raise

        self.logger.debug("%s executed successfully: result_length=%d", name, len(result))
        return [types.TextContent(type="text", text=result)]

    def initialization_options(self) -> InitializationOptions:
        return InitializationOptions(
            server_name=self.name,
            server_version=self.version,
            capabilities=self.server.get_capabilities(
                notification_options=NotificationOptions(),
                experimental_capabilities={},
            ),
        )

    def _install_handlers(self) -> None:
        @self.server.list_tools()
        async def list_tools() -> list[types.Tool]:
            return self.list_tools()

        # Arguments are decoded by the descriptors; the SDK's strict JSON-schema
        # check would reject mistyped optional fields that should fall back.
        @self.server.call_tool(validate_input=False)
        async def call_tool(name: str, arguments: dict) -> list[types.TextContent]:
            return await self.call_tool(name, arguments)
