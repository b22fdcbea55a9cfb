from __future__ import annotations


class ToolServerError(Exception):
    """Base class for every error raised by the tool servers."""


class ConfigurationError(ToolServerError):
    """Startup-time problem: bad config file, missing credential, bad registration."""


class ToolRegistrationError(ConfigurationError):
    pass


class UnknownToolError(ToolServerError):
    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class ArgumentValidationError(ToolServerError):
    """One or more required tool arguments are missing or invalid.

    ``problems`` maps each failing field to a short reason so every failure is
    reported in a single response.
    """

    def __init__(self, tool: str, problems: dict[str, str]):
        self.tool = tool
        self.problems = dict(problems)
        details = "; ".join(f"{field}: {reason}" for field, reason in self.problems.items())
        super().__init__(f"invalid arguments for {tool}: {details}")

    @property
    def fields(self) -> list[str]:
        return list(self.problems)


class RemoteQueryError(ToolServerError):
    """A call to the external API failed. Carries the context it failed in."""

    def __init__(self, context: str, cause: BaseException | None = None):
        message = f"{context}: {cause}" if cause is not None else context
        super().__init__(message)
        self.context = context
        self.cause = cause


class RemoteAuthError(RemoteQueryError):
    pass


class RemoteInvalidInputError(RemoteQueryError):
    pass


class RemoteServerError(RemoteQueryError):
    pass


class RemoteNetworkError(RemoteQueryError):
    pass


class RemoteGenericError(RemoteQueryError):
    pass
