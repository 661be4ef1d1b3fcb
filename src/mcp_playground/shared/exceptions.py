"""Custom exception hierarchy for MCP Playground."""

from typing import Any


class PlaygroundError(Exception):
    """Base exception for all MCP Playground errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


# ----- Response Errors -----


class NoResponseError(PlaygroundError):
    """Provider returned no choices/candidates."""

    def __init__(self, message: str = "No response from model") -> None:
        super().__init__(message)


class MalformedArgumentsError(PlaygroundError):
    """Tool-call arguments could not be parsed into a mapping.

    Carries the raw argument text and the message content so callers can
    fall back to showing the content as a plain reply.
    """

    def __init__(self, tool_name: str, raw_arguments: str, content: str = "") -> None:
        super().__init__(
            message=f"Malformed arguments for tool {tool_name}",
            details={"tool_name": tool_name, "raw_arguments": raw_arguments},
        )
        self.tool_name = tool_name
        self.raw_arguments = raw_arguments
        self.content = content


# ----- Tool Errors -----


class ToolExecutionError(PlaygroundError):
    """A tool handler failed."""

    pass


class UnknownCatalogError(ToolExecutionError):
    """No handler group exists for the catalog id."""

    def __init__(self, catalog_id: str) -> None:
        super().__init__(
            message=f"Server {catalog_id} not implemented",
            details={"catalog_id": catalog_id},
        )


class UnknownToolError(ToolExecutionError):
    """The catalog has no tool with that name."""

    def __init__(self, tool_name: str, message: str | None = None) -> None:
        super().__init__(
            message=message or f"unknown tool: {tool_name}",
            details={"tool_name": tool_name},
        )


# ----- Validation Errors -----


class ValidationError(PlaygroundError):
    """Input validation failed."""

    pass


# ----- External Service Errors -----


class ExternalServiceError(PlaygroundError):
    """Error from an external service."""

    pass


class TransportError(ExternalServiceError):
    """Network failure talking to an upstream service."""

    pass


class AIServiceError(ExternalServiceError):
    """Error from the chat-completion provider."""

    pass


class AIRateLimitError(AIServiceError):
    """Chat-completion provider rate limit exceeded."""

    pass


# ----- Storage Errors -----


class StorageError(PlaygroundError):
    """The backing key-value store could not be read or written."""

    pass
