"""Shared chat domain types.

Keep these types small and provider-agnostic so the interpreter, the
dispatcher and the chat service can share them without circular imports.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Literal

Role = Literal["user", "assistant", "system", "tool"]


@dataclass(frozen=True)
class ToolCall:
    """A tool invocation requested by the model."""

    name: str
    arguments: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "arguments": dict(self.arguments)}


@dataclass(frozen=True)
class NormalizedResponse:
    """A provider reply reduced to display text and at most one tool call.

    `content` has the bracket tool markup stripped; `raw_content` is the text
    exactly as the model produced it.
    """

    content: str
    tool_call: ToolCall | None = None
    raw_content: str = ""


@dataclass(frozen=True)
class ChatMessage:
    """A message in the chat conversation."""

    role: Role
    content: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    tool_name: str | None = None
    tool_call: ToolCall | None = None
    tool_result: dict[str, Any] | None = None
    is_error: bool = False

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "role": self.role,
            "content": self.content,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.tool_name is not None:
            data["toolName"] = self.tool_name
        if self.tool_call is not None:
            data["toolCall"] = self.tool_call.to_dict()
        if self.tool_result is not None:
            data["toolResult"] = self.tool_result
        if self.is_error:
            data["isError"] = True
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ChatMessage:
        tool_call = data.get("toolCall")
        timestamp = data.get("timestamp")
        return cls(
            role=data["role"],
            content=data.get("content") or "",
            timestamp=datetime.fromisoformat(timestamp) if timestamp else datetime.now(UTC),
            tool_name=data.get("toolName"),
            tool_call=ToolCall(
                name=tool_call["name"], arguments=dict(tool_call.get("arguments") or {})
            )
            if tool_call
            else None,
            tool_result=data.get("toolResult"),
            is_error=bool(data.get("isError", False)),
        )
