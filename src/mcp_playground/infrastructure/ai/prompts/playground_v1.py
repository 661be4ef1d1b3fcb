"""Playground chat prompt v1 - tool-calling via bracket markup."""

import json
from typing import Any

from mcp_playground.infrastructure.ai.prompts.base import PromptVersion
from mcp_playground.mcp.catalog import ToolCatalogEntry, describe_tools_for_prompt

TOOL_FORMAT_INSTRUCTIONS = (
    "When you need to use a tool, respond with "
    "[TOOL:tool_name]arg1=value1&arg2=value2[/TOOL]. "
    "Otherwise, respond in Spanish or English."
)


class PlaygroundPromptV1:
    """System and follow-up prompts for the playground chat.

    Tool-capable models get the tool list and the bracket markup format;
    other models only get the plain assistant instructions.
    """

    version = PromptVersion(
        version="1.0.0",
        name="playground_chat",
        description="General assistant with simulated MCP tools",
    )

    def render_tools(self, catalog: ToolCatalogEntry | None = None) -> str:
        """Describe the selected catalog's tools, or every catalog when none is selected."""
        if catalog is None:
            listing = describe_tools_for_prompt()
        else:
            signatures = ", ".join(
                f"{tool.name}({', '.join(tool.parameters)})" for tool in catalog.tools
            )
            listing = f"- {catalog.id}: {signatures}"
        return (
            "\nYou have access to these MCP tools:\n"
            f"{listing}\n"
            "Use tools when appropriate to help the user."
        )

    def render_system(
        self,
        supports_tools: bool,
        catalog: ToolCatalogEntry | None = None,
    ) -> str:
        """Render the system prompt.

        Args:
            supports_tools: Whether the model may call tools
            catalog: Selected tool catalog, if any
        """
        system = "You are a helpful AI assistant. "
        if supports_tools:
            return system + self.render_tools(catalog) + "\n\n" + TOOL_FORMAT_INSTRUCTIONS
        return system + "Respond in Spanish or English clearly and concisely."

    def render_follow_up(self, tool_result: dict[str, Any]) -> str:
        """Prompt asking the model to explain a tool result to the user."""
        return f"The tool result was: {json.dumps(tool_result)}. Explain it to the user."

    def build_messages(
        self,
        history: list[dict[str, str]],
        user_text: str,
        *,
        supports_tools: bool,
        catalog: ToolCatalogEntry | None = None,
    ) -> list[dict[str, str]]:
        """System prompt, then the history window, then the current user text."""
        return [
            {"role": "system", "content": self.render_system(supports_tools, catalog)},
            *history,
            {"role": "user", "content": user_text},
        ]
