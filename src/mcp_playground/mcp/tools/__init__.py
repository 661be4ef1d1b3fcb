"""Simulated tool handlers, one module per catalog.

Each module exposes a ``TOOLS`` table mapping tool name to its input model
and async handler.
"""

from mcp_playground.mcp.tools import (
    docs_tools,
    fetch_tools,
    filesystem_tools,
    git_tools,
    http_tools,
    memory_tools,
    time_tools,
)
from mcp_playground.mcp.tools.common import ToolContext, ToolResult, ToolTable

# Catalog id -> handler table. Catalogs missing here are "not implemented".
CATALOG_TOOLS: dict[str, ToolTable] = {
    "filesystem": filesystem_tools.TOOLS,
    "memory": memory_tools.TOOLS,
    "fetch": fetch_tools.TOOLS,
    "time": time_tools.TOOLS,
    "git": git_tools.TOOLS,
    "http": http_tools.TOOLS,
    "context7": docs_tools.TOOLS,
}

__all__ = ["CATALOG_TOOLS", "ToolContext", "ToolResult", "ToolTable"]
