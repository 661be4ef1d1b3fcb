"""Static tool catalogs ("MCP servers") offered to tool-capable models.

Every catalog here is configuration only. Which ones actually execute is
decided by the dispatcher; the rest answer "not implemented".
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ToolParameter:
    """One parameter of a tool."""

    type: str
    description: str = ""
    required: bool = False
    default: Any = None
    enum: tuple[str, ...] | None = None

    def to_json_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {"type": self.type}
        if self.description:
            schema["description"] = self.description
        if self.enum:
            schema["enum"] = list(self.enum)
        if self.default is not None:
            schema["default"] = self.default
        return schema


@dataclass(frozen=True)
class ToolDescriptor:
    """A tool as advertised to the model."""

    name: str
    description: str
    parameters: dict[str, ToolParameter] = field(default_factory=dict)

    @property
    def required_parameters(self) -> list[str]:
        return [name for name, param in self.parameters.items() if param.required]

    def parameters_schema(self) -> dict[str, Any]:
        """Render parameters as the JSON-schema subset providers accept."""
        schema: dict[str, Any] = {
            "type": "object",
            "properties": {
                name: param.to_json_schema() for name, param in self.parameters.items()
            },
        }
        if self.required_parameters:
            schema["required"] = self.required_parameters
        return schema

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.parameters_schema(),
        }


@dataclass(frozen=True)
class ToolCatalogEntry:
    """A selectable tool catalog."""

    id: str
    name: str
    icon: str
    description: str
    category: str
    tools: tuple[ToolDescriptor, ...]
    requires_auth: bool = False

    def get_tool(self, name: str) -> ToolDescriptor | None:
        for tool in self.tools:
            if tool.name == name:
                return tool
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "icon": self.icon,
            "description": self.description,
            "category": self.category,
            "requiresAuth": self.requires_auth,
            "tools": [tool.to_dict() for tool in self.tools],
        }


def _param(type_: str, description: str = "", **kwargs: Any) -> ToolParameter:
    return ToolParameter(type=type_, description=description, **kwargs)


_REPO_PATH = _param("string", "Repository path", default=".")

MCP_SERVERS: dict[str, ToolCatalogEntry] = {
    entry.id: entry
    for entry in (
        ToolCatalogEntry(
            id="filesystem",
            name="File System",
            icon="📁",
            description="Access and manage files in the filesystem",
            category="storage",
            tools=(
                ToolDescriptor(
                    "read_file",
                    "Read contents of a file",
                    {"path": _param("string", "Path to the file", required=True)},
                ),
                ToolDescriptor(
                    "write_file",
                    "Write content to a file",
                    {
                        "path": _param("string", "Path to the file", required=True),
                        "content": _param("string", "Content to write", required=True),
                    },
                ),
                ToolDescriptor(
                    "create_directory",
                    "Create a new directory",
                    {"path": _param("string", "Path for the new directory", required=True)},
                ),
                ToolDescriptor(
                    "list_directory",
                    "List files in a directory",
                    {"path": _param("string", "Directory path to list", required=True)},
                ),
                ToolDescriptor(
                    "delete",
                    "Delete a file or directory",
                    {
                        "path": _param("string", "Path to delete", required=True),
                        "recursive": _param("boolean", "Delete recursively", default=False),
                    },
                ),
            ),
        ),
        ToolCatalogEntry(
            id="memory",
            name="Memory",
            icon="💾",
            description="Persistent vector storage for memories",
            category="storage",
            tools=(
                ToolDescriptor(
                    "append",
                    "Add new memory to collection",
                    {
                        "collection": _param("string", "Collection name", default="default"),
                        "content": _param("string", "Memory content to store", required=True),
                    },
                ),
                ToolDescriptor(
                    "query",
                    "Query memories by similarity",
                    {
                        "collection": _param("string", "Collection name", default="default"),
                        "query": _param("string", "Query text", required=True),
                        "limit": _param("number", "Max results", default=5),
                    },
                ),
                ToolDescriptor("list_collections", "List all collections"),
                ToolDescriptor(
                    "create_collection",
                    "Create a new collection",
                    {"name": _param("string", "Collection name", required=True)},
                ),
            ),
        ),
        ToolCatalogEntry(
            id="fetch",
            name="Web Fetch",
            icon="🌐",
            description="Fetch content from URLs",
            category="web",
            tools=(
                ToolDescriptor(
                    "fetch",
                    "Fetch content from a URL",
                    {
                        "url": _param("string", "URL to fetch", required=True),
                        "max_length": _param("number", "Max characters", default=10000),
                    },
                ),
            ),
        ),
        ToolCatalogEntry(
            id="time",
            name="Time",
            icon="⏰",
            description="Get current time and date",
            category="utility",
            tools=(
                ToolDescriptor("get_current_time", "Get current UTC time in RFC 3339 format"),
                ToolDescriptor(
                    "get_timezone",
                    "Get time for a specific timezone",
                    {
                        "timezone": _param(
                            "string", "IANA timezone (e.g., America/New_York)", required=True
                        )
                    },
                ),
            ),
        ),
        ToolCatalogEntry(
            id="sequentialthinking",
            name="Sequential Thinking",
            icon="🧠",
            description="Advanced reasoning and thought processing",
            category="reasoning",
            tools=(
                ToolDescriptor(
                    "think",
                    "Process thoughts sequentially with context",
                    {
                        "thought": _param("string", "Current thought", required=True),
                        "context": _param("string", "Previous context"),
                        "depth": _param("number", "Thinking depth", default=3),
                    },
                ),
            ),
        ),
        ToolCatalogEntry(
            id="git",
            name="Git",
            icon="📚",
            description="Git repository operations",
            category="development",
            tools=(
                ToolDescriptor("git_status", "Show working tree status", {"repo_path": _REPO_PATH}),
                ToolDescriptor(
                    "git_log",
                    "Show commit history",
                    {
                        "repo_path": _REPO_PATH,
                        "max_count": _param("number", "Max commits", default=10),
                    },
                ),
                ToolDescriptor("git_branch", "List all branches", {"repo_path": _REPO_PATH}),
            ),
        ),
        ToolCatalogEntry(
            id="http",
            name="HTTP",
            icon="🔗",
            description="Make HTTP requests",
            category="web",
            tools=(
                ToolDescriptor(
                    "request",
                    "Make an HTTP request",
                    {
                        "method": _param(
                            "string",
                            enum=("GET", "POST", "PUT", "DELETE", "PATCH"),
                            default="GET",
                        ),
                        "url": _param("string", "Request URL", required=True),
                        "headers": _param("object", "Request headers"),
                        "body": _param("string", "Request body"),
                    },
                ),
            ),
        ),
        ToolCatalogEntry(
            id="sqlite",
            name="SQLite",
            icon="🗃️",
            description="SQLite database operations",
            category="database",
            tools=(
                ToolDescriptor(
                    "query",
                    "Execute a SQL query",
                    {
                        "database": _param("string", "Database path", default=":memory:"),
                        "query": _param("string", "SQL query", required=True),
                    },
                ),
            ),
        ),
        ToolCatalogEntry(
            id="puppeteer",
            name="Browser",
            icon="🌎",
            description="Browser automation",
            category="automation",
            tools=(
                ToolDescriptor(
                    "navigate",
                    "Navigate to a URL",
                    {"url": _param("string", "URL to navigate", required=True)},
                ),
                ToolDescriptor(
                    "screenshot", "Take a screenshot", {"path": _param("string", "Save path")}
                ),
            ),
        ),
        ToolCatalogEntry(
            id="context7",
            name="Context7",
            icon="📖",
            description="Documentation lookup",
            category="reference",
            tools=(
                ToolDescriptor(
                    "search_docs",
                    "Search documentation",
                    {
                        "query": _param("string", "Search query", required=True),
                        "source": _param("string", "Documentation source"),
                    },
                ),
            ),
        ),
        ToolCatalogEntry(
            id="everything",
            name="Everything",
            icon="🔮",
            description="Comprehensive MCP tools",
            category="utility",
            tools=(
                ToolDescriptor(
                    "everything",
                    "General purpose tool",
                    {
                        "action": _param("string", "Action to perform", required=True),
                        "params": _param("object", "Action parameters"),
                    },
                ),
            ),
        ),
    )
}

# Listed for display only; none of them can be selected without credentials
AUTH_REQUIRED_SERVERS: tuple[str, ...] = (
    "github",
    "notion",
    "slack",
    "gmail",
    "google-drive",
    "linear",
    "confluence",
    "jira",
    "postgres",
    "mongodb",
    "redis",
    "elasticsearch",
    "supabase",
    "neon",
    "stripe",
)


def get_catalog(catalog_id: str) -> ToolCatalogEntry | None:
    return MCP_SERVERS.get(catalog_id)


def get_all_tools() -> list[dict[str, Any]]:
    """Flatten every catalog's tools, tagged with their server."""
    tools: list[dict[str, Any]] = []
    for server in MCP_SERVERS.values():
        for tool in server.tools:
            tools.append(
                {
                    **tool.to_dict(),
                    "serverId": server.id,
                    "serverName": server.name,
                    "serverIcon": server.icon,
                }
            )
    return tools


def get_tools_schema() -> list[dict[str, Any]]:
    """Per-server tool listing in the shape handed to LLM prompts."""
    return [
        {
            "name": server.id,
            "description": server.description,
            "tools": [
                {
                    "name": tool.name,
                    "description": tool.description,
                    "input_schema": tool.parameters_schema(),
                }
                for tool in server.tools
            ],
        }
        for server in MCP_SERVERS.values()
    ]


def to_openai_tools(tools: list[ToolDescriptor] | tuple[ToolDescriptor, ...]) -> list[dict[str, Any]]:
    """Convert descriptors to OpenAI function-calling tool definitions."""
    return [
        {
            "type": "function",
            "function": {
                "name": tool.name,
                "description": tool.description,
                "parameters": tool.parameters_schema(),
            },
        }
        for tool in tools
    ]


def to_gemini_tools(tools: list[ToolDescriptor] | tuple[ToolDescriptor, ...]) -> list[dict[str, Any]]:
    """Convert descriptors to a Gemini `tools` entry with function declarations."""
    if not tools:
        return []
    return [
        {
            "functionDeclarations": [
                {
                    "name": tool.name,
                    "description": tool.description,
                    "parameters": tool.parameters_schema(),
                }
                for tool in tools
            ]
        }
    ]


def describe_tools_for_prompt() -> str:
    """One line per catalog, listing each tool with its parameter names."""
    lines = []
    for server in MCP_SERVERS.values():
        signatures = ", ".join(
            f"{tool.name}({', '.join(tool.parameters)})" for tool in server.tools
        )
        lines.append(f"- {server.id}: {signatures}")
    return "\n".join(lines)
