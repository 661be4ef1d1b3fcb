"""Tool dispatcher for the chat service.

Routes a tool call to the simulated handler for the selected catalog.
Uses a strategy dict pattern: catalog id -> tool name -> (input model, handler).

`ToolDispatcher.execute` never raises. Routing misses, argument validation
failures and handler errors all come back as ``ToolResult(success=False)`` so
the conversation loop needs no exception handling around tool execution.
"""

import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from mcp_playground.infrastructure.storage.kv_store import KeyValueStore
from mcp_playground.mcp.tools import CATALOG_TOOLS, git_tools
from mcp_playground.mcp.tools.common import CHARACTER_LIMIT, ToolContext, ToolResult, ToolTable
from mcp_playground.observability.metrics import record_tool_execution
from mcp_playground.shared.exceptions import (
    PlaygroundError,
    UnknownCatalogError,
    UnknownToolError,
)

logger = logging.getLogger(__name__)


def _format_validation_error(tool_name: str, error: PydanticValidationError) -> str:
    problems = "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'arguments'}: {err['msg']}"
        for err in error.errors()
    )
    return f"Invalid arguments for {tool_name}: {problems}"


class ToolDispatcher:
    """Executes simulated tools against an injected key-value store."""

    def __init__(
        self,
        store: KeyValueStore,
        *,
        http_client: httpx.AsyncClient | None = None,
        http_timeout: float = 30.0,
        max_response_chars: int = CHARACTER_LIMIT,
        clock: Callable[[], datetime] | None = None,
        catalog_tools: Mapping[str, ToolTable] | None = None,
    ):
        """Initialize the dispatcher.

        Args:
            store: Backing store for the file, memory and git simulations
            http_client: Client for fetch/http tools (created lazily if omitted)
            http_timeout: Timeout in seconds for the lazily created client
            max_response_chars: Body cap for the http tool
            clock: Source of "now" (UTC), injectable for tests
            catalog_tools: Override of the catalog -> tool table mapping
        """
        self.store = store
        self.http_timeout = http_timeout
        self._http_client = http_client
        self._owns_http_client = http_client is None
        self._catalog_tools = catalog_tools if catalog_tools is not None else CATALOG_TOOLS
        self._context = ToolContext(
            store=store,
            get_http_client=self._get_http_client,
            clock=clock or (lambda: datetime.now(UTC)),
            max_response_chars=max_response_chars,
        )

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._http_client is None or self._http_client.is_closed:
            self._http_client = httpx.AsyncClient(
                timeout=self.http_timeout,
                follow_redirects=True,
            )
            self._owns_http_client = True
        return self._http_client

    async def close(self) -> None:
        """Close the HTTP client if this dispatcher created it."""
        if self._http_client is not None and self._owns_http_client:
            await self._http_client.aclose()
            self._http_client = None

    @property
    def implemented_catalogs(self) -> list[str]:
        return list(self._catalog_tools)

    def supports(self, catalog_id: str | None, tool_name: str) -> bool:
        return tool_name in self._catalog_tools.get(catalog_id or "", {})

    async def execute(
        self,
        tool_name: str,
        arguments: Mapping[str, Any] | None,
        catalog_id: str | None,
    ) -> ToolResult:
        """Execute a single tool and return its result.

        Args:
            tool_name: Name of the tool within the catalog
            arguments: Decoded tool arguments
            catalog_id: Selected catalog ("MCP server") id

        Returns:
            ToolResult, successful or not
        """
        logger.debug("Executing tool %s on server %s with %s", tool_name, catalog_id, arguments)

        try:
            result = await self._dispatch(tool_name, dict(arguments or {}), catalog_id)
        except PydanticValidationError as e:
            result = ToolResult.fail(_format_validation_error(tool_name, e))
        except PlaygroundError as e:
            result = ToolResult.fail(e.message)
        except Exception as e:
            logger.exception("Error executing tool %s on server %s", tool_name, catalog_id)
            result = ToolResult.fail(str(e) or type(e).__name__)

        if not result.success:
            logger.info("Tool %s on server %s failed: %s", tool_name, catalog_id, result.error)
        record_tool_execution(catalog_id or "none", tool_name, result.success)
        return result

    async def _dispatch(
        self, tool_name: str, arguments: dict[str, Any], catalog_id: str | None
    ) -> ToolResult:
        tools = self._catalog_tools.get(catalog_id or "")
        if tools is None:
            raise UnknownCatalogError(catalog_id or "none")

        if tool_name not in tools:
            if catalog_id == "git":
                raise UnknownToolError(tool_name, git_tools.unknown_tool_message(tool_name))
            raise UnknownToolError(tool_name)

        input_model, handler = tools[tool_name]
        params = input_model.model_validate(arguments)
        return await handler(params, self._context)
