"""Direct tool execution endpoint.

Runs one simulated tool against the server-side store. The response is
always 200; failures are reported in the ``success``/``error`` fields.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Request

from mcp_playground.api.deps import get_dispatcher
from mcp_playground.api.ratelimit import RATE_LIMIT_TOOLS, limiter
from mcp_playground.domain.chat.tool_executor import ToolDispatcher

router = APIRouter(prefix="/tools", tags=["Tools"])


@router.post("/{catalog_id}/{tool_name}")
@limiter.limit(RATE_LIMIT_TOOLS)
async def execute_tool(
    request: Request,
    catalog_id: str,
    tool_name: str,
    arguments: dict[str, Any] | None = Body(default=None),
    dispatcher: ToolDispatcher = Depends(get_dispatcher),
) -> dict[str, Any]:
    result = await dispatcher.execute(tool_name, arguments or {}, catalog_id)
    return result.to_dict()
