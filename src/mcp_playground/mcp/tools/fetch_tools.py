"""Web fetch tool: GET a URL and hand back a bounded slice of the body."""

import logging

import httpx

from mcp_playground.mcp.models import FetchInput
from mcp_playground.mcp.tools.common import (
    ToolContext,
    ToolResult,
    ToolTable,
    describe_http_error,
    headers_to_dict,
    send_with_retry,
    truncate,
)

logger = logging.getLogger(__name__)

ACCEPT_HEADER = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"


async def fetch(params: FetchInput, ctx: ToolContext) -> ToolResult:
    """Fetch a URL.

    Non-2xx responses still count as a successful fetch; the status is part
    of the result so the model can explain it.
    """
    client = await ctx.get_http_client()
    try:
        request = client.build_request("GET", params.url, headers={"Accept": ACCEPT_HEADER})
        response = await send_with_retry(client, request)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        return ToolResult.fail(describe_http_error(e, params.url))

    logger.debug("Fetched %s -> %s (%d chars)", params.url, response.status_code, len(response.text))
    return ToolResult.ok(
        status=response.status_code,
        content=truncate(response.text, params.max_length),
        headers=headers_to_dict(response.headers),
    )


TOOLS: ToolTable = {
    "fetch": (FetchInput, fetch),
}
