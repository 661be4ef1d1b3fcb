"""Generic HTTP request tool."""

import httpx

from mcp_playground.mcp.models import HttpMethod, HttpRequestInput
from mcp_playground.mcp.tools.common import (
    ToolContext,
    ToolResult,
    ToolTable,
    describe_http_error,
    headers_to_dict,
    send_with_retry,
)


async def request(params: HttpRequestInput, ctx: ToolContext) -> ToolResult:
    client = await ctx.get_http_client()
    try:
        http_request = client.build_request(
            params.method.value,
            params.url,
            headers=params.headers,
            content=params.body,
        )
        # Only GET is safe to replay
        response = await send_with_retry(
            client, http_request, retry_once=params.method is HttpMethod.GET
        )
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        return ToolResult.fail(describe_http_error(e, params.url))

    return ToolResult.ok(
        status=response.status_code,
        status_text=response.reason_phrase,
        content=response.text[: ctx.max_response_chars],
        headers=headers_to_dict(response.headers),
    )


TOOLS: ToolTable = {
    "request": (HttpRequestInput, request),
}
