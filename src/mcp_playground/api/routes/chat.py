"""Chat-completion proxy.

Forwards a browser's chat-completion request to the OpenAI-compatible
upstream so the frontend does not run into CORS restrictions. Upstream
status codes and error bodies are passed through unchanged.
"""

from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from mcp_playground.api.ratelimit import RATE_LIMIT_AI, limiter
from mcp_playground.config import get_settings
from mcp_playground.infrastructure.ai.client import ChatCompletionRequest, OpenAICompatibleClient
from mcp_playground.shared.exceptions import AIServiceError, TransportError
from mcp_playground.shared.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["Chat"])

EMPTY_PARAMETERS: dict[str, Any] = {"type": "object", "properties": {}, "required": []}


# ----- Request Models -----


class ProxyTool(BaseModel):
    """A tool as the frontend describes it."""

    model_config = ConfigDict(extra="ignore")

    name: str
    description: str = ""
    parameters: dict[str, Any] | None = None


class ProxyChatRequest(BaseModel):
    """Request body of the chat proxy."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    model: str | None = None
    messages: list[dict[str, Any]] = Field(default_factory=list)
    tools: list[ProxyTool] | None = None
    api_key: str | None = Field(default=None, alias="apiKey")
    temperature: float | None = Field(default=None, ge=0.0, le=2.0)
    max_tokens: int | None = Field(default=None, ge=1)


def to_function_tools(tools: list[ProxyTool]) -> list[dict[str, Any]]:
    """Wrap frontend tools in the OpenAI function-calling envelope."""
    return [
        {
            "type": "function",
            "function": {
                "name": tool.name,
                "description": tool.description,
                "parameters": tool.parameters or dict(EMPTY_PARAMETERS),
            },
        }
        for tool in tools
    ]


def _resolve_api_key(request: Request, body: ProxyChatRequest) -> str:
    if body.api_key:
        return body.api_key
    authorization = request.headers.get("authorization", "")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() == "bearer" and token.strip():
        return token.strip()
    return get_settings().upstream_api_key


def build_upstream_request(body: ProxyChatRequest) -> ChatCompletionRequest:
    settings = get_settings()
    tools = to_function_tools(body.tools) if body.tools else None
    return ChatCompletionRequest(
        model=body.model or settings.default_model,
        messages=body.messages,
        temperature=body.temperature if body.temperature is not None else settings.chat_temperature,
        max_tokens=body.max_tokens or settings.chat_max_tokens,
        tools=tools,
        tool_choice="auto" if tools else None,
    )


# ----- API Endpoints -----


@router.post("/chat")
@limiter.limit(RATE_LIMIT_AI)
async def proxy_chat(request: Request, body: ProxyChatRequest) -> JSONResponse:
    """Forward a chat-completion request upstream and relay the response."""
    api_key = _resolve_api_key(request, body)
    if not api_key:
        return JSONResponse(status_code=400, content={"error": "API key required"})

    settings = get_settings()
    upstream_request = build_upstream_request(body)
    client = OpenAICompatibleClient(
        api_key,
        settings.upstream_base_url,
        timeout=settings.request_timeout_seconds,
    )
    try:
        data = await client.complete(upstream_request)
    except AIServiceError as e:
        status_code = e.details.get("status_code") or 502
        upstream_body = e.details.get("body")
        logger.info("proxy_upstream_error", status_code=status_code, model=upstream_request.model)
        return JSONResponse(
            status_code=status_code,
            content={"error": upstream_body if upstream_body is not None else e.message},
        )
    except TransportError as e:
        return JSONResponse(status_code=502, content={"error": e.message})
    finally:
        await client.close()

    return JSONResponse(status_code=200, content=data)
