"""Chat-completion clients.

Two upstream flavours are supported:

- OpenAI-compatible endpoints (KiloCode, Z.ai, DeepSeek, ...) through the
  ``openai`` SDK
- Google Gemini ``generateContent`` through plain ``httpx``

Both return the provider's raw JSON as a dict; turning that into display
text and a tool call is the interpreter's job.
"""

import time
from typing import Any, Protocol

import httpx
from openai import (
    APIConnectionError,
    APIStatusError,
    AsyncOpenAI,
    RateLimitError,
)
from pydantic import BaseModel, Field
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from mcp_playground.observability.metrics import record_upstream_completion
from mcp_playground.shared.exceptions import AIRateLimitError, AIServiceError, TransportError
from mcp_playground.shared.logging import get_logger

logger = get_logger(__name__)

GEMINI_TOP_P = 0.95
GEMINI_TOP_K = 40


class ChatCompletionRequest(BaseModel):
    """Provider-neutral completion request (OpenAI message format)."""

    model: str
    messages: list[dict[str, Any]]
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=4096, ge=1)
    tools: list[dict[str, Any]] | None = None
    tool_choice: str | None = None

    def to_payload(self) -> dict[str, Any]:
        payload = self.model_dump(exclude_none=True)
        if not self.tools:
            payload.pop("tools", None)
            payload.pop("tool_choice", None)
        return payload


class ChatClient(Protocol):
    """Protocol for chat-completion clients."""

    provider: str

    async def complete(self, request: ChatCompletionRequest) -> dict[str, Any]: ...

    async def close(self) -> None: ...


def _retrying(exception_types: type[Exception] | tuple[type[Exception], ...]) -> AsyncRetrying:
    # One bounded retry on transport failures only
    return AsyncRetrying(
        stop=stop_after_attempt(2),
        wait=wait_exponential(multiplier=0.5, max=2),
        retry=retry_if_exception_type(exception_types),
        reraise=True,
    )


def _error_message(body: Any, default: str) -> str:
    if isinstance(body, dict):
        error = body.get("error", body)
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
    return default


class OpenAICompatibleClient:
    """Wrapper for any OpenAI-compatible chat-completions endpoint.

    The SDK's own retries are disabled; a single retry on timeouts and
    connection failures is done here so the total wait stays bounded.
    """

    provider = "openai_compatible"

    def __init__(
        self,
        api_key: str,
        base_url: str,
        *,
        timeout: float = 60.0,
        client: AsyncOpenAI | None = None,
    ) -> None:
        self.base_url = base_url
        self.client = client or AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
        )

    async def complete(self, request: ChatCompletionRequest) -> dict[str, Any]:
        """Send a completion request.

        Returns:
            The raw response as a dict (``choices`` shape)

        Raises:
            AIRateLimitError: If rate limited
            AIServiceError: For non-2xx API responses
            TransportError: On timeout or connection failure after one retry
        """
        start_time = time.monotonic()
        try:
            async for attempt in _retrying(APIConnectionError):
                with attempt:
                    response = await self.client.chat.completions.create(**request.to_payload())
        except RateLimitError as e:
            logger.warning("upstream_rate_limited", model=request.model, error=str(e))
            record_upstream_completion(self.provider, "rate_limited")
            raise AIRateLimitError(
                _error_message(e.body, "Rate limit exceeded"),
                details={"status_code": e.status_code, "body": e.body},
            ) from e
        except APIStatusError as e:
            logger.warning(
                "upstream_api_error",
                model=request.model,
                status_code=e.status_code,
                error=str(e),
            )
            record_upstream_completion(self.provider, "error")
            raise AIServiceError(
                _error_message(e.body, f"API request failed ({e.status_code})"),
                details={"status_code": e.status_code, "body": e.body},
            ) from e
        except APIConnectionError as e:
            logger.warning("upstream_transport_error", model=request.model, error=str(e))
            record_upstream_completion(self.provider, "transport_error")
            raise TransportError(f"Could not reach {self.base_url}: {e}") from e

        latency_ms = (time.monotonic() - start_time) * 1000
        logger.debug(
            "upstream_completion_success",
            model=request.model,
            latency_ms=round(latency_ms, 2),
        )
        record_upstream_completion(self.provider, "ok")
        return response.model_dump()

    async def close(self) -> None:
        await self.client.close()


class GeminiClient:
    """Client for the Gemini ``generateContent`` REST endpoint."""

    provider = "gemini"

    def __init__(
        self,
        api_key: str,
        base_url: str,
        *,
        timeout: float = 60.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = http_client
        self._owns_client = http_client is None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout)
            self._owns_client = True
        return self._client

    def build_body(self, request: ChatCompletionRequest) -> dict[str, Any]:
        """Translate an OpenAI-style request into a Gemini request body."""
        system_parts: list[dict[str, str]] = []
        contents: list[dict[str, Any]] = []
        for message in request.messages:
            content = message.get("content") or ""
            if message.get("role") == "system":
                if content:
                    system_parts.append({"text": content})
                continue
            contents.append(
                {
                    "role": "user" if message.get("role") == "user" else "model",
                    "parts": [{"text": content}],
                }
            )

        body: dict[str, Any] = {
            "contents": contents,
            "generationConfig": {
                "temperature": request.temperature,
                "topP": GEMINI_TOP_P,
                "topK": GEMINI_TOP_K,
                "maxOutputTokens": request.max_tokens,
            },
        }
        if system_parts:
            body["systemInstruction"] = {"parts": system_parts}
        if request.tools:
            body["tools"] = [
                {
                    "functionDeclarations": [
                        tool["function"] for tool in request.tools if "function" in tool
                    ]
                }
            ]
        return body

    async def complete(self, request: ChatCompletionRequest) -> dict[str, Any]:
        """Send a generateContent request.

        Returns:
            The raw response as a dict (``candidates`` shape)

        Raises:
            AIRateLimitError: On HTTP 429
            AIServiceError: For other non-2xx responses
            TransportError: On timeout or connection failure after one retry
        """
        client = await self._get_client()
        url = f"{self.base_url}/models/{request.model}:generateContent"
        start_time = time.monotonic()
        try:
            async for attempt in _retrying(httpx.TransportError):
                with attempt:
                    response = await client.post(
                        url,
                        params={"key": self.api_key},
                        json=self.build_body(request),
                    )
        except httpx.TransportError as e:
            logger.warning("gemini_transport_error", model=request.model, error=str(e))
            record_upstream_completion(self.provider, "transport_error")
            raise TransportError(f"Could not reach Gemini: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = {"error": {"message": response.text}}

        if response.is_error:
            message = _error_message(data, "Gemini API request failed")
            details = {"status_code": response.status_code, "body": data}
            logger.warning(
                "gemini_api_error",
                model=request.model,
                status_code=response.status_code,
                error=message,
            )
            if response.status_code == 429:
                record_upstream_completion(self.provider, "rate_limited")
                raise AIRateLimitError(message, details=details)
            record_upstream_completion(self.provider, "error")
            raise AIServiceError(message, details=details)

        latency_ms = (time.monotonic() - start_time) * 1000
        logger.debug("gemini_completion_success", model=request.model, latency_ms=round(latency_ms, 2))
        record_upstream_completion(self.provider, "ok")
        return data

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
