"""Shared helpers for the simulated tool handlers."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

import httpx
from pydantic import BaseModel
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from mcp_playground.infrastructure.storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

CHARACTER_LIMIT = 10000  # Default cap on response bodies handed back to the model
TRUNCATION_MARKER = "...[truncated]"


@dataclass(frozen=True)
class ToolResult:
    """Outcome of a tool execution.

    `to_dict()` gives the flat `{"success": ..., ...}` mapping that is fed
    back to the model.
    """

    success: bool
    data: dict[str, Any] = field(default_factory=dict)
    error: str | None = None

    @classmethod
    def ok(cls, **data: Any) -> ToolResult:
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> ToolResult:
        return cls(success=False, error=error)

    def to_dict(self) -> dict[str, Any]:
        if self.success:
            return {"success": True, **self.data}
        return {"success": False, "error": self.error, **self.data}


@dataclass
class ToolContext:
    """What a handler may touch: the store, the network, and the clock."""

    store: KeyValueStore
    get_http_client: Callable[[], Awaitable[httpx.AsyncClient]]
    clock: Callable[[], datetime] = field(default=lambda: datetime.now(UTC))
    max_response_chars: int = CHARACTER_LIMIT


ToolHandler = Callable[[Any, ToolContext], Awaitable[ToolResult]]
ToolTable = dict[str, tuple[type[BaseModel], ToolHandler]]


def truncate(content: str, max_length: int, marker: str = TRUNCATION_MARKER) -> str:
    """Cut content to max_length characters, appending marker when cut."""
    if len(content) <= max_length:
        return content
    return content[:max_length] + marker


async def send_with_retry(
    client: httpx.AsyncClient,
    request: httpx.Request,
    *,
    retry_once: bool = True,
) -> httpx.Response:
    """Send a request, retrying a single time on transport failures."""
    attempts = 2 if retry_once else 1
    async for attempt in AsyncRetrying(
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=0.5, max=2),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    ):
        with attempt:
            return await client.send(request)
    raise AssertionError("unreachable")


def describe_http_error(e: Exception, url: str) -> str:
    """Turn an httpx failure into a message the model can act on."""
    if isinstance(e, httpx.TimeoutException):
        return f"Request to {url} timed out"
    if isinstance(e, httpx.InvalidURL | httpx.UnsupportedProtocol):
        return f"Invalid URL: {url}"
    if isinstance(e, httpx.ConnectError):
        return f"Connection to {url} failed: {e}"
    logger.warning("Unexpected HTTP failure for %s: %s", url, e)
    return str(e) or type(e).__name__


def headers_to_dict(headers: httpx.Headers) -> dict[str, str]:
    # Repeated headers collapse to their comma-joined form
    return {key: headers.get(key, "") for key in headers.keys()}
