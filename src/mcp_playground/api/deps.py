"""FastAPI dependencies for shared application resources."""

from fastapi import Request

from mcp_playground.config import get_settings
from mcp_playground.domain.chat.tool_executor import ToolDispatcher
from mcp_playground.infrastructure.storage.kv_store import KeyValueStore, build_store


def get_store(request: Request) -> KeyValueStore:
    """Key-value store backing the simulated tools (created on first use)."""
    store = getattr(request.app.state, "store", None)
    if store is None:
        store = build_store(get_settings())
        request.app.state.store = store
    return store


def get_dispatcher(request: Request) -> ToolDispatcher:
    """Shared tool dispatcher (created on first use)."""
    dispatcher = getattr(request.app.state, "dispatcher", None)
    if dispatcher is None:
        settings = get_settings()
        dispatcher = ToolDispatcher(
            get_store(request),
            http_timeout=settings.tool_http_timeout_seconds,
            max_response_chars=settings.tool_response_max_chars,
        )
        request.app.state.dispatcher = dispatcher
    return dispatcher
