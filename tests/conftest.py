"""
Pytest configuration and fixtures for MCP Playground tests.
"""
import os
from collections.abc import Callable, Generator
from datetime import UTC, datetime

import httpx
import pytest
from fastapi.testclient import TestClient

# Settings are read at app import time
os.environ["APP_ENV"] = "development"
os.environ["APP_DEBUG"] = "false"
os.environ["UPSTREAM_API_KEY"] = "test-upstream-key"
os.environ["STORE_PATH"] = ""
os.environ["CORS_ORIGINS"] = "*"

from mcp_playground.api.ratelimit import limiter  # noqa: E402
from mcp_playground.config import get_settings  # noqa: E402
from mcp_playground.domain.chat.tool_executor import ToolDispatcher  # noqa: E402
from mcp_playground.infrastructure.storage.kv_store import InMemoryStore  # noqa: E402

FIXED_NOW = datetime(2024, 3, 15, 12, 30, 45, 123000, tzinfo=UTC)


@pytest.fixture
def store() -> InMemoryStore:
    """Fresh in-memory key-value store."""
    return InMemoryStore()


@pytest.fixture
def clock() -> Callable[[], datetime]:
    """Clock frozen at FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def dispatcher(store: InMemoryStore, clock: Callable[[], datetime]) -> ToolDispatcher:
    """Dispatcher over the in-memory store with a frozen clock."""
    return ToolDispatcher(store, clock=clock)


@pytest.fixture
def make_http_dispatcher(
    store: InMemoryStore,
) -> Callable[[Callable[[httpx.Request], httpx.Response]], ToolDispatcher]:
    """Build a dispatcher whose HTTP client answers through a mock handler."""

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> ToolDispatcher:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return ToolDispatcher(store, http_client=client)

    return _make


@pytest.fixture
def app_client(store: InMemoryStore) -> Generator[TestClient, None, None]:
    """TestClient over a fresh app with an in-memory store."""
    get_settings.cache_clear()
    limiter.reset()

    from mcp_playground.main import create_app

    app = create_app()
    app.state.store = store
    with TestClient(app) as client:
        yield client
    get_settings.cache_clear()
