"""Simulated memory store: named collections of timestamped entries.

`query` is a case-insensitive substring filter standing in for vector
similarity search.
"""

from typing import Any

from mcp_playground.mcp.models import (
    AppendMemoryInput,
    CreateCollectionInput,
    EmptyInput,
    QueryMemoryInput,
)
from mcp_playground.mcp.tools.common import ToolContext, ToolResult, ToolTable

MEMORY_KEY = "mcp_playground_memory"


def _load_memory(ctx: ToolContext) -> dict[str, Any]:
    storage = ctx.store.get(MEMORY_KEY) or {}
    storage.setdefault("collections", {})
    return storage


async def append(params: AppendMemoryInput, ctx: ToolContext) -> ToolResult:
    storage = _load_memory(ctx)
    entries = storage["collections"].setdefault(params.collection, [])
    entries.append(
        {
            "content": params.content,
            "timestamp": ctx.clock().isoformat(),
        }
    )
    ctx.store.set(MEMORY_KEY, storage)
    return ToolResult.ok(message=f"Memory added to {params.collection}")


async def query(params: QueryMemoryInput, ctx: ToolContext) -> ToolResult:
    storage = _load_memory(ctx)
    entries = storage["collections"].get(params.collection, [])
    needle = params.query.lower()
    results = [entry for entry in entries if needle in str(entry.get("content", "")).lower()]
    return ToolResult.ok(results=results[: params.limit])


async def list_collections(params: EmptyInput, ctx: ToolContext) -> ToolResult:
    storage = _load_memory(ctx)
    return ToolResult.ok(collections=list(storage["collections"]))


async def create_collection(params: CreateCollectionInput, ctx: ToolContext) -> ToolResult:
    storage = _load_memory(ctx)
    if params.name in storage["collections"]:
        return ToolResult.fail("Collection already exists")
    storage["collections"][params.name] = []
    ctx.store.set(MEMORY_KEY, storage)
    return ToolResult.ok(message=f"Collection {params.name} created")


TOOLS: ToolTable = {
    "append": (AppendMemoryInput, append),
    "query": (QueryMemoryInput, query),
    "list_collections": (EmptyInput, list_collections),
    "create_collection": (CreateCollectionInput, create_collection),
}
