"""Simulated filesystem: a flat path -> content mapping in the store.

There is no directory concept; listing is a prefix match over stored paths.
"""

import logging

from mcp_playground.mcp.models import DeleteInput, ListDirectoryInput, PathInput, WriteFileInput
from mcp_playground.mcp.tools.common import ToolContext, ToolResult, ToolTable

logger = logging.getLogger(__name__)

FILES_KEY = "mcp_playground_files"


def _load_files(ctx: ToolContext) -> dict[str, str]:
    return ctx.store.get(FILES_KEY) or {}


async def read_file(params: PathInput, ctx: ToolContext) -> ToolResult:
    files = _load_files(ctx)
    if params.path in files:
        return ToolResult.ok(content=files[params.path])
    return ToolResult.fail(
        f"File not found: {params.path}. Create it first with write_file."
    )


async def write_file(params: WriteFileInput, ctx: ToolContext) -> ToolResult:
    files = _load_files(ctx)
    files[params.path] = params.content
    ctx.store.set(FILES_KEY, files)
    return ToolResult.ok(message=f"File written to {params.path}")


async def list_directory(params: ListDirectoryInput, ctx: ToolContext) -> ToolResult:
    files = _load_files(ctx)
    return ToolResult.ok(files=[path for path in files if path.startswith(params.path)])


async def create_directory(params: PathInput, ctx: ToolContext) -> ToolResult:
    return ToolResult.ok(message=f"Directory {params.path} created (simulated)")


async def delete(params: DeleteInput, ctx: ToolContext) -> ToolResult:
    files = _load_files(ctx)
    if files.pop(params.path, None) is not None:
        ctx.store.set(FILES_KEY, files)
    else:
        logger.debug("delete: %s was not stored", params.path)
    return ToolResult.ok(message=f"Deleted {params.path}")


TOOLS: ToolTable = {
    "read_file": (PathInput, read_file),
    "write_file": (WriteFileInput, write_file),
    "list_directory": (ListDirectoryInput, list_directory),
    "create_directory": (PathInput, create_directory),
    "delete": (DeleteInput, delete),
}
