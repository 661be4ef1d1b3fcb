"""Simulated git: answers from a single stored status record."""

from typing import Any

from mcp_playground.mcp.models import GitLogInput, GitRepoInput
from mcp_playground.mcp.tools.common import ToolContext, ToolResult, ToolTable

GIT_KEY = "mcp_playground_git"
DEFAULT_GIT_STATUS: dict[str, Any] = {"status": "clean", "branch": "main", "commits": []}


def unknown_tool_message(tool_name: str) -> str:
    return f"Git tool {tool_name} is simulated, not implemented"


def _load_status(ctx: ToolContext) -> dict[str, Any]:
    return ctx.store.get(GIT_KEY) or dict(DEFAULT_GIT_STATUS)


async def git_status(params: GitRepoInput, ctx: ToolContext) -> ToolResult:
    return ToolResult.ok(**_load_status(ctx))


async def git_log(params: GitLogInput, ctx: ToolContext) -> ToolResult:
    commits = _load_status(ctx).get("commits") or []
    return ToolResult.ok(commits=commits[: params.max_count])


async def git_branch(params: GitRepoInput, ctx: ToolContext) -> ToolResult:
    branch = _load_status(ctx).get("branch") or "main"
    return ToolResult.ok(branches=[branch], current=branch)


TOOLS: ToolTable = {
    "git_status": (GitRepoInput, git_status),
    "git_log": (GitLogInput, git_log),
    "git_branch": (GitRepoInput, git_branch),
}
