"""Simulated documentation lookup (context7 stand-in)."""

from mcp_playground.mcp.models import SearchDocsInput
from mcp_playground.mcp.tools.common import ToolContext, ToolResult, ToolTable

DOCS: dict[str, str] = {
    "react": "React is a JavaScript library for building user interfaces...",
    "javascript": "JavaScript is a programming language that enables interactive web pages...",
    "python": "Python is a high-level programming language...",
}

FALLBACK_RESULT = {
    "source": "general",
    "content": "No specific docs found. Try: react, javascript, python",
}


async def search_docs(params: SearchDocsInput, ctx: ToolContext) -> ToolResult:
    needle = params.query.lower()
    results = [
        {"source": key, "content": content}
        for key, content in DOCS.items()
        if key in needle or needle in key
    ]
    return ToolResult.ok(
        query=params.query,
        source=params.source,
        results=results or [dict(FALLBACK_RESULT)],
    )


TOOLS: ToolTable = {
    "search_docs": (SearchDocsInput, search_docs),
}
