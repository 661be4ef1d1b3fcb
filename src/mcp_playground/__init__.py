"""MCP Playground backend: response interpretation and simulated tool execution."""

__version__ = "0.3.0"
