"""Simulated MCP (Model Context Protocol) tool catalogs.

Key components:
- catalog: Static catalog definitions offered to tool-capable models
- models: Lenient pydantic input models for every implemented tool
- tools: Handler tables per catalog, executed by the chat dispatcher
"""
