"""Versioned AI prompts.

Prompts are versioned as code so it is always clear which wording
produced a given conversation.
"""

from mcp_playground.infrastructure.ai.prompts.base import PromptVersion
from mcp_playground.infrastructure.ai.prompts.playground_v1 import PlaygroundPromptV1

__all__ = ["PlaygroundPromptV1", "PromptVersion"]
