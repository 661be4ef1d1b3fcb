"""Upstream chat-completion clients."""

from mcp_playground.infrastructure.ai.client import (
    ChatClient,
    ChatCompletionRequest,
    GeminiClient,
    OpenAICompatibleClient,
)
from mcp_playground.infrastructure.ai.factory import get_chat_client

__all__ = [
    "ChatClient",
    "ChatCompletionRequest",
    "GeminiClient",
    "OpenAICompatibleClient",
    "get_chat_client",
]
