"""Chat domain module.

Modules:
- interpreter: Normalizes provider responses into text plus one tool call
- tool_executor: Simulated tool execution with strategy pattern
- history: Conversation log with outbound and persisted windows
- model_registry: Hosted models and their tool support
- service: Chat turn orchestration
"""

from mcp_playground.domain.chat.history import ConversationHistory, build_history
from mcp_playground.domain.chat.interpreter import interpret_lenient, interpret_response
from mcp_playground.domain.chat.service import ChatService
from mcp_playground.domain.chat.tool_executor import ToolDispatcher
from mcp_playground.domain.chat.types import ChatMessage, NormalizedResponse, ToolCall

__all__ = [
    "ChatMessage",
    "ChatService",
    "ConversationHistory",
    "NormalizedResponse",
    "ToolCall",
    "ToolDispatcher",
    "build_history",
    "interpret_lenient",
    "interpret_response",
]
