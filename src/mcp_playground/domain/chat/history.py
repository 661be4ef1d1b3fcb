"""Conversation history.

Messages are append-only; the only mutation is truncation to the most
recent entries when persisting.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from mcp_playground.config import Settings
from mcp_playground.domain.chat.types import ChatMessage
from mcp_playground.infrastructure.storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

HISTORY_KEY = "mcp_chat_history"
OUTBOUND_LIMIT = 8
PERSISTED_LIMIT = 50


class ConversationHistory:
    """Ordered message log, optionally backed by a key-value store."""

    def __init__(
        self,
        store: KeyValueStore | None = None,
        *,
        outbound_limit: int = OUTBOUND_LIMIT,
        persisted_limit: int = PERSISTED_LIMIT,
    ):
        self.store = store
        self.outbound_limit = outbound_limit
        self.persisted_limit = persisted_limit
        self._messages: list[ChatMessage] = []

    def __len__(self) -> int:
        return len(self._messages)

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return tuple(self._messages)

    def append(self, message: ChatMessage) -> None:
        self._messages.append(message)
        self.save()

    def extend(self, messages: Iterable[ChatMessage]) -> None:
        self._messages.extend(messages)
        self.save()

    def outbound(self, limit: int | None = None) -> list[dict[str, str]]:
        """Recent messages as ``{role, content}`` pairs for a completion request.

        The window is taken over all messages first; entries with empty content
        are then skipped and every non-user role is sent as ``assistant``.
        """
        limit = self.outbound_limit if limit is None else limit
        window = self._messages[-limit:] if limit > 0 else []
        return [
            {
                "role": "user" if message.role == "user" else "assistant",
                "content": message.content,
            }
            for message in window
            if message.content
        ]

    def save(self) -> None:
        if self.store is None or not self._messages:
            return
        recent = self._messages[-self.persisted_limit :]
        self.store.set(HISTORY_KEY, [message.to_dict() for message in recent])

    def load(self) -> None:
        """Replace in-memory messages with the persisted ones."""
        if self.store is None:
            return
        raw = self.store.get(HISTORY_KEY) or []
        try:
            self._messages = [ChatMessage.from_dict(item) for item in raw]
        except (KeyError, TypeError, ValueError) as e:
            # Unreadable history is dropped rather than blocking the chat
            logger.error("Failed to load history: %s", e)
            self._messages = []

    def clear(self) -> None:
        self._messages = []
        if self.store is not None:
            self.store.delete(HISTORY_KEY)


def build_history(store: KeyValueStore | None, settings: Settings) -> ConversationHistory:
    """Create a history using the configured window sizes and load it."""
    history = ConversationHistory(
        store,
        outbound_limit=settings.outbound_history_limit,
        persisted_limit=settings.persisted_history_limit,
    )
    history.load()
    return history
