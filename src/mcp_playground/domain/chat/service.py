"""Chat service: one user turn with optional simulated tool execution.

The service handles:
1. Sending the user text plus recent history to the chat-completion client
2. Interpreting the reply into display text and at most one tool call
3. Running the tool call through the dispatcher
4. Asking the model to explain the tool result
5. Appending every produced message to the conversation history

Only one tool call per turn is honoured; a tool call in the follow-up reply
is ignored.
"""

import json
import logging

from mcp_playground.domain.chat.history import ConversationHistory
from mcp_playground.domain.chat.interpreter import interpret_lenient
from mcp_playground.domain.chat.model_registry import ModelInfo, get_model_info
from mcp_playground.domain.chat.tool_executor import ToolDispatcher
from mcp_playground.domain.chat.types import ChatMessage, NormalizedResponse
from mcp_playground.infrastructure.ai.client import ChatClient, ChatCompletionRequest
from mcp_playground.infrastructure.ai.prompts import PlaygroundPromptV1
from mcp_playground.mcp.catalog import ToolCatalogEntry, get_catalog, to_openai_tools
from mcp_playground.shared.exceptions import (
    PlaygroundError,
    UnknownCatalogError,
    ValidationError,
)

logger = logging.getLogger(__name__)

NO_RESPONSE_TEXT = "No response"


class ChatService:
    """Runs chat turns for one conversation."""

    def __init__(
        self,
        client: ChatClient,
        dispatcher: ToolDispatcher,
        history: ConversationHistory,
        model: str,
        *,
        temperature: float = 0.7,
        max_tokens: int = 4096,
        prompt: PlaygroundPromptV1 | None = None,
    ):
        """Initialize the chat service.

        Args:
            client: Upstream chat-completion client
            dispatcher: Executes simulated tool calls
            history: Conversation the turns are appended to
            model: Model id (looked up in the model registry)
            temperature: Sampling temperature for every request
            max_tokens: Completion token cap for every request
            prompt: Prompt version to use (defaults to the current one)
        """
        self.client = client
        self.dispatcher = dispatcher
        self.history = history
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.prompt = prompt or PlaygroundPromptV1()
        self.model_info: ModelInfo = get_model_info(model)
        self.selected_catalog: ToolCatalogEntry | None = None

    @property
    def model(self) -> str:
        return self.model_info.id

    @property
    def model_supports_tools(self) -> bool:
        return self.model_info.supports_tools

    def set_model(self, model: str) -> None:
        """Switch models; a model without tools drops the selected catalog."""
        self.model_info = get_model_info(model)
        if not self.model_supports_tools:
            self.selected_catalog = None

    def select_catalog(self, catalog_id: str | None) -> ChatMessage | None:
        """Select a tool catalog (or none) for the following turns.

        Raises:
            ValidationError: If the current model does not support tools
            UnknownCatalogError: If no catalog has this id
        """
        if catalog_id is None:
            self.selected_catalog = None
            return None
        if not self.model_supports_tools:
            raise ValidationError(f"Model {self.model} does not support tools")
        catalog = get_catalog(catalog_id)
        if catalog is None:
            raise UnknownCatalogError(catalog_id)

        self.selected_catalog = catalog
        message = ChatMessage(role="system", content=f"Selected {catalog.name}. {catalog.description}")
        self.history.append(message)
        return message

    async def send(self, user_text: str, catalog_id: str | None = None) -> list[ChatMessage]:
        """Run one turn and return the messages it produced.

        The user message is appended to history first. Upstream failures end
        the turn with an error-flagged assistant message instead of raising.

        Args:
            user_text: What the user typed
            catalog_id: Catalog for this turn (defaults to the selected one)

        Raises:
            ValidationError: If user_text is blank
        """
        text = user_text.strip()
        if not text:
            raise ValidationError("Message must not be empty")

        catalog = get_catalog(catalog_id) if catalog_id else self.selected_catalog
        active_catalog_id = catalog_id or (catalog.id if catalog else None)

        window = self.history.outbound()
        self.history.append(ChatMessage(role="user", content=text))

        produced: list[ChatMessage] = []
        try:
            await self._run_turn(text, window, catalog, active_catalog_id, produced)
        except PlaygroundError as e:
            logger.warning("Chat turn failed for model %s: %s", self.model, e.message)
            produced.append(
                ChatMessage(role="assistant", content=f"Error: {e.message}", is_error=True)
            )

        self.history.extend(produced)
        return produced

    def _request(
        self,
        messages: list[dict[str, str]],
        catalog: ToolCatalogEntry | None = None,
        *,
        offer_tools: bool = False,
    ) -> ChatCompletionRequest:
        tools = to_openai_tools(catalog.tools) if offer_tools and catalog else None
        return ChatCompletionRequest(
            model=self.model,
            messages=messages,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            tools=tools or None,
            tool_choice="auto" if tools else None,
        )

    async def _complete(self, request: ChatCompletionRequest) -> NormalizedResponse:
        raw = await self.client.complete(request)
        return interpret_lenient(raw)

    async def _run_turn(
        self,
        text: str,
        window: list[dict[str, str]],
        catalog: ToolCatalogEntry | None,
        catalog_id: str | None,
        produced: list[ChatMessage],
    ) -> None:
        supports_tools = self.model_supports_tools
        messages = self.prompt.build_messages(
            window, text, supports_tools=supports_tools, catalog=catalog
        )
        response = await self._complete(
            self._request(messages, catalog, offer_tools=supports_tools and catalog is not None)
        )

        call = response.tool_call
        if call is None or not supports_tools:
            produced.append(ChatMessage(role="assistant", content=response.content or NO_RESPONSE_TEXT))
            return

        produced.append(
            ChatMessage(
                role="assistant",
                content=response.content or f"Executing {call.name}...",
                tool_call=call,
            )
        )

        result = await self.dispatcher.execute(call.name, call.arguments, catalog_id)
        result_dict = result.to_dict()
        produced.append(
            ChatMessage(
                role="tool",
                content=json.dumps(result_dict, indent=2),
                tool_name=call.name,
                tool_result=result_dict,
                is_error=not result.success,
            )
        )

        # Replay the turn so the model sees what it asked for
        replay = [
            *window,
            {"role": "user", "content": text},
            {"role": "assistant", "content": response.raw_content},
        ]
        replay = [
            message for message in replay[-self.history.outbound_limit :] if message["content"]
        ]
        follow_up = await self._complete(
            self._request(
                self.prompt.build_messages(
                    replay,
                    self.prompt.render_follow_up(result_dict),
                    supports_tools=supports_tools,
                    catalog=catalog,
                )
            )
        )
        if follow_up.tool_call is not None:
            logger.info("Ignoring chained tool call %s in follow-up", follow_up.tool_call.name)
        produced.append(
            ChatMessage(role="assistant", content=follow_up.content or NO_RESPONSE_TEXT)
        )
