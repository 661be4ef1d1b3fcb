"""Chat client factory - returns the configured upstream provider."""

from mcp_playground.config import Settings, get_settings
from mcp_playground.infrastructure.ai.client import (
    ChatClient,
    GeminiClient,
    OpenAICompatibleClient,
)
from mcp_playground.shared.logging import get_logger

logger = get_logger(__name__)


def get_chat_client(
    settings: Settings | None = None,
    *,
    api_key: str | None = None,
) -> ChatClient:
    """Build the chat client selected by ``AI_PROVIDER``.

    Args:
        settings: Settings to use (defaults to the cached settings)
        api_key: Overrides the configured key, e.g. one supplied per request

    Raises:
        ValueError: If no API key is available for the provider

    Usage:
        # In .env:
        AI_PROVIDER=gemini  # or "openai_compatible"
        GEMINI_API_KEY=...

        # In code:
        client = get_chat_client()
        raw = await client.complete(request)
    """
    settings = settings or get_settings()

    if settings.ai_provider == "gemini":
        key = api_key or settings.gemini_api_key
        if not key:
            raise ValueError("GEMINI_API_KEY is not configured")
        logger.info("using_ai_provider", provider="gemini", model=settings.gemini_model)
        return GeminiClient(
            key,
            settings.gemini_base_url,
            timeout=settings.request_timeout_seconds,
        )

    key = api_key or settings.upstream_api_key
    if not key:
        raise ValueError("UPSTREAM_API_KEY is not configured")
    logger.info(
        "using_ai_provider",
        provider="openai_compatible",
        base_url=settings.upstream_base_url,
        model=settings.default_model,
    )
    return OpenAICompatibleClient(
        key,
        settings.upstream_base_url,
        timeout=settings.request_timeout_seconds,
    )
