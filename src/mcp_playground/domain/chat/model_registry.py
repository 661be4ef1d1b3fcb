"""Hosted models the playground can talk to.

Only models flagged ``supports_tools`` get a tool catalog and the tool
instructions in their system prompt.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ModelInfo:
    id: str
    name: str
    provider: str
    supports_tools: bool


MODEL_CONFIG: dict[str, ModelInfo] = {
    info.id: info
    for info in (
        ModelInfo("kilocode/anthropic/claude-opus-4.6", "Claude Opus", "Anthropic", True),
        ModelInfo("kilocode/anthropic/claude-sonnet-4.6", "Claude Sonnet", "Anthropic", True),
        ModelInfo("kilocode/anthropic/claude-haiku-3.5", "Claude Haiku", "Anthropic", True),
        ModelInfo("kilocode/google/gemini-pro-1.5", "Gemini Pro 1.5", "Google", True),
        ModelInfo("kilocode/google/gemini-flash-1.5", "Gemini Flash 1.5", "Google", True),
        ModelInfo("kilocode/meta-llama/llama-3.1-70b-instruct", "Llama 3.1 70B", "Meta", True),
        ModelInfo("kilocode/meta-llama/llama-3.1-8b-instruct", "Llama 3.1 8B", "Meta", True),
        ModelInfo("kilocode/qwen/qwen-2-72b-instruct", "Qwen 2 72B", "Qwen", True),
        ModelInfo(
            "kilocode/microsoft/phi-3-mini-128k-instruct", "Phi-3 Mini", "Microsoft", False
        ),
        ModelInfo("kilocode/mistralai/mistral-7b-instruct-v0.2", "Mistral 7B", "Mistral", False),
        ModelInfo("minimax/minimax-m2.5:free", "MiniMax M2.5", "Z.ai", True),
        ModelInfo("gemini-3-flash-preview", "Gemini 3 Flash", "Google", False),
    )
}


def get_model_info(model_id: str) -> ModelInfo:
    """Look up a model; unknown ids are treated as chat-only."""
    return MODEL_CONFIG.get(
        model_id,
        ModelInfo(id=model_id, name=model_id, provider="unknown", supports_tools=False),
    )


def supports_tools(model_id: str) -> bool:
    return get_model_info(model_id).supports_tools
