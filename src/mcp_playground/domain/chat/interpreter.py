"""Response interpreter.

Turns a raw chat-completion response into a `NormalizedResponse`: the text to
display plus at most one `ToolCall`.

Two provider shapes are accepted, each with its own normalizer:

- OpenAI-compatible: ``{"choices": [{"message": {"content", "tool_calls"}}]}``
- Gemini: ``{"candidates": [{"content": {"parts": [{"text"} | {"functionCall"}]}}]}``

When the provider reports no native tool call, the text is scanned for the
bracket markup ``[TOOL:name]key=value&key2=value2[/TOOL]``. Only the first
marker is honoured. The argument blob is a lossy format kept for
compatibility with stored conversations: values are percent-decoded, there is
no nesting, and a literal ``&`` cannot be represented.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping
from typing import Any, Literal
from urllib.parse import quote, unquote

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from mcp_playground.domain.chat.types import NormalizedResponse, ToolCall
from mcp_playground.shared.exceptions import (
    AIServiceError,
    MalformedArgumentsError,
    NoResponseError,
)

logger = logging.getLogger(__name__)

TOOL_CALL_PATTERN = re.compile(r"\[TOOL:([A-Za-z0-9_]+)\](.*?)\[/TOOL\]", re.DOTALL)
_TOOL_BLOCK_PATTERN = re.compile(r"\[TOOL:[^\]]*\].*?\[/TOOL\]", re.DOTALL)
_STRAY_TAG_PATTERN = re.compile(r"\[TOOL:[^\]]*\]|\[/TOOL\]")


# ----- Provider shapes -----


class _ProviderModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class OpenAIFunction(_ProviderModel):
    name: str
    arguments: str | dict[str, Any] | None = None


class OpenAIToolCall(_ProviderModel):
    id: str | None = None
    type: str | None = None
    function: OpenAIFunction


class OpenAIMessage(_ProviderModel):
    role: str | None = None
    content: str | list[dict[str, Any]] | None = None
    tool_calls: list[OpenAIToolCall] | None = None
    function_call: OpenAIFunction | None = None

    @property
    def text(self) -> str:
        if isinstance(self.content, list):
            # Content-part arrays: keep the text parts only
            return "".join(
                str(part.get("text", "")) for part in self.content if part.get("type") == "text"
            )
        return self.content or ""


class OpenAIChoice(_ProviderModel):
    message: OpenAIMessage = Field(default_factory=OpenAIMessage)
    finish_reason: str | None = None


class OpenAIResponse(_ProviderModel):
    kind: Literal["openai"] = "openai"
    choices: list[OpenAIChoice] = Field(default_factory=list)


class GeminiFunctionCall(_ProviderModel):
    name: str
    args: dict[str, Any] | None = None


class GeminiPart(_ProviderModel):
    text: str | None = None
    function_call: GeminiFunctionCall | None = Field(default=None, alias="functionCall")


class GeminiContent(_ProviderModel):
    role: str | None = None
    parts: list[GeminiPart] = Field(default_factory=list)


class GeminiCandidate(_ProviderModel):
    content: GeminiContent | None = None
    finish_reason: str | None = Field(default=None, alias="finishReason")


class GeminiResponse(_ProviderModel):
    kind: Literal["gemini"] = "gemini"
    candidates: list[GeminiCandidate] = Field(default_factory=list)


ProviderResponse = OpenAIResponse | GeminiResponse


def parse_provider_response(raw: Any) -> ProviderResponse:
    """Classify a raw response into one of the provider shapes.

    Raises:
        AIServiceError: If the payload is an error envelope
        NoResponseError: If the payload matches neither shape
    """
    if isinstance(raw, OpenAIResponse | GeminiResponse):
        return raw
    if not isinstance(raw, Mapping) and hasattr(raw, "model_dump"):
        # SDK objects (e.g. openai ChatCompletion)
        raw = raw.model_dump()
    if not isinstance(raw, Mapping):
        raise NoResponseError(f"Unrecognized provider response: {type(raw).__name__}")

    try:
        if "choices" in raw:
            return OpenAIResponse.model_validate(raw)
        if "candidates" in raw:
            return GeminiResponse.model_validate(raw)
    except PydanticValidationError as e:
        logger.warning("Provider response failed validation: %s", e)
        raise NoResponseError("Malformed response from model") from e

    error = raw.get("error")
    if error:
        message = error.get("message") if isinstance(error, Mapping) else str(error)
        raise AIServiceError(message or "API request failed", details={"error": error})
    raise NoResponseError()


# ----- Bracket markup -----


def parse_argument_blob(blob: str) -> dict[str, str]:
    """Parse ``key=value&key2=value2`` with percent-decoded values.

    Pairs without ``=`` or with an empty key are dropped. The value is
    everything after the first ``=``.
    """
    arguments: dict[str, str] = {}
    if not blob:
        return arguments
    for pair in blob.split("&"):
        key, sep, value = pair.partition("=")
        key = key.strip()
        if not key or not sep:
            continue
        arguments[key] = unquote(value)
    return arguments


def detect_tool_call(text: str) -> ToolCall | None:
    """Return the first bracket tool call in text, if any."""
    match = TOOL_CALL_PATTERN.search(text or "")
    if match is None:
        return None
    return ToolCall(name=match.group(1), arguments=parse_argument_blob(match.group(2)))


def strip_tool_markup(text: str) -> str:
    """Remove every bracket tool block and stray tag, then trim."""
    without_blocks = _TOOL_BLOCK_PATTERN.sub("", text or "")
    return _STRAY_TAG_PATTERN.sub("", without_blocks).strip()


def _encode_value(value: Any) -> str:
    if isinstance(value, bool):
        text = "true" if value else "false"
    elif isinstance(value, dict | list):
        text = json.dumps(value)
    else:
        text = str(value)
    return quote(text, safe="")


def format_tool_call(call: ToolCall) -> str:
    """Render a tool call in the bracket markup."""
    blob = "&".join(f"{key}={_encode_value(value)}" for key, value in call.arguments.items())
    return f"[TOOL:{call.name}]{blob}[/TOOL]"


# ----- Normalization -----


def parse_tool_arguments(
    tool_name: str, raw: str | Mapping[str, Any] | None, content: str = ""
) -> dict[str, Any]:
    """Decode native tool-call arguments into a mapping.

    Raises:
        MalformedArgumentsError: If the text is not a JSON object
    """
    if raw is None or raw == "":
        return {}
    if isinstance(raw, Mapping):
        return dict(raw)
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as e:
        raise MalformedArgumentsError(tool_name, raw, content) from e
    if not isinstance(parsed, dict):
        raise MalformedArgumentsError(tool_name, raw, content)
    return parsed


def _from_text(text: str, native_call: ToolCall | None) -> NormalizedResponse:
    return NormalizedResponse(
        content=strip_tool_markup(text),
        tool_call=native_call or detect_tool_call(text),
        raw_content=text,
    )


def normalize_openai(response: OpenAIResponse) -> NormalizedResponse:
    if not response.choices:
        raise NoResponseError()
    message = response.choices[0].message
    text = message.text

    function = None
    if message.tool_calls:
        function = message.tool_calls[0].function
    elif message.function_call is not None:
        function = message.function_call

    native_call = None
    if function is not None:
        native_call = ToolCall(
            name=function.name,
            arguments=parse_tool_arguments(function.name, function.arguments, text),
        )
    return _from_text(text, native_call)


def normalize_gemini(response: GeminiResponse) -> NormalizedResponse:
    if not response.candidates:
        raise NoResponseError()
    candidate = response.candidates[0]
    parts = candidate.content.parts if candidate.content else []

    text = "".join(part.text for part in parts if part.text)
    native_call = next(
        (
            ToolCall(name=part.function_call.name, arguments=dict(part.function_call.args or {}))
            for part in parts
            if part.function_call is not None
        ),
        None,
    )
    return _from_text(text, native_call)


def interpret_response(raw: Any) -> NormalizedResponse:
    """Normalize a provider response into content plus an optional tool call.

    Pure function of its input.

    Raises:
        NoResponseError: No choices/candidates in the response
        MalformedArgumentsError: Native tool-call arguments are not a JSON object
        AIServiceError: The payload is an error envelope
    """
    response = parse_provider_response(raw)
    if isinstance(response, OpenAIResponse):
        return normalize_openai(response)
    return normalize_gemini(response)


def interpret_lenient(raw: Any) -> NormalizedResponse:
    """Like `interpret_response`, but unparseable tool arguments degrade to text."""
    try:
        return interpret_response(raw)
    except MalformedArgumentsError as e:
        logger.warning(
            "Dropping tool call %s with malformed arguments: %r", e.tool_name, e.raw_arguments
        )
        return NormalizedResponse(
            content=strip_tool_markup(e.content) or e.raw_arguments,
            tool_call=None,
            raw_content=e.content,
        )
