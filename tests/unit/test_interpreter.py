"""Unit tests for the response interpreter.

Covers both provider shapes, the bracket tool markup and the degrade path
for malformed tool-call arguments.
"""

import json
from types import SimpleNamespace

import pytest

from mcp_playground.domain.chat import interpreter
from mcp_playground.domain.chat.interpreter import (
    detect_tool_call,
    format_tool_call,
    interpret_lenient,
    interpret_response,
    parse_argument_blob,
    strip_tool_markup,
)
from mcp_playground.domain.chat.types import ToolCall
from mcp_playground.shared.exceptions import (
    AIServiceError,
    MalformedArgumentsError,
    NoResponseError,
)


def openai_response(content=None, tool_calls=None, **message_fields):
    message = {"role": "assistant", "content": content, **message_fields}
    if tool_calls is not None:
        message["tool_calls"] = tool_calls
    return {"choices": [{"message": message, "finish_reason": "stop"}]}


def openai_tool_call(name, arguments):
    return {"id": "call_1", "type": "function", "function": {"name": name, "arguments": arguments}}


def gemini_response(*parts):
    return {"candidates": [{"content": {"role": "model", "parts": list(parts)}}]}


class TestNoResponse:
    """Tests for responses without choices or candidates."""

    def test_empty_choices_raises(self):
        """Test that an empty choices list is a NoResponseError."""
        with pytest.raises(NoResponseError):
            interpret_response({"choices": []})

    def test_empty_candidates_raises(self):
        """Test that an empty candidates list is a NoResponseError."""
        with pytest.raises(NoResponseError):
            interpret_response({"candidates": []})

    def test_unknown_shape_raises(self):
        """Test that a payload matching neither shape is a NoResponseError."""
        with pytest.raises(NoResponseError):
            interpret_response({"id": "x"})

    def test_non_mapping_raises(self):
        """Test that a non-mapping payload is a NoResponseError."""
        with pytest.raises(NoResponseError):
            interpret_response("hello")

    def test_error_envelope_raises_service_error(self):
        """Test that a provider error envelope surfaces its message."""
        with pytest.raises(AIServiceError) as exc_info:
            interpret_response({"error": {"message": "Invalid API key"}})
        assert exc_info.value.message == "Invalid API key"

    def test_no_response_message(self):
        """Test the default NoResponseError message."""
        with pytest.raises(NoResponseError) as exc_info:
            interpret_response({"choices": []})
        assert exc_info.value.message == "No response from model"


class TestOpenAINativeToolCalls:
    """Tests for structured tool calls in the OpenAI shape."""

    @pytest.mark.parametrize(
        "arguments",
        [
            {"path": "/notes.txt", "recursive": True, "depth": 2},
            json.dumps({"path": "/notes.txt", "recursive": True, "depth": 2}),
        ],
    )
    def test_arguments_as_text_or_object(self, arguments):
        """Test that serialized and object arguments decode identically."""
        raw = openai_response("", tool_calls=[openai_tool_call("read_file", arguments)])

        result = interpret_response(raw)

        assert result.tool_call == ToolCall(
            name="read_file",
            arguments={"path": "/notes.txt", "recursive": True, "depth": 2},
        )

    def test_nested_arguments_preserved(self):
        """Test that nested JSON arguments survive decoding."""
        args = {"url": "https://example.com", "headers": {"X-Test": "1"}, "tags": [1, 2]}
        raw = openai_response(None, tool_calls=[openai_tool_call("request", json.dumps(args))])

        assert interpret_response(raw).tool_call.arguments == args

    def test_empty_arguments_string(self):
        """Test that an empty arguments string means no arguments."""
        raw = openai_response(None, tool_calls=[openai_tool_call("get_current_time", "")])

        assert interpret_response(raw).tool_call == ToolCall("get_current_time", {})

    def test_first_tool_call_wins(self):
        """Test that only the first structured tool call is returned."""
        raw = openai_response(
            None,
            tool_calls=[
                openai_tool_call("read_file", '{"path": "/a"}'),
                openai_tool_call("read_file", '{"path": "/b"}'),
            ],
        )

        assert interpret_response(raw).tool_call.arguments == {"path": "/a"}

    def test_null_content_becomes_empty_string(self):
        """Test that null message content is treated as empty text."""
        raw = openai_response(None, tool_calls=[openai_tool_call("get_current_time", "{}")])

        result = interpret_response(raw)

        assert result.content == ""
        assert result.raw_content == ""

    def test_native_call_takes_precedence_over_markup(self):
        """Test that a structured call wins over bracket markup in the text."""
        raw = openai_response(
            "[TOOL:delete]path=/x[/TOOL]",
            tool_calls=[openai_tool_call("read_file", '{"path": "/y"}')],
        )

        result = interpret_response(raw)

        assert result.tool_call.name == "read_file"
        assert result.content == ""

    def test_legacy_function_call(self):
        """Test that the legacy function_call field is honoured."""
        raw = openai_response(
            "", function_call={"name": "get_timezone", "arguments": '{"timezone": "UTC"}'}
        )

        assert interpret_response(raw).tool_call == ToolCall("get_timezone", {"timezone": "UTC"})

    def test_malformed_arguments_raise(self):
        """Test that unparseable arguments raise MalformedArgumentsError."""
        raw = openai_response("Let me look.", tool_calls=[openai_tool_call("read_file", "{path:")])

        with pytest.raises(MalformedArgumentsError) as exc_info:
            interpret_response(raw)

        assert exc_info.value.tool_name == "read_file"
        assert exc_info.value.raw_arguments == "{path:"
        assert exc_info.value.content == "Let me look."

    def test_non_object_arguments_raise(self):
        """Test that JSON arguments that are not an object are rejected."""
        raw = openai_response("", tool_calls=[openai_tool_call("read_file", "[1, 2]")])

        with pytest.raises(MalformedArgumentsError):
            interpret_response(raw)

    def test_content_part_list(self):
        """Test that content-part arrays are joined from their text parts."""
        raw = openai_response(
            [
                {"type": "text", "text": "Hello "},
                {"type": "image_url", "image_url": {"url": "x"}},
                {"type": "text", "text": "world"},
            ]
        )

        assert interpret_response(raw).content == "Hello world"

    def test_sdk_object_is_dumped(self):
        """Test that SDK response objects are accepted via model_dump."""
        payload = openai_response("From the SDK")
        sdk_response = SimpleNamespace(model_dump=lambda: payload)

        assert interpret_response(sdk_response).content == "From the SDK"


class TestBracketMarkup:
    """Tests for the [TOOL:name]k=v[/TOOL] text format."""

    def test_simple_markup(self):
        """Test the canonical example from the tool format instructions."""
        raw = openai_response("[TOOL:foo]a=1&b=two[/TOOL]")

        result = interpret_response(raw)

        assert result.tool_call == ToolCall(name="foo", arguments={"a": "1", "b": "two"})
        assert result.content == ""

    def test_markup_stripped_from_content(self):
        """Test that surrounding text is kept and the markup removed."""
        raw = openai_response("Sure, let me check. [TOOL:read_file]path=/notes.txt[/TOOL]")

        result = interpret_response(raw)

        assert result.content == "Sure, let me check."
        assert result.raw_content == "Sure, let me check. [TOOL:read_file]path=/notes.txt[/TOOL]"
        assert result.tool_call == ToolCall("read_file", {"path": "/notes.txt"})

    def test_only_first_marker_honoured(self):
        """Test that a second marker is ignored but still stripped."""
        raw = openai_response(
            "[TOOL:read_file]path=/a[/TOOL] and [TOOL:delete]path=/b[/TOOL] done"
        )

        result = interpret_response(raw)

        assert result.tool_call == ToolCall("read_file", {"path": "/a"})
        assert result.content == "and  done"

    def test_values_are_percent_decoded(self):
        """Test that values are percent-decoded and + stays literal."""
        call = detect_tool_call("[TOOL:write_file]path=%2Fa%20b.txt&content=1+1%3D2[/TOOL]")

        assert call.arguments == {"path": "/a b.txt", "content": "1+1=2"}

    def test_value_keeps_text_after_first_equals(self):
        """Test that only the first = separates key and value."""
        call = detect_tool_call("[TOOL:write_file]path=/x&content=a=b=c[/TOOL]")

        assert call.arguments["content"] == "a=b=c"

    def test_multiline_blob(self):
        """Test that the argument blob may span lines."""
        call = detect_tool_call("[TOOL:write_file]path=/x&content=line1\nline2[/TOOL]")

        assert call.arguments["content"] == "line1\nline2"

    def test_empty_blob(self):
        """Test that a marker without arguments yields an empty mapping."""
        assert detect_tool_call("[TOOL:get_current_time][/TOOL]") == ToolCall(
            "get_current_time", {}
        )

    def test_no_marker(self):
        """Test that plain text has no tool call."""
        assert detect_tool_call("just talking") is None
        assert interpret_response(openai_response("just talking")).tool_call is None

    def test_unclosed_marker_is_not_a_call(self):
        """Test that an unclosed marker is not a call, but the tag is stripped."""
        text = "Trying [TOOL:read_file]path=/a"

        assert detect_tool_call(text) is None
        assert strip_tool_markup(text) == "Trying path=/a"


class TestParseArgumentBlob:
    """Tests for the key=value&key2=value2 blob parser."""

    def test_pairs_without_equals_dropped(self):
        """Test that keys without =value are dropped silently."""
        assert parse_argument_blob("a=1&flag&b=2") == {"a": "1", "b": "2"}

    def test_empty_value_kept(self):
        """Test that key= gives an empty string value."""
        assert parse_argument_blob("content=") == {"content": ""}

    def test_empty_key_dropped(self):
        """Test that =value pairs without a key are dropped."""
        assert parse_argument_blob("=x&a=1") == {"a": "1"}

    def test_later_duplicate_wins(self):
        """Test that later duplicate keys overwrite earlier ones."""
        assert parse_argument_blob("a=1&a=2") == {"a": "2"}

    def test_empty_blob(self):
        """Test that an empty blob yields no arguments."""
        assert parse_argument_blob("") == {}


class TestFormatToolCall:
    """Tests for rendering tool calls back to markup."""

    def test_format_encodes_values(self):
        """Test that reserved characters are percent-encoded."""
        call = ToolCall("write_file", {"path": "/a b", "content": "x&y=z"})

        assert format_tool_call(call) == "[TOOL:write_file]path=%2Fa%20b&content=x%26y%3Dz[/TOOL]"

    def test_formatted_call_is_detected(self):
        """Test that a formatted call is read back by the detector."""
        call = ToolCall("write_file", {"path": "/a b", "content": "x&y=z"})

        assert detect_tool_call(format_tool_call(call)) == call

    def test_booleans_render_lowercase(self):
        """Test that booleans use JSON spelling."""
        assert format_tool_call(ToolCall("delete", {"recursive": True})) == (
            "[TOOL:delete]recursive=true[/TOOL]"
        )


class TestGeminiShape:
    """Tests for the Gemini candidates shape."""

    def test_text_parts_concatenated(self):
        """Test that text parts are joined in order."""
        raw = gemini_response({"text": "Hello "}, {"text": "there"})

        result = interpret_response(raw)

        assert result.content == "Hello there"
        assert result.tool_call is None

    def test_function_call_part(self):
        """Test that the first functionCall part becomes the tool call."""
        raw = gemini_response(
            {"text": "Checking."},
            {"functionCall": {"name": "get_timezone", "args": {"timezone": "Europe/Vienna"}}},
            {"functionCall": {"name": "get_current_time", "args": {}}},
        )

        result = interpret_response(raw)

        assert result.tool_call == ToolCall("get_timezone", {"timezone": "Europe/Vienna"})
        assert result.content == "Checking."

    @pytest.mark.parametrize(
        "part", [{"name": "get_current_time", "args": None}, {"name": "get_current_time"}]
    )
    def test_function_call_without_args(self, part):
        """Test that a null or missing args field means no arguments."""
        raw = gemini_response({"functionCall": part})

        result = interpret_response(raw)

        assert result.tool_call == ToolCall("get_current_time", {})

    def test_markup_in_gemini_text(self):
        """Test that bracket markup is detected in Gemini text as well."""
        raw = gemini_response({"text": "[TOOL:list_directory]path=/[/TOOL]"})

        assert interpret_response(raw).tool_call == ToolCall("list_directory", {"path": "/"})

    def test_candidate_without_content(self):
        """Test that a candidate without content yields empty text."""
        raw = {"candidates": [{"finishReason": "SAFETY"}]}

        result = interpret_response(raw)

        assert result.content == ""
        assert result.tool_call is None


class TestInterpretLenient:
    """Tests for the non-fatal handling of malformed arguments."""

    def test_malformed_arguments_degrade_to_text(self):
        """Test that malformed arguments give plain content and no call."""
        raw = openai_response("Let me look.", tool_calls=[openai_tool_call("read_file", "{bad")])

        result = interpret_lenient(raw)

        assert result.tool_call is None
        assert result.content == "Let me look."

    def test_raw_arguments_surface_when_no_text(self):
        """Test that the raw argument text is shown when there is no content."""
        raw = openai_response(None, tool_calls=[openai_tool_call("read_file", "{bad")])

        assert interpret_lenient(raw).content == "{bad"

    def test_no_response_still_raises(self):
        """Test that NoResponseError is not swallowed."""
        with pytest.raises(NoResponseError):
            interpret_lenient({"choices": []})

    def test_pure_function(self):
        """Test that interpreting does not mutate its input."""
        raw = openai_response("[TOOL:foo]a=1[/TOOL]")
        snapshot = json.dumps(raw, sort_keys=True)

        interpreter.interpret_response(raw)

        assert json.dumps(raw, sort_keys=True) == snapshot
