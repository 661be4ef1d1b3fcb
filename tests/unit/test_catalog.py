"""Unit tests for the tool catalog, model registry and chat prompts."""

import json

import pytest

from mcp_playground.domain.chat.model_registry import (
    MODEL_CONFIG,
    get_model_info,
    supports_tools,
)
from mcp_playground.infrastructure.ai.prompts import PlaygroundPromptV1
from mcp_playground.mcp.catalog import (
    AUTH_REQUIRED_SERVERS,
    MCP_SERVERS,
    describe_tools_for_prompt,
    get_all_tools,
    get_catalog,
    get_tools_schema,
    to_gemini_tools,
    to_openai_tools,
)
from mcp_playground.mcp.tools import CATALOG_TOOLS


class TestCatalogDefinitions:
    """Tests for the static catalog table."""

    def test_all_catalogs_present(self):
        """Test that every catalog id is defined."""
        assert list(MCP_SERVERS) == [
            "filesystem",
            "memory",
            "fetch",
            "time",
            "sequentialthinking",
            "git",
            "http",
            "sqlite",
            "puppeteer",
            "context7",
            "everything",
        ]

    @pytest.mark.parametrize("catalog_id", list(CATALOG_TOOLS))
    def test_implemented_catalogs_match_handlers(self, catalog_id):
        """Test that advertised tools and handler tables agree."""
        advertised = {tool.name for tool in MCP_SERVERS[catalog_id].tools}

        assert advertised == set(CATALOG_TOOLS[catalog_id])

    def test_catalog_dict_shape(self):
        """Test the serialized catalog entry."""
        entry = get_catalog("time").to_dict()

        assert entry["id"] == "time"
        assert entry["requiresAuth"] is False
        assert [tool["name"] for tool in entry["tools"]] == ["get_current_time", "get_timezone"]

    def test_unknown_catalog(self):
        """Test that unknown ids give None."""
        assert get_catalog("github") is None
        assert "github" in AUTH_REQUIRED_SERVERS

    def test_parameters_schema(self):
        """Test the JSON-schema rendering of parameters."""
        write_file = get_catalog("filesystem").get_tool("write_file")

        assert write_file.parameters_schema() == {
            "type": "object",
            "properties": {
                "path": {"type": "string", "description": "Path to the file"},
                "content": {"type": "string", "description": "Content to write"},
            },
            "required": ["path", "content"],
        }

    def test_schema_without_required(self):
        """Test that parameterless tools omit the required list."""
        schema = get_catalog("time").get_tool("get_current_time").parameters_schema()

        assert schema == {"type": "object", "properties": {}}

    def test_get_all_tools_tagged_with_server(self):
        """Test the flat tool listing."""
        tools = get_all_tools()

        read_file = next(tool for tool in tools if tool["name"] == "read_file")
        assert read_file["serverId"] == "filesystem"
        assert len(tools) == sum(len(server.tools) for server in MCP_SERVERS.values())

    def test_tools_schema_is_json(self):
        """Test that the per-server schema is JSON serializable."""
        schema = get_tools_schema()

        assert json.loads(json.dumps(schema))[0]["name"] == "filesystem"


class TestProviderConversions:
    """Tests for provider tool formats."""

    def test_openai_tools(self):
        """Test the OpenAI function envelope."""
        tools = to_openai_tools(get_catalog("time").tools)

        assert tools[1] == {
            "type": "function",
            "function": {
                "name": "get_timezone",
                "description": get_catalog("time").tools[1].description,
                "parameters": get_catalog("time").tools[1].parameters_schema(),
            },
        }

    def test_gemini_tools(self):
        """Test the Gemini function declarations."""
        tools = to_gemini_tools(get_catalog("git").tools)

        assert len(tools) == 1
        assert [decl["name"] for decl in tools[0]["functionDeclarations"]] == [
            "git_status",
            "git_log",
            "git_branch",
        ]

    def test_gemini_tools_empty(self):
        """Test that no tools gives no tools entry."""
        assert to_gemini_tools([]) == []


class TestModelRegistry:
    """Tests for model lookups."""

    def test_default_model_supports_tools(self):
        """Test the default model."""
        assert supports_tools("kilocode/anthropic/claude-haiku-3.5") is True

    @pytest.mark.parametrize(
        "model_id",
        [
            "kilocode/microsoft/phi-3-mini-128k-instruct",
            "kilocode/mistralai/mistral-7b-instruct-v0.2",
        ],
    )
    def test_chat_only_models(self, model_id):
        """Test models without tool support."""
        assert supports_tools(model_id) is False

    def test_unknown_model_is_chat_only(self):
        """Test that unknown models are treated as chat-only."""
        info = get_model_info("someone/new-model")

        assert info.supports_tools is False
        assert info.name == "someone/new-model"

    def test_registry_keys_match_ids(self):
        """Test that the table is keyed by model id."""
        assert all(model_id == info.id for model_id, info in MODEL_CONFIG.items())


class TestPlaygroundPrompt:
    """Tests for the system and follow-up prompts."""

    def test_tool_prompt_includes_format(self):
        """Test that tool-capable models get the bracket format."""
        system = PlaygroundPromptV1().render_system(supports_tools=True)

        assert system.startswith("You are a helpful AI assistant.")
        assert "[TOOL:tool_name]arg1=value1&arg2=value2[/TOOL]" in system
        assert describe_tools_for_prompt() in system

    def test_tool_prompt_for_selected_catalog(self):
        """Test that a selected catalog narrows the tool listing."""
        system = PlaygroundPromptV1().render_system(True, get_catalog("time"))

        assert "- time: get_current_time(), get_timezone(timezone)" in system
        assert "read_file" not in system

    def test_chat_only_prompt(self):
        """Test that chat-only models get no tool instructions."""
        system = PlaygroundPromptV1().render_system(supports_tools=False)

        assert "[TOOL:" not in system
        assert "clearly and concisely" in system

    def test_follow_up_prompt(self):
        """Test the explanation request after a tool ran."""
        prompt = PlaygroundPromptV1().render_follow_up({"success": True, "content": "hi"})

        assert prompt == (
            'The tool result was: {"success": true, "content": "hi"}. Explain it to the user.'
        )

    def test_build_messages_order(self):
        """Test system prompt, then history, then the user text."""
        history = [{"role": "user", "content": "a"}, {"role": "assistant", "content": "b"}]

        messages = PlaygroundPromptV1().build_messages(history, "c", supports_tools=False)

        assert [m["role"] for m in messages] == ["system", "user", "assistant", "user"]
        assert messages[-1] == {"role": "user", "content": "c"}

    def test_prompt_version(self):
        """Test prompt version metadata."""
        assert PlaygroundPromptV1.version.name == "playground_chat"
