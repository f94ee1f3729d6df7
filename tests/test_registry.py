"""
Unit tests for the tool registry and argument validation.
"""

import pytest

from memory_server.base import ValidationError
from memory_server.registry import ToolRegistry, build_registry
from memory_server.tools import StoreMemoryTool

EXPECTED_TOOLS = [
    "store_memory",
    "retrieve_memories",
    "list_memories",
    "delete_memory",
    "clear_memories",
]


@pytest.fixture
def registry(store, events):
    return build_registry(store, events)


class TestCatalog:
    """Test the static tool catalog."""

    def test_exactly_five_tools_in_order(self, registry):
        assert registry.names() == EXPECTED_TOOLS
        assert len(registry) == 5

    def test_lookup(self, registry):
        assert "store_memory" in registry
        assert registry.get("store_memory").name == "store_memory"
        assert registry.get("nonexistent_tool") is None

    def test_duplicate_registration_rejected(self, store):
        registry = ToolRegistry()
        registry.register(StoreMemoryTool(store))
        with pytest.raises(ValueError):
            registry.register(StoreMemoryTool(store))

    def test_mcp_schema_store_memory(self, registry):
        tools = {t["name"]: t for t in registry.to_mcp_tools()}
        store_memory = tools["store_memory"]

        assert store_memory["description"] == "Store a memory with optional tags"
        schema = store_memory["inputSchema"]
        assert schema["type"] == "object"
        assert schema["required"] == ["content"]
        assert schema["properties"]["content"]["type"] == "string"
        assert schema["properties"]["tags"]["type"] == "array"
        assert schema["properties"]["tags"]["items"] == {"type": "string"}

    def test_mcp_schema_optional_and_empty(self, registry):
        tools = {t["name"]: t for t in registry.to_mcp_tools()}

        retrieve = tools["retrieve_memories"]["inputSchema"]
        assert "required" not in retrieve
        assert retrieve["properties"]["query"]["type"] == "string"

        for name in ("list_memories", "clear_memories"):
            assert tools[name]["inputSchema"] == {"type": "object", "properties": {}}

        delete = tools["delete_memory"]["inputSchema"]
        assert delete["required"] == ["id"]
        assert delete["properties"]["id"]["type"] == "number"

    def test_openai_schema(self, registry):
        schemas = registry.to_openai_schema()
        assert [s["function"]["name"] for s in schemas] == EXPECTED_TOOLS
        assert all(s["type"] == "function" for s in schemas)
        assert schemas[0]["function"]["parameters"]["required"] == ["content"]


class TestValidation:
    """Test MemoryTool.validate."""

    def test_missing_required(self, registry):
        with pytest.raises(ValidationError, match="Missing required parameter: content"):
            registry.get("store_memory").validate({"tags": ["a"]})

    def test_wrong_type(self, registry):
        with pytest.raises(ValidationError, match="content"):
            registry.get("store_memory").validate({"content": 42})

    def test_array_items_checked(self, registry):
        with pytest.raises(ValidationError, match="array of string"):
            registry.get("store_memory").validate({"content": "x", "tags": ["ok", 3]})

    def test_number_rejects_bool_and_string(self, registry):
        tool = registry.get("delete_memory")
        with pytest.raises(ValidationError):
            tool.validate({"id": True})
        with pytest.raises(ValidationError):
            tool.validate({"id": "5"})

    def test_optional_defaults_and_unknown_dropped(self, registry):
        validated = registry.get("store_memory").validate({"content": "x", "extra": "ignored"})
        assert validated == {"content": "x", "tags": None}
