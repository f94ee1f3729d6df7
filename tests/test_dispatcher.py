"""
Unit tests for ToolDispatcher and the memory tools' result texts.
"""

import re

import pytest

from memory_server.base import UnknownOperation, ValidationError
from memory_server.dispatcher import ToolDispatcher
from memory_server.registry import build_registry


@pytest.fixture
def dispatcher(store, events):
    return ToolDispatcher(build_registry(store, events), events)


class TestStoreAndRetrieve:
    """store_memory / retrieve_memories / list_memories."""

    @pytest.mark.asyncio
    async def test_store_returns_id(self, dispatcher):
        text = await dispatcher.invoke("store_memory", {"content": "hello"})
        assert text == "Memory stored successfully with ID 1"

    @pytest.mark.asyncio
    async def test_store_then_retrieve(self, dispatcher):
        text = await dispatcher.invoke(
            "store_memory",
            {"content": "Remember to buy groceries", "tags": ["personal", "todo"]}
        )
        memory_id = int(re.search(r"ID (\d+)", text).group(1))
        await dispatcher.invoke("store_memory", {"content": "Unrelated note"})

        result = await dispatcher.invoke("retrieve_memories", {"query": "groceries"})
        assert result.startswith("Found 1 memories:\n\n")
        assert f"ID: {memory_id}\n" in result
        assert "Content: Remember to buy groceries\n" in result
        assert "Tags: personal, todo\n" in result
        assert "Unrelated" not in result

    @pytest.mark.asyncio
    async def test_retrieve_rendering_exact(self, dispatcher, store):
        store.create("first", ["a"])
        store.create("second", [])

        result = await dispatcher.invoke("retrieve_memories", {})
        assert result == (
            "Found 2 memories:\n\n"
            "ID: 2\nContent: second\nTags: \nTimestamp: 2024-05-01T12:00:01.000Z\n"
            "\n"
            "ID: 1\nContent: first\nTags: a\nTimestamp: 2024-05-01T12:00:00.000Z\n"
        )

    @pytest.mark.asyncio
    async def test_retrieve_no_results(self, dispatcher, store):
        store.create("something")
        result = await dispatcher.invoke("retrieve_memories", {"query": "zz_no_match"})
        assert result == "No memories found matching the query."

    @pytest.mark.asyncio
    async def test_retrieve_without_query_lists_everything(self, dispatcher, store):
        store.create("a")
        store.create("b")
        result = await dispatcher.invoke("retrieve_memories")
        assert result.startswith("Found 2 memories:")

    @pytest.mark.asyncio
    async def test_list_header_and_empty(self, dispatcher, store):
        assert await dispatcher.invoke("list_memories", {}) == "No memories stored."

        store.create("a")
        store.create("b")
        result = await dispatcher.invoke("list_memories", {})
        assert result.startswith("All memories (2 total):\n\n")
        assert result.index("ID: 2") < result.index("ID: 1")

    @pytest.mark.asyncio
    async def test_store_missing_content(self, dispatcher, store):
        with pytest.raises(ValidationError, match="Missing required parameter: content"):
            await dispatcher.invoke("store_memory", {"tags": ["x"]})
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_store_empty_content(self, dispatcher, store):
        with pytest.raises(ValidationError, match="must not be empty"):
            await dispatcher.invoke("store_memory", {"content": ""})
        assert len(store) == 0
        assert store.create("next").id == 1


class TestDeleteAndClear:
    """delete_memory / clear_memories."""

    @pytest.mark.asyncio
    async def test_delete_found_then_not_found(self, dispatcher, store):
        store.create("x")
        assert await dispatcher.invoke("delete_memory", {"id": 1}) == "Memory with ID 1 deleted successfully."
        assert await dispatcher.invoke("delete_memory", {"id": 1}) == "Memory with ID 1 not found."

    @pytest.mark.asyncio
    async def test_delete_missing_on_empty_store(self, dispatcher):
        assert await dispatcher.invoke("delete_memory", {"id": 999}) == "Memory with ID 999 not found."

    @pytest.mark.asyncio
    async def test_delete_integral_float_id(self, dispatcher, store):
        store.create("x")
        assert await dispatcher.invoke("delete_memory", {"id": 1.0}) == "Memory with ID 1 deleted successfully."

    @pytest.mark.asyncio
    async def test_delete_requires_id(self, dispatcher):
        with pytest.raises(ValidationError, match="Missing required parameter: id"):
            await dispatcher.invoke("delete_memory", {})

    @pytest.mark.asyncio
    async def test_clear(self, dispatcher, store, events):
        store.create("a")
        store.create("b")
        assert await dispatcher.invoke("clear_memories", {}) == "All memories cleared successfully."
        assert len(store) == 0
        assert events.find("All memories cleared") == [{"cleared_count": 2}]


class TestFaults:
    """Unknown tools and malformed argument bags."""

    @pytest.mark.asyncio
    async def test_unknown_tool(self, dispatcher, store, events):
        with pytest.raises(UnknownOperation, match="Unknown tool: nonexistent_tool"):
            await dispatcher.invoke("nonexistent_tool", {})
        assert len(store) == 0
        assert "Tool call failed" in events.messages("error")

    @pytest.mark.asyncio
    async def test_arguments_must_be_object(self, dispatcher):
        with pytest.raises(ValidationError, match="must be an object"):
            await dispatcher.invoke("store_memory", ["not", "a", "dict"])

    @pytest.mark.asyncio
    async def test_success_logged(self, dispatcher, events):
        await dispatcher.invoke("list_memories", {}, request_id=7)
        completed = events.find("Tool call completed successfully")
        assert completed == [{"tool_name": "list_memories", "request_id": 7}]

    @pytest.mark.asyncio
    async def test_reserved_argument_names_are_ignored(self, dispatcher, store):
        text = await dispatcher.invoke("store_memory", {"content": "x", "self": 1, "arguments": 2})
        assert text == "Memory stored successfully with ID 1"
        assert store.get(1).content == "x"
