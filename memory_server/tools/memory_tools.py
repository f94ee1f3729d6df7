"""
Memory Tools

The five operations exposed to clients: store, retrieve, list, delete and
clear. Each tool returns a single human-readable text block.
"""

from typing import List, Optional

from ..base import MemoryTool, ToolParameter, ValidationError
from ..store import Memory

NO_MATCHES_TEXT = "No memories found matching the query."
NO_MEMORIES_TEXT = "No memories stored."
CLEARED_TEXT = "All memories cleared successfully."


def format_memory(memory: Memory) -> str:
    return (
        f"ID: {memory.id}\n"
        f"Content: {memory.content}\n"
        f"Tags: {', '.join(memory.tags)}\n"
        f"Timestamp: {memory.timestamp}\n"
    )


def format_memories(header: str, memories: List[Memory]) -> str:
    """Header, blank line, then one block per memory."""
    return f"{header}\n\n" + "\n".join(format_memory(m) for m in memories)


class StoreMemoryTool(MemoryTool):
    """Store a new memory."""

    @property
    def name(self) -> str:
        return "store_memory"

    @property
    def description(self) -> str:
        return "Store a memory with optional tags"

    @property
    def parameters(self) -> List[ToolParameter]:
        return [
            ToolParameter(
                name="content",
                type="string",
                description="The content to store",
                required=True
            ),
            ToolParameter(
                name="tags",
                type="array",
                description="Optional tags for categorizing the memory",
                required=False,
                items_type="string"
            )
        ]

    async def execute(self, content: str, tags: Optional[List[str]] = None) -> str:
        if not content:
            raise ValidationError("Parameter 'content' must not be empty", tool_name=self.name)

        self.events.debug("Executing store_memory tool", content=content[:100], tags=tags)
        memory = self.store.create(content, tags or [])
        return f"Memory stored successfully with ID {memory.id}"


class RetrieveMemoriesTool(MemoryTool):
    """Search memories by content or tag."""

    @property
    def name(self) -> str:
        return "retrieve_memories"

    @property
    def description(self) -> str:
        return "Retrieve memories based on a search query"

    @property
    def parameters(self) -> List[ToolParameter]:
        return [
            ToolParameter(
                name="query",
                type="string",
                description="Search query to filter memories",
                required=False
            )
        ]

    async def execute(self, query: Optional[str] = None) -> str:
        self.events.debug("Executing retrieve_memories tool", query=query)
        memories = self.store.search(query)

        if not memories:
            return NO_MATCHES_TEXT
        return format_memories(f"Found {len(memories)} memories:", memories)


class ListMemoriesTool(MemoryTool):
    """List every stored memory."""

    @property
    def name(self) -> str:
        return "list_memories"

    @property
    def description(self) -> str:
        return "List all stored memories"

    async def execute(self) -> str:
        self.events.debug("Executing list_memories tool")
        memories = self.store.list_all()

        if not memories:
            return NO_MEMORIES_TEXT
        return format_memories(f"All memories ({len(memories)} total):", memories)


class DeleteMemoryTool(MemoryTool):
    """Delete a memory by id. A missing id is reported, not raised."""

    @property
    def name(self) -> str:
        return "delete_memory"

    @property
    def description(self) -> str:
        return "Delete a memory by ID"

    @property
    def parameters(self) -> List[ToolParameter]:
        return [
            ToolParameter(
                name="id",
                type="number",
                description="The ID of the memory to delete",
                required=True
            )
        ]

    async def execute(self, id: float) -> str:
        # JSON clients may send 3.0 for 3
        if isinstance(id, float) and id.is_integer():
            id = int(id)

        self.events.debug("Executing delete_memory tool", memory_id=id)
        if self.store.delete_by_id(id):
            return f"Memory with ID {id} deleted successfully."
        return f"Memory with ID {id} not found."


class ClearMemoriesTool(MemoryTool):
    """Remove every memory."""

    @property
    def name(self) -> str:
        return "clear_memories"

    @property
    def description(self) -> str:
        return "Clear all stored memories"

    async def execute(self) -> str:
        self.events.debug("Executing clear_memories tool")
        self.store.clear()
        return CLEARED_TEXT
