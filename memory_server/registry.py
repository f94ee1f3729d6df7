"""
Memory Tool Registry

Single source of truth for the tool catalog. The same registry answers
tools/list and routes tools/call, so the schema exists in one place.
"""

import logging
from typing import Dict, List, Optional

from .base import MemoryTool, ToolDefinition
from .events import EventSink, NullEventSink
from .store import MemoryStore
from .tools import MEMORY_TOOLS

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Ordered, name-keyed catalog of tool instances."""

    def __init__(self):
        self._tools: Dict[str, MemoryTool] = {}

    def register(self, tool: MemoryTool) -> None:
        if tool.name in self._tools:
            raise ValueError(f"Tool already registered: {tool.name}")
        self._tools[tool.name] = tool
        logger.debug(f"Registered tool: {tool.name}")

    def get(self, name: str) -> Optional[MemoryTool]:
        """Get a tool by name. Returns None if the tool is not registered."""
        return self._tools.get(name)

    def names(self) -> List[str]:
        return list(self._tools.keys())

    def definitions(self) -> List[ToolDefinition]:
        return [tool.to_definition() for tool in self._tools.values()]

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def to_mcp_tools(self) -> List[Dict]:
        """The tools/list payload: name, description and inputSchema per tool."""
        return [
            {
                "name": tool.name,
                "description": tool.description,
                "inputSchema": tool.input_schema(),
            }
            for tool in self._tools.values()
        ]

    def to_openai_schema(self) -> List[Dict]:
        """
        Get all tools in OpenAI function calling format.
        Used by orchestration agents that configure an LLM directly.
        """
        return [
            {
                "type": "function",
                "function": {
                    "name": tool.name,
                    "description": tool.description,
                    "parameters": tool.input_schema(),
                },
            }
            for tool in self._tools.values()
        ]


def build_registry(store: MemoryStore, events: EventSink = None) -> ToolRegistry:
    """Build the memory tool catalog bound to the given store."""
    events = events or NullEventSink()
    registry = ToolRegistry()

    for tool_cls in MEMORY_TOOLS:
        registry.register(tool_cls(store, events))

    logger.info(f"Tool registry built. Total tools: {len(registry)}")
    return registry
