"""
Tool Dispatcher

Routes a tool name and argument bag to the matching registered tool.
Faults are logged and re-raised; translating them into protocol errors is
the transport's job.
"""

from typing import Any, Dict, Optional

from .base import UnknownOperation, ValidationError
from .events import EventSink, NullEventSink
from .registry import ToolRegistry


class ToolDispatcher:
    """Stateless per call: every invoke is an independent transaction."""

    def __init__(self, registry: ToolRegistry, events: EventSink = None):
        self.registry = registry
        self.events = events or NullEventSink()

    async def invoke(
        self,
        name: str,
        arguments: Optional[Dict[str, Any]] = None,
        request_id: Any = None
    ) -> str:
        """
        Execute a tool by name with the given arguments.
        Returns the tool's result text.

        Raises:
            UnknownOperation: name is not in the registry
            ValidationError: arguments are missing or ill-typed
        """
        self.events.info("Tool call received", tool_name=name, request_id=request_id)

        try:
            tool = self.registry.get(name) if isinstance(name, str) else None
            if tool is None:
                raise UnknownOperation(f"Unknown tool: {name}", tool_name=name)

            if arguments is None:
                arguments = {}
            if not isinstance(arguments, dict):
                raise ValidationError("Tool arguments must be an object", tool_name=name)

            text = await tool.run(arguments)
        except Exception as e:
            self.events.error(
                "Tool call failed",
                tool_name=name,
                request_id=request_id,
                error=str(e)
            )
            raise

        self.events.info("Tool call completed successfully", tool_name=name, request_id=request_id)
        return text
