"""
Service Wiring

Builds the single store, the tool registry bound to it, the dispatcher and
the protocol layer. Constructed once per process and shared by whichever
transport is running.
"""

from dataclasses import dataclass

from .dispatcher import ToolDispatcher
from .events import EventSink, LoggingEventSink
from .protocol import McpProtocol
from .registry import ToolRegistry, build_registry
from .store import MemoryStore


@dataclass
class MemoryService:
    store: MemoryStore
    registry: ToolRegistry
    dispatcher: ToolDispatcher
    protocol: McpProtocol
    events: EventSink


def create_service(events: EventSink = None) -> MemoryService:
    """Wire the store, registry, dispatcher and protocol around one event sink."""
    events = events or LoggingEventSink()
    store = MemoryStore(events=events)
    registry = build_registry(store, events)
    dispatcher = ToolDispatcher(registry, events)
    protocol = McpProtocol(registry, dispatcher, events)
    return MemoryService(
        store=store,
        registry=registry,
        dispatcher=dispatcher,
        protocol=protocol,
        events=events,
    )
