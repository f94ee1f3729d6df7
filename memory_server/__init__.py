"""
Memory Server

Volatile in-process memory store exposed as JSON-RPC tools over HTTP and
stdio. The store, registry and dispatcher are plain objects wired together
by service.create_service().
"""

__version__ = "1.0.0"

from .base import (
    EnvelopeError,
    MemoryServerError,
    MemoryTool,
    ToolParameter,
    UnknownMethod,
    UnknownOperation,
    ValidationError,
)
from .dispatcher import ToolDispatcher
from .events import EventSink, LoggingEventSink, NullEventSink
from .protocol import McpProtocol
from .registry import ToolRegistry, build_registry
from .service import MemoryService, create_service
from .store import Memory, MemoryStore

__all__ = [
    "__version__",
    "Memory",
    "MemoryStore",
    "EventSink",
    "LoggingEventSink",
    "NullEventSink",
    "MemoryTool",
    "ToolParameter",
    "ToolRegistry",
    "build_registry",
    "ToolDispatcher",
    "McpProtocol",
    "MemoryService",
    "create_service",
    "MemoryServerError",
    "ValidationError",
    "UnknownOperation",
    "UnknownMethod",
    "EnvelopeError",
]
