"""
Memory Tools Package

MEMORY_TOOLS lists the tool classes in catalog order; registry.py builds
one instance of each, bound to the process store.
"""

from .memory_tools import (
    ClearMemoriesTool,
    DeleteMemoryTool,
    ListMemoriesTool,
    RetrieveMemoriesTool,
    StoreMemoryTool,
)

MEMORY_TOOLS = (
    StoreMemoryTool,
    RetrieveMemoriesTool,
    ListMemoriesTool,
    DeleteMemoryTool,
    ClearMemoriesTool,
)

__all__ = [
    "MEMORY_TOOLS",
    "StoreMemoryTool",
    "RetrieveMemoriesTool",
    "ListMemoriesTool",
    "DeleteMemoryTool",
    "ClearMemoriesTool",
]
