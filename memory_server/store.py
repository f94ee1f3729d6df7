"""
Memory Store

Volatile, process-local store of free-text memories.
Owns the id -> Memory mapping; knows nothing about tools or transports.
"""

import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from .events import EventSink, NullEventSink


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """ISO-8601 with millisecond precision and a Z suffix."""
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class Memory:
    """A single stored memory."""
    id: int
    content: str
    tags: List[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=_utcnow)

    @property
    def timestamp(self) -> str:
        return format_timestamp(self.created_at)

    def matches(self, query: Optional[str]) -> bool:
        """Case-insensitive substring match against content or any tag."""
        if not query:
            return True

        needle = query.lower()
        if needle in self.content.lower():
            return True
        return any(needle in tag.lower() for tag in self.tags)

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "content": self.content,
            "tags": list(self.tags),
            "timestamp": self.timestamp,
        }


class MemoryStore:
    """
    In-memory record store.

    Ids start at 1 and are never reused, even after delete or clear.
    Mutations and id assignment are serialized by a lock.
    """

    def __init__(
        self,
        events: EventSink = None,
        clock: Callable[[], datetime] = _utcnow
    ):
        self.events = events or NullEventSink()
        self._clock = clock
        self._memories: Dict[int, Memory] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._memories)

    def create(self, content: str, tags: Optional[List[str]] = None) -> Memory:
        """Store a new memory and return it."""
        tags = list(tags or [])
        with self._lock:
            memory_id = self._next_id
            self._next_id += 1
            memory = Memory(
                id=memory_id,
                content=content,
                tags=tags,
                created_at=self._clock()
            )
            self._memories[memory_id] = memory

        self.events.info("Memory stored", memory_id=memory_id, tags_count=len(tags))
        return memory

    def _snapshot(self) -> List[Memory]:
        with self._lock:
            return list(self._memories.values())

    @staticmethod
    def _newest_first(memories: List[Memory]) -> List[Memory]:
        return sorted(memories, key=lambda m: (m.created_at, m.id), reverse=True)

    def search(self, query: Optional[str] = None) -> List[Memory]:
        """
        Return memories matching the query, most recent first.
        An absent or empty query matches every memory.
        """
        results = self._newest_first([m for m in self._snapshot() if m.matches(query)])
        self.events.info("Memory retrieval", query=query, results_count=len(results))
        return results

    def list_all(self) -> List[Memory]:
        """Return every memory, most recent first."""
        memories = self._newest_first(self._snapshot())
        self.events.info("Listed all memories", total_count=len(memories))
        return memories

    def get(self, memory_id: int) -> Optional[Memory]:
        with self._lock:
            return self._memories.get(memory_id)

    def delete_by_id(self, memory_id: int) -> bool:
        """Remove a memory; returns False when the id is not present."""
        with self._lock:
            deleted = self._memories.pop(memory_id, None) is not None

        self.events.info("Memory deletion attempt", memory_id=memory_id, success=deleted)
        return deleted

    def clear(self) -> int:
        """Remove all memories and return how many were removed."""
        with self._lock:
            count = len(self._memories)
            self._memories.clear()

        self.events.info("All memories cleared", cleared_count=count)
        return count
