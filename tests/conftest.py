"""
Shared fixtures for memory server tests.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Tuple

import pytest

from memory_server.events import EventSink
from memory_server.service import create_service
from memory_server.store import MemoryStore


class RecordingEventSink(EventSink):
    """Keeps every emitted event for assertions."""

    def __init__(self):
        self.events: List[Tuple[str, str, Dict[str, Any]]] = []

    def emit(self, level: str, message: str, **meta: Any) -> None:
        self.events.append((level, message, meta))

    def messages(self, level: str = None) -> List[str]:
        return [m for lvl, m, _ in self.events if level is None or lvl == level]

    def find(self, message: str) -> List[Dict[str, Any]]:
        return [meta for _, m, meta in self.events if m == message]


class TickingClock:
    """Deterministic clock: each call is one second after the previous."""

    def __init__(self, start: datetime = None):
        self.current = start or datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        value = self.current
        self.current += timedelta(seconds=1)
        return value


@pytest.fixture
def events() -> RecordingEventSink:
    return RecordingEventSink()


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def store(events, clock) -> MemoryStore:
    return MemoryStore(events=events, clock=clock)


@pytest.fixture
def service(events):
    """Fully wired service with a recording sink."""
    return create_service(events=events)
