"""
Event Sink

Structured event emission for the store and dispatcher.
Core components receive a sink at construction instead of reaching for a
global logger, so tests can run them silently or record what they emit.
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

# Level names accepted by LOG_LEVEL, mapped to stdlib logging levels
LEVELS: Dict[str, int] = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


class EventSink(ABC):
    """Receives structured events: level, message and key/value metadata."""

    @abstractmethod
    def emit(self, level: str, message: str, **meta: Any) -> None:
        pass

    def error(self, message: str, **meta: Any) -> None:
        self.emit("error", message, **meta)

    def warn(self, message: str, **meta: Any) -> None:
        self.emit("warn", message, **meta)

    def info(self, message: str, **meta: Any) -> None:
        self.emit("info", message, **meta)

    def debug(self, message: str, **meta: Any) -> None:
        self.emit("debug", message, **meta)


class LoggingEventSink(EventSink):
    """
    Forwards events to a stdlib logger.

    Metadata is appended to the message as compact JSON, e.g.
    ``Memory stored {"memory_id": 1, "tags_count": 2}``.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("memory_server")

    def emit(self, level: str, message: str, **meta: Any) -> None:
        levelno = LEVELS.get(level, logging.INFO)
        if not self.logger.isEnabledFor(levelno):
            return
        if meta:
            self.logger.log(levelno, "%s %s", message, json.dumps(meta, default=str))
        else:
            self.logger.log(levelno, "%s", message)


class NullEventSink(EventSink):
    """Discards every event."""

    def emit(self, level: str, message: str, **meta: Any) -> None:
        pass
