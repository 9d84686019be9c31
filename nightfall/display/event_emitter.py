"""
Structured display events and the emitter that fans them out to sinks.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Any, Optional, List

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameEvent:
    """One narrative event for the display: {phase, kind, subject, detail}."""
    phase: str
    kind: str
    subject: Optional[int] = None  # player id the event is about
    detail: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "phase": self.phase,
            "kind": self.kind,
            "subject": self.subject,
            "detail": dict(self.detail),
        }


class DisplaySink(ABC):
    """Anything that can show game events to people."""

    @abstractmethod
    def emit(self, event: GameEvent) -> None:
        pass


class MemorySink(DisplaySink):
    """Keeps every event in memory."""

    def __init__(self):
        self.events: List[GameEvent] = []

    def emit(self, event: GameEvent) -> None:
        self.events.append(event)

    def of_kind(self, kind: str) -> List[GameEvent]:
        return [e for e in self.events if e.kind == kind]

    def kinds(self) -> List[str]:
        return [e.kind for e in self.events]

    def clear(self) -> None:
        self.events.clear()


class EventEmitter:
    """Fans events out to every registered sink."""

    def __init__(self, sinks: Optional[List[DisplaySink]] = None):
        self.sinks: List[DisplaySink] = list(sinks or [])

    def add_sink(self, sink: DisplaySink) -> None:
        self.sinks.append(sink)

    def emit(self, event: GameEvent) -> None:
        """Emit an event to all sinks."""
        for sink in self.sinks:
            try:
                sink.emit(event)
            except Exception:
                # A broken display must not break the game
                logger.exception("Display sink %r failed on %s event", sink, event.kind)
