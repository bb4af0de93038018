"""
Job events.

A job exposes three events. Each event has at most one handler; handlers
receive a single payload object.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Union


class Event(Enum):
    """Events fired by raster jobs."""
    PROGRESS = "progress"
    DONE = "done"
    ABORT = "abort"


class UnknownEventError(ValueError):
    """Raised when registering a handler for an event that does not exist."""


@dataclass(frozen=True)
class ProgressEvent:
    """A scanline was processed and the percentage went up."""
    percent: int
    gcode: Optional[List[str]]   # Commands of the scanline, None if it was empty


@dataclass(frozen=True)
class DoneEvent:
    gcode: List[str]


@dataclass(frozen=True)
class AbortEvent:
    lines_processed: int


@dataclass(frozen=True)
class HeightMapProgressEvent:
    percent: int
    pixels: List[float]


@dataclass(frozen=True)
class HeightMapDoneEvent:
    height_map: List[List[float]]


Handler = Callable[[object], None]


class EventDispatcher:
    """Handler table keyed by Event."""

    def __init__(self):
        self._handlers: Dict[Event, Handler] = {}

    @staticmethod
    def resolve(event: Union[Event, str]) -> Event:
        """Accept an Event or its name ('progress', 'done', 'abort')."""
        if isinstance(event, Event):
            return event
        try:
            return Event(event)
        except ValueError:
            raise UnknownEventError(f"Undefined event: {event}") from None

    def on(self, event: Union[Event, str], handler: Handler):
        """Register the handler of an event, replacing any previous one."""
        self._handlers[self.resolve(event)] = handler

    def off(self, event: Union[Event, str]):
        self._handlers.pop(self.resolve(event), None)

    def emit(self, event: Event, payload):
        handler = self._handlers.get(event)
        if handler is not None:
            handler(payload)
