"""Event sink shared by the session coordinator, mode controllers, renderer and client.

Components never inherit an emitter; each receives an EventSink at
construction and calls ``emit``. The coordinator wires every component to the
same sink so the presentation shell observes one stream.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from enum import Enum
import logging
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    """Normalized event names."""

    PROGRAM_LOADED = "program-loaded"
    CAPTURE_READY = "capture-ready"
    SCENES_CREATED = "scenes-created"
    STARTED = "started"
    STOPPED = "stopped"
    SLIDE_CHANGED = "slide-changed"
    SCENE_CHANGED = "scene-changed"
    BLACKOUT = "blackout"
    KEY_SENT = "key-sent"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    ACTIVE_CONTAINER_CHANGED = "active-container-changed"


class EventSource(str, Enum):
    """Component that produced an event."""

    LIVE_RENDER = "live-render"
    SCENE_GRAPH = "scene-graph"
    RENDERER = "renderer"
    PRODUCTION = "production"
    SESSION = "session"


class Event(BaseModel):
    """A single emitted event."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    type: EventType
    source: EventSource
    payload: Any = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


class EventSink(Protocol):
    """Receiver of component events."""

    def emit(self, event: Event) -> None:
        """Deliver an event. Must not raise."""
        ...


Subscriber = Callable[[Event], None]


class EventBus:
    """Fan-out sink delivering each event to every subscriber.

    A failing subscriber is logged and skipped; it never interrupts the
    component that emitted the event.
    """

    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a subscriber and return a function that unregisters it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def emit(self, event: Event) -> None:
        logger.debug(f"Event {event.source.value}:{event.type.value} payload={event.payload!r}")
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception:
                logger.exception(f"Event subscriber failed for {event.type.value}")


class NullEventSink:
    """Sink that discards every event."""

    def emit(self, event: Event) -> None:
        pass


class RecordingEventSink:
    """Sink that keeps every event in memory, in emission order."""

    def __init__(self) -> None:
        self.events: list[Event] = []

    def emit(self, event: Event) -> None:
        self.events.append(event)

    def types(self, source: EventSource | None = None) -> list[EventType]:
        """Event types in order, optionally restricted to one source."""
        return [e.type for e in self.events if source is None or e.source == source]

    def of_type(self, event_type: EventType) -> list[Event]:
        return [e for e in self.events if e.type == event_type]

    def clear(self) -> None:
        self.events.clear()
