"""Tests for the event sink implementations."""

from __future__ import annotations

import logging

from pydantic import ValidationError
import pytest

from stageforge.core.events import (
    Event,
    EventBus,
    EventSource,
    EventType,
    NullEventSink,
    RecordingEventSink,
)


def make_event(event_type: EventType = EventType.STARTED, payload: object = None) -> Event:
    return Event(type=event_type, source=EventSource.SESSION, payload=payload)


class TestEventBus:
    """Tests for fan-out delivery."""

    def test_delivers_to_all_subscribers(self):
        bus = EventBus()
        first: list[Event] = []
        second: list[Event] = []
        bus.subscribe(first.append)
        bus.subscribe(second.append)

        event = make_event()
        bus.emit(event)

        assert first == [event]
        assert second == [event]

    def test_unsubscribe(self):
        bus = EventBus()
        received: list[Event] = []
        unsubscribe = bus.subscribe(received.append)

        unsubscribe()
        unsubscribe()
        bus.emit(make_event())

        assert received == []

    def test_failing_subscriber_is_isolated(self, caplog: pytest.LogCaptureFixture):
        bus = EventBus()
        received: list[Event] = []

        def broken(event: Event) -> None:
            raise RuntimeError("ui gone")

        bus.subscribe(broken)
        bus.subscribe(received.append)

        with caplog.at_level(logging.ERROR, logger="stageforge.core.events"):
            bus.emit(make_event(EventType.BLACKOUT))

        assert len(received) == 1
        assert "Event subscriber failed for blackout" in caplog.text


class TestRecordingEventSink:
    """Tests for the recording sink."""

    def test_filters(self):
        sink = RecordingEventSink()
        sink.emit(make_event(EventType.CONNECTED))
        sink.emit(Event(type=EventType.SCENE_CHANGED, source=EventSource.SCENE_GRAPH, payload=1))

        assert sink.types() == [EventType.CONNECTED, EventType.SCENE_CHANGED]
        assert sink.types(EventSource.SCENE_GRAPH) == [EventType.SCENE_CHANGED]
        assert [e.payload for e in sink.of_type(EventType.SCENE_CHANGED)] == [1]

        sink.clear()
        assert sink.events == []


def test_null_sink_discards():
    NullEventSink().emit(make_event())


def test_event_is_frozen():
    event = make_event()

    with pytest.raises(ValidationError):
        event.payload = "changed"  # type: ignore[misc]
    assert event.timestamp.tzinfo is not None
