"""Tests for LiveRenderController."""

from __future__ import annotations

import pytest

from stageforge.core.errors import (
    InvalidArgumentError,
    LaunchError,
    NotLoadedError,
    NotRunningError,
    SetupError,
)
from stageforge.core.events import EventSource, EventType, RecordingEventSink
from stageforge.core.modes import LiveRenderController, LiveRenderStatus
from stageforge.core.production import InMemoryProductionClient, SourceKind
from stageforge.core.programs import PlaybackMode, Program
from stageforge.core.topology import CaptureTopologyBuilder
from tests.conftest import make_program
from tests.fakes import FakeRenderer


@pytest.fixture
def renderer() -> FakeRenderer:
    return FakeRenderer()


@pytest.fixture
def controller(
    renderer: FakeRenderer,
    client: InMemoryProductionClient,
    builder: CaptureTopologyBuilder,
    events: RecordingEventSink,
) -> LiveRenderController:
    return LiveRenderController(renderer, client, builder, events)


def slide_positions(events: RecordingEventSink) -> list[int]:
    return [e.payload for e in events.of_type(EventType.SLIDE_CHANGED)]


class TestLoad:
    """Tests for program loading."""

    async def test_none_rejected(self, controller: LiveRenderController):
        with pytest.raises(InvalidArgumentError):
            await controller.load_program(None)

    async def test_load_without_session_skips_capture(
        self,
        controller: LiveRenderController,
        client: InMemoryProductionClient,
        events: RecordingEventSink,
        live_program: Program,
    ):
        await controller.load_program(live_program)

        assert controller.capture_container is None
        assert client.calls == []
        assert events.types() == [EventType.PROGRAM_LOADED]

    async def test_load_with_session_binds_window_capture(
        self,
        controller: LiveRenderController,
        connected_client: InMemoryProductionClient,
        events: RecordingEventSink,
        live_program: Program,
    ):
        events.clear()

        await controller.load_program(live_program)

        assert controller.capture_container == "SF_talk_Renderer"
        (binding,) = connected_client.bindings("SF_talk_Renderer")
        assert binding.kind == SourceKind.WINDOW_CAPTURE
        assert events.types(EventSource.LIVE_RENDER) == [
            EventType.PROGRAM_LOADED,
            EventType.CAPTURE_READY,
        ]
        assert events.of_type(EventType.CAPTURE_READY)[0].payload == "SF_talk_Renderer"

    async def test_capture_failure_aborts_load(
        self,
        controller: LiveRenderController,
        connected_client: InMemoryProductionClient,
        events: RecordingEventSink,
        live_program: Program,
    ):
        connected_client.inject_failure("bind_window_capture")

        with pytest.raises(SetupError):
            await controller.load_program(live_program)

        assert EventType.PROGRAM_LOADED not in events.types()

    async def test_failed_load_keeps_previous_program(
        self,
        controller: LiveRenderController,
        connected_client: InMemoryProductionClient,
        live_program: Program,
    ):
        await controller.load_program(live_program)
        connected_client.inject_failure("bind_window_capture")

        with pytest.raises(SetupError):
            await controller.load_program(make_program("other", mode=PlaybackMode.LIVE_RENDER))

        assert controller.program is live_program
        assert controller.capture_container == "SF_talk_Renderer"


class TestStart:
    """Tests for renderer launch."""

    async def test_start_requires_program(self, controller: LiveRenderController):
        with pytest.raises(NotLoadedError):
            await controller.start()

    async def test_start_launches_renderer(
        self,
        controller: LiveRenderController,
        renderer: FakeRenderer,
        events: RecordingEventSink,
        live_program: Program,
    ):
        await controller.load_program(live_program)

        await controller.start(display=1)

        assert renderer.launches == [("/decks/talk.pptx", 1)]
        assert events.types()[-1] == EventType.STARTED

    async def test_start_uses_renderer_display_by_default(
        self, controller: LiveRenderController, renderer: FakeRenderer, live_program: Program
    ):
        renderer.set_display(2)
        await controller.load_program(live_program)

        await controller.start()

        assert renderer.launches == [("/decks/talk.pptx", 2)]

    async def test_start_switches_to_capture(
        self,
        controller: LiveRenderController,
        connected_client: InMemoryProductionClient,
        live_program: Program,
    ):
        await controller.load_program(live_program)

        await controller.start()

        assert connected_client.active_container == "SF_talk_Renderer"

    async def test_switch_failure_is_swallowed(
        self,
        controller: LiveRenderController,
        connected_client: InMemoryProductionClient,
        events: RecordingEventSink,
        live_program: Program,
    ):
        await controller.load_program(live_program)
        connected_client.inject_failure("switch_active_container")

        await controller.start()

        assert connected_client.active_container is None
        assert EventType.STARTED in events.types()

    async def test_launch_failure_propagates(
        self, client: InMemoryProductionClient, builder: CaptureTopologyBuilder, live_program: Program
    ):
        sink = RecordingEventSink()
        controller = LiveRenderController(
            FakeRenderer(launch_error=LaunchError("boom")), client, builder, sink
        )
        await controller.load_program(live_program)

        with pytest.raises(LaunchError):
            await controller.start()
        assert EventType.STARTED not in sink.types()

    async def test_superseded_launch_emits_nothing(
        self,
        controller: LiveRenderController,
        renderer: FakeRenderer,
        connected_client: InMemoryProductionClient,
        events: RecordingEventSink,
        live_program: Program,
    ):
        await controller.load_program(live_program)
        renderer.stop_during_launch = True

        await controller.start()

        assert EventType.STARTED not in events.types()
        assert connected_client.active_container is None


class TestNavigation:
    """Tests for optimistic slide tracking."""

    @pytest.fixture
    async def started(
        self, controller: LiveRenderController, live_program: Program
    ) -> LiveRenderController:
        await controller.load_program(live_program)
        await controller.start()
        return controller

    async def test_next_is_unbounded(
        self, started: LiveRenderController, events: RecordingEventSink
    ):
        for _ in range(7):
            await started.next()

        assert started.current_slide == 7
        assert slide_positions(events) == [1, 2, 3, 4, 5, 6, 7]

    async def test_prev_at_zero_is_noop(
        self,
        started: LiveRenderController,
        renderer: FakeRenderer,
        events: RecordingEventSink,
    ):
        await started.prev()

        assert started.current_slide == 0
        assert "prev" not in renderer.calls
        assert slide_positions(events) == []

    async def test_prev_after_next(self, started: LiveRenderController, renderer: FakeRenderer):
        await started.next()
        await started.next()
        await started.prev()

        assert started.current_slide == 1
        assert renderer.calls == ["next", "next", "prev"]

    async def test_first_and_last(
        self, started: LiveRenderController, events: RecordingEventSink
    ):
        await started.last()
        await started.first()

        assert slide_positions(events) == [4, 0]

    async def test_jump_not_supported(self, started: LiveRenderController):
        with pytest.raises(InvalidArgumentError, match="not supported"):
            await started.jump(2)

    async def test_next_without_renderer_raises(
        self, controller: LiveRenderController, live_program: Program
    ):
        await controller.load_program(live_program)

        with pytest.raises(NotRunningError):
            await controller.next()
        assert controller.current_slide == 0

    async def test_blackout_keeps_position(self, started: LiveRenderController):
        await started.next()

        started.mark_blackout()

        assert started.current_slide == 1


class TestStop:
    """Tests for stopping playback."""

    async def test_stop_resets_position(
        self,
        controller: LiveRenderController,
        renderer: FakeRenderer,
        events: RecordingEventSink,
        live_program: Program,
    ):
        await controller.load_program(live_program)
        await controller.start()
        await controller.next()

        await controller.stop()

        assert controller.current_slide == 0
        assert renderer.calls[-1] == "stop"
        assert events.types()[-1] == EventType.STOPPED

    async def test_stop_is_idempotent(
        self, controller: LiveRenderController, renderer: FakeRenderer
    ):
        await controller.stop()
        await controller.stop()

        assert renderer.calls == ["stop", "stop"]


class TestStatus:
    """Tests for status snapshots."""

    async def test_unloaded(self, controller: LiveRenderController):
        assert controller.get_status() == LiveRenderStatus(
            program_loaded=False, running=False, current_slide=0, total_slides=0
        )

    async def test_status_is_pure(
        self,
        controller: LiveRenderController,
        connected_client: InMemoryProductionClient,
        events: RecordingEventSink,
        live_program: Program,
    ):
        await controller.load_program(live_program)
        await controller.start()
        calls_before = list(connected_client.calls)
        events_before = len(events.events)

        first = controller.get_status()
        second = controller.get_status()

        assert first == second
        assert first.running
        assert first.total_slides == 5
        assert connected_client.calls == calls_before
        assert len(events.events) == events_before
