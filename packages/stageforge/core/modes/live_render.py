"""Live-render mode: the external renderer plays the deck, a window capture frames it."""

from __future__ import annotations

import logging
from typing import Any

from stageforge.core.errors import InvalidArgumentError, NotLoadedError, StageForgeError
from stageforge.core.events import Event, EventSink, EventSource, EventType
from stageforge.core.modes.protocols import LiveRenderStatus
from stageforge.core.production.protocols import ProductionClient
from stageforge.core.programs.models import PlaybackMode, Program
from stageforge.core.renderer.protocols import Renderer
from stageforge.core.topology.builder import CaptureTopologyBuilder

logger = logging.getLogger(__name__)


class LiveRenderController:
    """Navigation over a live renderer process.

    Slide position is tracked optimistically: the renderer reports nothing
    back, so the controller counts the commands it delivered.
    """

    def __init__(
        self,
        renderer: Renderer,
        client: ProductionClient,
        builder: CaptureTopologyBuilder,
        events: EventSink,
    ):
        self.renderer = renderer
        self.client = client
        self.builder = builder
        self._events = events

        self.program: Program | None = None
        self.current_slide = 0
        self.capture_container: str | None = None

    @property
    def mode(self) -> PlaybackMode:
        return PlaybackMode.LIVE_RENDER

    async def load_program(self, program: Program | None) -> Program:
        if program is None:
            raise InvalidArgumentError("No program provided")

        capture_container: str | None = None
        if self.client.connected:
            capture_container = await self.builder.prepare_live_capture(program)

        self.program = program
        self.current_slide = 0
        self.capture_container = capture_container

        self._emit(EventType.PROGRAM_LOADED, program.id)
        if self.capture_container is not None:
            self._emit(EventType.CAPTURE_READY, self.capture_container)
        return program

    async def start(self, display: int | None = None) -> None:
        if self.program is None:
            raise NotLoadedError("No program loaded")

        target = display if display is not None else self.renderer.display_index
        await self.renderer.launch(self.program.file_path, display=target)
        if not self.renderer.is_running:
            logger.info(f"Renderer for {self.program.id} was stopped before startup completed")
            return

        if self.client.connected and self.capture_container is not None:
            try:
                await self.builder.switch_to(self.capture_container)
            except StageForgeError as e:
                logger.warning(f"Error switching to capture container {self.capture_container}: {e}")

        self._emit(EventType.STARTED, self.program.id)

    async def stop(self) -> None:
        await self.renderer.stop()
        self.current_slide = 0
        self._emit(EventType.STOPPED, None)

    async def next(self) -> None:
        # Upper bound is the renderer's concern; it ignores Right on the last slide.
        await self.renderer.next_slide()
        self.current_slide += 1
        self._emit(EventType.SLIDE_CHANGED, self.current_slide)

    async def prev(self) -> None:
        if self.current_slide <= 0:
            return
        await self.renderer.prev_slide()
        self.current_slide -= 1
        self._emit(EventType.SLIDE_CHANGED, self.current_slide)

    async def first(self) -> None:
        await self.renderer.first_slide()
        self.current_slide = 0
        self._emit(EventType.SLIDE_CHANGED, self.current_slide)

    async def last(self) -> None:
        await self.renderer.last_slide()
        if self.program is not None:
            self.current_slide = max(self.program.slide_count - 1, 0)
            self._emit(EventType.SLIDE_CHANGED, self.current_slide)

    async def jump(self, index: int) -> None:
        raise InvalidArgumentError("Jump to index is not supported in live-render mode")

    def mark_blackout(self) -> None:
        # The renderer keeps its slide underneath the blackout.
        pass

    def get_status(self) -> LiveRenderStatus:
        return LiveRenderStatus(
            program_loaded=self.program is not None,
            running=self.renderer.is_running,
            current_slide=self.current_slide,
            total_slides=self.program.slide_count if self.program else 0,
        )

    def _emit(self, event_type: EventType, payload: Any) -> None:
        self._events.emit(Event(type=event_type, source=EventSource.LIVE_RENDER, payload=payload))
