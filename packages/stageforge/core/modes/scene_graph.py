"""Scene-graph mode: one pre-built production container per act."""

from __future__ import annotations

import logging
from typing import Any

from stageforge.core.errors import (
    IndexOutOfRangeError,
    InvalidArgumentError,
    NotConnectedError,
    NotLoadedError,
)
from stageforge.core.events import Event, EventSink, EventSource, EventType
from stageforge.core.modes.protocols import SceneGraphStatus
from stageforge.core.production.protocols import ProductionClient
from stageforge.core.programs.models import PlaybackMode, Program
from stageforge.core.topology.builder import CaptureTopologyBuilder
from stageforge.core.topology.models import SceneRecord

logger = logging.getLogger(__name__)


class SceneGraphController:
    """Navigation by switching the production tool's active container.

    ``current_scene`` is None until the first switch, and again after stop
    or blackout. Relative navigation clamps to ``[0, len(scenes) - 1]``.
    """

    def __init__(
        self,
        client: ProductionClient,
        builder: CaptureTopologyBuilder,
        events: EventSink,
    ):
        self.client = client
        self.builder = builder
        self._events = events

        self.program: Program | None = None
        self.scenes: list[SceneRecord] = []
        self.current_scene: int | None = None

    @property
    def mode(self) -> PlaybackMode:
        return PlaybackMode.SCENE_GRAPH

    async def load_program(self, program: Program | None) -> Program:
        if program is None:
            raise InvalidArgumentError("No program provided")

        # Commit only after synthesis succeeds
        scenes: list[SceneRecord] = []
        synthesized = self.client.connected
        if synthesized:
            scenes = await self.builder.build_program(program)
        else:
            logger.warning(f"Not connected to production; scenes for {program.id} not created")

        self.program = program
        self.scenes = scenes
        self.current_scene = None

        self._emit(EventType.PROGRAM_LOADED, program.id)
        if synthesized:
            self._emit(EventType.SCENES_CREATED, self.scenes)
        return program

    async def start(self, display: int | None = None) -> None:
        if not self.scenes:
            return
        await self.jump_to_scene(0)
        self._emit(EventType.STARTED, self.program.id if self.program else None)

    async def stop(self) -> None:
        self.current_scene = None
        self._emit(EventType.STOPPED, None)

    async def next(self) -> None:
        if not self.scenes:
            raise NotLoadedError("No scenes loaded")
        current = -1 if self.current_scene is None else self.current_scene
        await self.jump_to_scene(min(current + 1, len(self.scenes) - 1))

    async def prev(self) -> None:
        if not self.scenes:
            raise NotLoadedError("No scenes loaded")
        current = -1 if self.current_scene is None else self.current_scene
        await self.jump_to_scene(max(current - 1, 0))

    async def first(self) -> None:
        await self.jump_to_scene(0)

    async def last(self) -> None:
        if self.scenes:
            await self.jump_to_scene(len(self.scenes) - 1)

    async def jump(self, index: int) -> None:
        await self.jump_to_scene(index)

    async def jump_to_scene(self, index: int) -> SceneRecord:
        """Switch program output to the container for act ``index``.

        Raises:
            NotConnectedError: If the production client has no session
            IndexOutOfRangeError: If index is outside the built scenes
        """
        if not self.client.connected:
            raise NotConnectedError("Not connected to OBS")
        if index < 0 or index >= len(self.scenes):
            raise IndexOutOfRangeError(index, len(self.scenes))

        scene = self.scenes[index]
        await self.builder.switch_to(scene.name)
        self.current_scene = index
        self._emit(EventType.SCENE_CHANGED, {"index": index, "scene": scene})
        return scene

    def mark_blackout(self) -> None:
        self.current_scene = None

    def get_status(self) -> SceneGraphStatus:
        return SceneGraphStatus(
            program_loaded=self.program is not None,
            current_scene=self.current_scene,
            total_scenes=len(self.scenes),
            scenes=list(self.scenes),
        )

    def _emit(self, event_type: EventType, payload: Any) -> None:
        self._events.emit(Event(type=event_type, source=EventSource.SCENE_GRAPH, payload=payload))
