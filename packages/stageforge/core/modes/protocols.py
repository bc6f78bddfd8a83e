"""Navigation contract shared by both playback modes."""

from __future__ import annotations

from typing import Literal, Protocol

from pydantic import BaseModel, ConfigDict

from stageforge.core.programs.models import PlaybackMode, Program
from stageforge.core.topology.models import SceneRecord


class LiveRenderStatus(BaseModel):
    model_config = ConfigDict(frozen=True)

    mode: Literal["live-render"] = "live-render"
    program_loaded: bool
    running: bool
    current_slide: int
    total_slides: int


class SceneGraphStatus(BaseModel):
    model_config = ConfigDict(frozen=True)

    mode: Literal["scene-graph"] = "scene-graph"
    program_loaded: bool
    current_scene: int | None
    total_scenes: int
    scenes: list[SceneRecord]


ModeStatus = LiveRenderStatus | SceneGraphStatus


class ModeController(Protocol):
    """
    Playback backend behind the session coordinator.

    State machine (both variants): Unloaded -> Loaded -> Positioned, with
    next/prev/jump re-entering Positioned and stop resetting only the
    position. Controllers are reusable across load/stop cycles.

    Callers must await each command before issuing the next one; controllers
    do not serialize overlapping calls.
    """

    @property
    def mode(self) -> PlaybackMode: ...

    async def load_program(self, program: Program | None) -> Program:
        """Reset state and prepare the backend for ``program``.

        Raises:
            InvalidArgumentError: If program is None
            SetupError: If backend synthesis fails
        """
        ...

    async def start(self, display: int | None = None) -> None: ...

    async def stop(self) -> None: ...

    async def next(self) -> None: ...

    async def prev(self) -> None: ...

    async def first(self) -> None: ...

    async def last(self) -> None: ...

    async def jump(self, index: int) -> None: ...

    def mark_blackout(self) -> None:
        """Record that program output was cut to the blackout container."""
        ...

    def get_status(self) -> ModeStatus:
        """Snapshot of session state. Never performs I/O."""
        ...
