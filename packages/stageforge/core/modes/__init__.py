"""Playback mode controllers behind one navigation contract."""

from stageforge.core.modes.live_render import LiveRenderController
from stageforge.core.modes.protocols import (
    LiveRenderStatus,
    ModeController,
    ModeStatus,
    SceneGraphStatus,
)
from stageforge.core.modes.scene_graph import SceneGraphController

__all__ = [
    # Protocol
    "ModeController",
    "ModeStatus",
    # Live-render
    "LiveRenderController",
    "LiveRenderStatus",
    # Scene-graph
    "SceneGraphController",
    "SceneGraphStatus",
]
