"""Capture topology synthesis: programs in, production containers out."""

from stageforge.core.topology.builder import CaptureTopologyBuilder
from stageforge.core.topology.models import SceneRecord
from stageforge.core.topology.naming import (
    act_container_name,
    live_container_name,
    video_container_name,
)

__all__ = [
    "CaptureTopologyBuilder",
    "SceneRecord",
    "act_container_name",
    "live_container_name",
    "video_container_name",
]
