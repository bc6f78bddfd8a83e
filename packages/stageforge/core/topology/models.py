"""Records describing synthesized containers."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class SceneRecord(BaseModel):
    """One act's container as created on the production service."""

    model_config = ConfigDict(frozen=True)

    name: str
    act_index: int
    act_name: str
    video_container: str | None = None
    has_video: bool = False
