"""Program and Act models.

Programs are produced by the import pipeline and persisted as camelCase JSON
metadata. The core only ever reads them.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class PlaybackMode(str, Enum):
    """Playback backend declared by a program."""

    LIVE_RENDER = "live-render"
    SCENE_GRAPH = "scene-graph"


# Mode names written by earlier import pipelines
_LEGACY_MODES = {
    "renderer": PlaybackMode.LIVE_RENDER,
    "scene": PlaybackMode.SCENE_GRAPH,
}


class Act(BaseModel):
    """One addressable unit of presented content (one slide)."""

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    index: int = Field(..., ge=0)
    name: str
    image_path: str | None = None
    video_path: str | None = None
    has_video: bool | None = None
    notes: str | None = None

    @property
    def declares_video(self) -> bool:
        """True when the act carries a video asset."""
        return bool(self.video_path)


class Program(BaseModel):
    """The unit of schedulable content.

    Immutable after creation; ``slide_count`` equals ``len(acts)`` when acts
    are populated, otherwise it is the importer's estimate.

    Example:
        >>> program = Program.model_validate(
        ...     {"id": "deck", "name": "deck", "filePath": "/decks/deck.pptx",
        ...      "mode": "scene", "slideCount": 0, "acts": []}
        ... )
        >>> program.mode
        <PlaybackMode.SCENE_GRAPH: 'scene-graph'>
    """

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    id: str = Field(..., min_length=1, pattern=r"^[A-Za-z0-9_-]+$")
    name: str
    file_path: str
    mode: PlaybackMode = PlaybackMode.LIVE_RENDER
    slide_count: int = Field(default=0, ge=0)
    acts: list[Act] = Field(default_factory=list)
    created_at: datetime | None = None

    @field_validator("mode", mode="before")
    @classmethod
    def _normalize_legacy_mode(cls, v: Any) -> Any:
        if isinstance(v, str) and v in _LEGACY_MODES:
            return _LEGACY_MODES[v]
        return v

    @model_validator(mode="after")
    def _validate_acts(self) -> Program:
        for position, act in enumerate(self.acts):
            if act.index != position:
                raise ValueError(f"Act at position {position} has index {act.index}")
        if self.acts and self.slide_count != len(self.acts):
            raise ValueError(
                f"slide_count ({self.slide_count}) must equal the number of acts ({len(self.acts)})"
            )
        return self


class ProgramSummary(BaseModel):
    """Listing entry for a stored program."""

    id: str
    name: str
    mode: PlaybackMode
    slide_count: int
    act_count: int
    created_at: datetime | None = None

    @classmethod
    def from_program(cls, program: Program) -> ProgramSummary:
        return cls(
            id=program.id,
            name=program.name,
            mode=program.mode,
            slide_count=program.slide_count,
            act_count=len(program.acts) or program.slide_count,
            created_at=program.created_at,
        )
