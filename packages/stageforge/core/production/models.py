"""Models for remote production containers and their source bindings."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SourceKind(str, Enum):
    """Kind of visual or media input attached to a container."""

    IMAGE = "image"
    WINDOW_CAPTURE = "window-capture"
    COLOR = "color"
    MEDIA = "media"


class BoundsMode(str, Enum):
    """How a binding is fitted into its bounding box."""

    NONE = "none"
    STRETCH = "stretch"
    SCALE_INNER = "scale-inner"
    SCALE_OUTER = "scale-outer"
    SCALE_TO_WIDTH = "scale-to-width"
    SCALE_TO_HEIGHT = "scale-to-height"
    MAX_ONLY = "max-only"


class Alignment(str, Enum):
    """Anchor point of a binding inside its bounds."""

    CENTER = "center"
    TOP_LEFT = "top-left"
    TOP = "top"
    TOP_RIGHT = "top-right"
    LEFT = "left"
    RIGHT = "right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM = "bottom"
    BOTTOM_RIGHT = "bottom-right"


class BindingTransform(BaseModel):
    """Placement of a source binding on the output canvas.

    Example:
        >>> transform = BindingTransform()
        >>> transform.width, transform.height
        (1920, 1080)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    bounds_mode: BoundsMode = Field(
        default=BoundsMode.SCALE_INNER, description="Bounds fitting policy"
    )
    width: int = Field(default=1920, gt=0, description="Bounds width in pixels")
    height: int = Field(default=1080, gt=0, description="Bounds height in pixels")
    alignment: Alignment = Field(default=Alignment.CENTER, description="Alignment inside bounds")


class SourceBinding(BaseModel):
    """A single source attached to a container, as reported by the service."""

    binding_id: int
    source_name: str
    kind: SourceKind
    settings: dict[str, Any] = Field(default_factory=dict)
    transform: BindingTransform | None = None
