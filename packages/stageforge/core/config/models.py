"""Configuration models for StageForge."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from stageforge.core.production.models import BindingTransform


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    structured: bool = Field(default=False, description="Emit structured JSON log lines")
    filename: str | None = Field(default=None, description="Log file path (stdout when unset)")


class ProductionConfig(BaseModel):
    """Remote production service connection settings."""

    backend: Literal["obs", "memory"] = Field(
        default="obs",
        description="'obs' talks to OBS Studio over obs-websocket, 'memory' is an in-process stand-in",
    )
    address: str = Field(default="ws://127.0.0.1:4455", description="Service address")
    password: str = Field(
        default="", description="Service password (env: STAGEFORGE_PRODUCTION_PASSWORD)"
    )
    timeout_s: float = Field(default=3.0, gt=0.0, description="Request timeout (seconds)")


class NamingConfig(BaseModel):
    """Container naming scheme.

    Container names are derived deterministically from the program id so that
    reloading a program replaces its containers instead of duplicating them.
    """

    model_config = ConfigDict(frozen=True)

    scene_prefix: str = Field(default="SF_", min_length=1)
    act_infix: str = Field(default="_Act", min_length=1)
    live_suffix: str = Field(default="_Renderer", min_length=1)
    video_infix: str = Field(default="_Video", min_length=1)
    blackout_container: str = Field(default="StageForge_Blackout", min_length=1)


class CaptureConfig(BaseModel):
    """Source binding defaults used when synthesizing containers."""

    image_transform: BindingTransform = Field(default_factory=BindingTransform)
    blackout_color: int = Field(
        default=0xFF000000, ge=0, le=0xFFFFFFFF, description="Blackout color (ABGR)"
    )
    blackout_source_name: str = "Black_Background"
    capture_cursor: bool = Field(default=False, description="Show cursor in window capture")


def _default_key_map() -> dict[str, str]:
    return {
        "next": "Right",
        "prev": "Left",
        "first": "Home",
        "last": "End",
        "exit": "Escape",
        "fullscreen": "F5",
    }


def _default_launch_args() -> list[str]:
    return ["--impress", "--show", "--norestore", "--nologo", "--nofirststartwizard"]


class RendererConfig(BaseModel):
    """External slide renderer (LibreOffice Impress) settings."""

    executable: Path | None = Field(
        default=None, description="Explicit renderer executable (skips platform lookup)"
    )
    bundled_root: Path = Field(
        default=Path("libreoffice"), description="Root of the bundled/portable renderer"
    )
    launch_args: list[str] = Field(default_factory=_default_launch_args)
    key_map: dict[str, str] = Field(default_factory=_default_key_map)

    startup_delay_s: float = Field(default=2.0, ge=0.0, description="Startup grace delay")
    graceful_shutdown_s: float = Field(
        default=1.0, ge=0.0, description="Wait after the exit key before terminating"
    )
    force_kill_s: float = Field(
        default=3.0, ge=0.0, description="Wait after terminate before killing"
    )


class AppConfig(BaseModel):
    """Application-level configuration."""

    model_config = ConfigDict(extra="ignore")

    data_dir: str = "data"
    default_display: int = Field(default=0, ge=0)
    logging: LoggingConfig = LoggingConfig()
    production: ProductionConfig = ProductionConfig()
    naming: NamingConfig = NamingConfig()
    capture: CaptureConfig = CaptureConfig()
    renderer: RendererConfig = RendererConfig()

    @classmethod
    def load_or_default(cls, path: Path | str | None = None) -> AppConfig:
        """Load from ``path`` (default ``config.json``), falling back to defaults."""
        from stageforge.core.config.loader import load_app_config

        return load_app_config(path)
