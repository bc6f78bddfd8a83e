"""Renderer executable lookup.

Lookup order: explicit config override, bundled/portable install under the
configured root, then the well-known system install path.
"""

from __future__ import annotations

from pathlib import Path
import sys

from stageforge.core.config.models import RendererConfig

# Relative to RendererConfig.bundled_root
_BUNDLED_PATHS = {
    "win32": Path("program/soffice.exe"),
    "darwin": Path("MacOS/soffice"),
    "linux": Path("program/soffice"),
}

_SYSTEM_PATHS = {
    "win32": Path("C:/Program Files/LibreOffice/program/soffice.exe"),
    "darwin": Path("/Applications/LibreOffice.app/Contents/MacOS/soffice"),
    "linux": Path("/usr/bin/soffice"),
}


def _platform_key(platform: str) -> str:
    return "linux" if platform.startswith("linux") else platform


def bundled_path(config: RendererConfig, platform: str = sys.platform) -> Path | None:
    relative = _BUNDLED_PATHS.get(_platform_key(platform))
    return config.bundled_root / relative if relative is not None else None


def system_path(platform: str = sys.platform) -> Path | None:
    return _SYSTEM_PATHS.get(_platform_key(platform))


def candidate_paths(config: RendererConfig, platform: str = sys.platform) -> list[Path]:
    """Executable candidates in lookup order."""
    candidates = [config.executable, bundled_path(config, platform), system_path(platform)]
    return [c for c in candidates if c is not None]
