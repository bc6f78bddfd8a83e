"""External renderer process supervision and key injection."""

from stageforge.core.renderer.keys import (
    AppleScriptKeyInjector,
    KeyInjector,
    RecordingKeyInjector,
    SendKeysKeyInjector,
    XdotoolKeyInjector,
    default_key_injector,
)
from stageforge.core.renderer.protocols import Renderer
from stageforge.core.renderer.supervisor import RendererStatus, RendererSupervisor

__all__ = [
    # Supervisor
    "Renderer",
    "RendererStatus",
    "RendererSupervisor",
    # Key injection
    "KeyInjector",
    "AppleScriptKeyInjector",
    "RecordingKeyInjector",
    "SendKeysKeyInjector",
    "XdotoolKeyInjector",
    "default_key_injector",
]
