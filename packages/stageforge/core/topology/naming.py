"""Deterministic container names.

Names depend only on the naming config, the program id and the act
position, so reloading a program always targets the same containers.
"""

from __future__ import annotations

from stageforge.core.config.models import NamingConfig


def act_container_name(naming: NamingConfig, program_id: str, act_index: int) -> str:
    """Container for act ``act_index`` (zero-based); the suffix is one-based.

    Example:
        >>> act_container_name(NamingConfig(), "keynote", 0)
        'SF_keynote_Act1'
    """
    return f"{naming.scene_prefix}{program_id}{naming.act_infix}{act_index + 1}"


def video_container_name(naming: NamingConfig, parent: str, sub_index: int = 0) -> str:
    """Nested video container under ``parent`` (``sub_index`` is zero-based).

    Example:
        >>> video_container_name(NamingConfig(), "SF_keynote_Act1")
        'SF_keynote_Act1_Video1'
    """
    return f"{parent}{naming.video_infix}{sub_index + 1}"


def live_container_name(naming: NamingConfig, program_id: str) -> str:
    """Window-capture container used by live-render playback.

    Example:
        >>> live_container_name(NamingConfig(), "keynote")
        'SF_keynote_Renderer'
    """
    return f"{naming.scene_prefix}{program_id}{naming.live_suffix}"
