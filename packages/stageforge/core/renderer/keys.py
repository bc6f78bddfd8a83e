"""Platform key injection for the external renderer.

The renderer exposes no control channel during a slideshow, so navigation is
delivered as synthetic key presses to the focused presentation window.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Protocol

from stageforge.core.errors import KeyInjectionError

logger = logging.getLogger(__name__)


class KeyInjector(Protocol):
    """Delivers one named key (e.g. "Right", "Escape") to the focused window."""

    async def send_key(self, key: str) -> None:
        """Send a key press.

        Raises:
            KeyInjectionError: If the platform mechanism fails
        """
        ...


async def _run_tool(*argv: str, timeout_s: float = 5.0) -> None:
    try:
        proc = await asyncio.create_subprocess_exec(
            *argv,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as e:
        raise KeyInjectionError(f"{argv[0]} not found; install it to control the renderer") from e
    except OSError as e:
        raise KeyInjectionError(f"Could not run {argv[0]}: {e}") from e

    try:
        _, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout_s)
    except TimeoutError as e:
        proc.kill()
        await proc.wait()
        raise KeyInjectionError(f"{argv[0]} timed out after {timeout_s}s") from e

    if proc.returncode != 0:
        detail = stderr.decode(errors="replace").strip()
        raise KeyInjectionError(f"{argv[0]} failed with exit code {proc.returncode}: {detail}")


class XdotoolKeyInjector:
    """X11 key injection via ``xdotool key``."""

    async def send_key(self, key: str) -> None:
        await _run_tool("xdotool", "key", key)


# macOS virtual key codes
_MAC_KEY_CODES = {
    "Right": 124,
    "Left": 123,
    "Home": 115,
    "End": 119,
    "Escape": 53,
    "F5": 96,
}


class AppleScriptKeyInjector:
    """macOS key injection via System Events."""

    async def send_key(self, key: str) -> None:
        code = _MAC_KEY_CODES.get(key)
        if code is None:
            raise KeyInjectionError(f"No macOS key code for {key}")
        await _run_tool("osascript", "-e", f'tell application "System Events" to key code {code}')


_SENDKEYS_CODES = {
    "Right": "{RIGHT}",
    "Left": "{LEFT}",
    "Home": "{HOME}",
    "End": "{END}",
    "Escape": "{ESC}",
    "F5": "{F5}",
}


class SendKeysKeyInjector:
    """Windows key injection via WScript.Shell SendKeys."""

    async def send_key(self, key: str) -> None:
        code = _SENDKEYS_CODES.get(key)
        if code is None:
            raise KeyInjectionError(f"No SendKeys code for {key}")
        script = f"(New-Object -ComObject WScript.Shell).SendKeys('{code}')"
        await _run_tool("powershell", "-NoProfile", "-Command", script)


class RecordingKeyInjector:
    """Injector that only records keys; for dry runs and tests."""

    def __init__(self, fail_with: Exception | None = None) -> None:
        self.keys: list[str] = []
        self.fail_with = fail_with

    async def send_key(self, key: str) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.keys.append(key)


def default_key_injector(platform: str = sys.platform) -> KeyInjector:
    """Key injector for the running platform."""
    if platform == "win32":
        return SendKeysKeyInjector()
    if platform == "darwin":
        return AppleScriptKeyInjector()
    return XdotoolKeyInjector()
