"""Supervisor for the external slide renderer process (LibreOffice Impress).

Owns at most one renderer process at a time. The renderer offers no ready
signal, so a launch succeeds when the process is still alive after a fixed
startup grace delay. Shutdown escalates from the renderer's own exit key to
SIGTERM to SIGKILL.
"""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path
import sys
from typing import Any

import aiofiles.os  # type: ignore[import-untyped]
from pydantic import BaseModel

from stageforge.core.config.models import RendererConfig
from stageforge.core.errors import (
    InvalidArgumentError,
    LaunchError,
    NotRunningError,
    UnavailableError,
)
from stageforge.core.events import Event, EventSink, EventSource, EventType, NullEventSink
from stageforge.core.renderer.keys import KeyInjector, default_key_injector
from stageforge.core.renderer.platform import candidate_paths
from stageforge.core.utils.logging import get_process_logger

logger = logging.getLogger(__name__)


class RendererStatus(BaseModel):
    running: bool
    current_file: str | None
    display: int
    executable: str | None


class RendererSupervisor:
    """Lifecycle manager for the external renderer.

    Events emitted (source ``renderer``): ``started`` after a successful
    launch, ``key-sent`` per delivered command, ``stopped`` with the exit code
    whenever the process exits, which may happen long after launch returned.

    Example:
        supervisor = RendererSupervisor(app_config.renderer, events)
        await supervisor.launch("/decks/keynote.pptx", display=1)
        await supervisor.next_slide()
        await supervisor.stop()
    """

    def __init__(
        self,
        config: RendererConfig,
        events: EventSink | None = None,
        key_injector: KeyInjector | None = None,
        *,
        platform: str = sys.platform,
    ):
        self.config = config
        self.platform = platform
        self.display_index = 0
        self._events: EventSink = events or NullEventSink()
        self._keys: KeyInjector = key_injector or default_key_injector(platform)

        candidates = candidate_paths(config, platform)
        self.executable: Path | None = candidates[0] if candidates else None

        self._process: asyncio.subprocess.Process | None = None
        self._running = False
        self._stop_requested = False
        self._current_file: str | None = None
        self._tasks: set[asyncio.Task[Any]] = set()
        self._kill_timers: dict[asyncio.subprocess.Process, asyncio.TimerHandle] = {}

    @property
    def is_running(self) -> bool:
        proc = self._process
        return self._running and proc is not None and proc.returncode is None

    @property
    def process(self) -> asyncio.subprocess.Process | None:
        """The tracked process, including one still inside its startup delay."""
        return self._process

    def set_display(self, display_index: int) -> None:
        if display_index < 0:
            raise InvalidArgumentError(f"Display index must be >= 0, got {display_index}")
        self.display_index = display_index

    def get_status(self) -> RendererStatus:
        return RendererStatus(
            running=self.is_running,
            current_file=self._current_file,
            display=self.display_index,
            executable=str(self.executable) if self.executable else None,
        )

    async def check_availability(self) -> bool:
        """Probe executable candidates and remember the first that exists.

        Never raises.
        """
        for candidate in candidate_paths(self.config, self.platform):
            try:
                exists = await aiofiles.os.path.isfile(candidate)
            except OSError as e:
                logger.debug(f"Could not probe renderer at {candidate}: {e}")
                continue
            if exists:
                self.executable = candidate
                return True
        return False

    async def launch(self, asset_path: str, display: int | None = None) -> None:
        """Start the renderer in full-screen slideshow mode on ``asset_path``.

        Raises:
            UnavailableError: If no renderer executable is installed
            LaunchError: If the process cannot be spawned or dies during startup
        """
        if self._process is not None:
            await self.stop()

        if not await self.check_availability():
            raise UnavailableError(
                "LibreOffice not found. Please install LibreOffice or use the bundled version."
            )

        if display is not None:
            self.set_display(display)

        env = None
        if self.platform.startswith("linux") and self.display_index > 0:
            env = {**os.environ, "DISPLAY": f":0.{self.display_index}"}

        args = [*self.config.launch_args, asset_path]
        try:
            proc = await asyncio.create_subprocess_exec(
                str(self.executable),
                *args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=env,
            )
        except OSError as e:
            self._running = False
            raise LaunchError(f"Failed to launch renderer {self.executable}: {e}") from e

        logger.info(f"Launched renderer pid={proc.pid} for {asset_path} (display {self.display_index})")
        self._process = proc
        self._stop_requested = False
        self._current_file = asset_path
        self._spawn(self._pump(proc.stdout, logging.INFO, proc.pid))
        self._spawn(self._pump(proc.stderr, logging.WARNING, proc.pid))
        self._spawn(self._watch(proc))

        await asyncio.sleep(self.config.startup_delay_s)

        if self._stop_requested:
            logger.info(f"Renderer pid={proc.pid} was stopped before startup completed")
            return
        if proc.returncode is not None:
            raise LaunchError(f"Renderer exited during startup with code {proc.returncode}")
        if self._process is not proc:
            return

        self._running = True
        self._emit(EventType.STARTED, {"file": asset_path, "pid": proc.pid})

    async def send_command(self, command: str) -> None:
        """Translate a logical command to a key press and deliver it.

        Raises:
            NotRunningError: If no live renderer process exists
            InvalidArgumentError: If the command has no key mapping
            KeyInjectionError: If the platform failed to deliver the key
        """
        if not self.is_running:
            raise NotRunningError("LibreOffice is not running")

        key = self.config.key_map.get(command)
        if key is None:
            raise InvalidArgumentError(f"Unknown renderer command: {command}")

        await self._keys.send_key(key)
        logger.debug(f"Sent {key} for {command}")
        self._emit(EventType.KEY_SENT, {"command": command, "key": key})

    async def next_slide(self) -> None:
        await self.send_command("next")

    async def prev_slide(self) -> None:
        await self.send_command("prev")

    async def first_slide(self) -> None:
        await self.send_command("first")

    async def last_slide(self) -> None:
        await self.send_command("last")

    async def stop(self) -> None:
        """Shut the renderer down. Never raises.

        Sends the exit key to a started renderer, waits the graceful window,
        then SIGTERM with a SIGKILL scheduled after the force window. Any
        failure along the way escalates straight to SIGKILL.
        """
        proc = self._process
        if proc is None:
            return

        self._stop_requested = True
        try:
            # A process still inside its startup delay has no slideshow to exit
            if self.is_running:
                await self.send_command("exit")
                await asyncio.sleep(self.config.graceful_shutdown_s)
            if proc.returncode is None:
                proc.terminate()
                self._schedule_kill(proc)
        except Exception as e:
            logger.warning(f"Graceful renderer shutdown failed, killing pid={proc.pid}: {e}")
            self._kill(proc)
        finally:
            if self._process is proc:
                self._process = None
            self._running = False
            self._current_file = None

    # Internals

    def _spawn(self, coro: Any) -> None:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _schedule_kill(self, proc: asyncio.subprocess.Process) -> None:
        # One timer per process; an earlier process keeps its pending kill
        self._cancel_kill_timer(proc)
        loop = asyncio.get_running_loop()
        self._kill_timers[proc] = loop.call_later(self.config.force_kill_s, self._kill, proc)

    def _cancel_kill_timer(self, proc: asyncio.subprocess.Process) -> None:
        handle = self._kill_timers.pop(proc, None)
        if handle is not None:
            handle.cancel()

    @staticmethod
    def _kill(proc: asyncio.subprocess.Process) -> None:
        if proc.returncode is not None:
            return
        try:
            proc.kill()
        except ProcessLookupError:
            pass  # exited between the check and the signal
        else:
            logger.warning(f"Force-killed renderer pid={proc.pid}")

    async def _watch(self, proc: asyncio.subprocess.Process) -> None:
        code = await proc.wait()
        self._cancel_kill_timer(proc)
        if self._process is proc:
            self._process = None
            self._running = False
            self._current_file = None
        logger.info(f"Renderer pid={proc.pid} exited with code {code}")
        self._emit(EventType.STOPPED, {"exit_code": code, "pid": proc.pid})

    @staticmethod
    async def _pump(stream: asyncio.StreamReader | None, level: int, pid: int) -> None:
        if stream is None:
            return
        process_logger = get_process_logger(pid)
        while line := await stream.readline():
            process_logger.log(level, f"LibreOffice: {line.decode(errors='replace').rstrip()}")

    def _emit(self, event_type: EventType, payload: Any) -> None:
        self._events.emit(Event(type=event_type, source=EventSource.RENDERER, payload=payload))
