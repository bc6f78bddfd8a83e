"""StageForge session coordinator - the single outward command surface.

The coordinator owns:
- The mode controller registry (one controller per playback mode)
- The shared production client, renderer supervisor and topology builder
- The program store used to resolve program ids

Every public command returns a CommandResult and never raises; failures are
logged and reported as the error message only.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from stageforge.core.config.models import AppConfig
from stageforge.core.errors import NotConnectedError, NotLoadedError, StageForgeError
from stageforge.core.events import Event, EventBus, EventSink, EventSource, EventType
from stageforge.core.modes import LiveRenderController, ModeController, SceneGraphController
from stageforge.core.production import ProductionClient, create_production_client
from stageforge.core.programs import FileProgramStore, PlaybackMode, Program, ProgramStore
from stageforge.core.programs.models import ProgramSummary
from stageforge.core.renderer import Renderer, RendererSupervisor
from stageforge.core.topology import CaptureTopologyBuilder

logger = logging.getLogger(__name__)


class CommandResult(BaseModel):
    """Outcome envelope for a coordinator command."""

    success: bool
    error: str | None = None
    data: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def ok(cls, **data: Any) -> CommandResult:
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> CommandResult:
        return cls(success=False, error=error)

    def to_dict(self) -> dict[str, Any]:
        """Flatten to ``{success, ...data}`` or ``{success: False, error}``."""
        if not self.success:
            return {"success": False, "error": self.error}
        return {"success": True, **self.data}


class ProgramSessionCoordinator:
    """Routes operator commands to the controller matching the loaded program.

    Controllers are built once at construction. ``load_program`` selects one by
    the program's declared mode; every later command goes to that controller
    without re-checking the mode. Loading a different program abandons the
    previous controller's state without tearing down its remote resources.

    Example:
        coordinator = ProgramSessionCoordinator.from_config("config.json")
        await coordinator.connect()
        await coordinator.load_program("keynote")
        await coordinator.start()
        await coordinator.next()
    """

    def __init__(
        self,
        app_config: AppConfig,
        *,
        store: ProgramStore,
        client: ProductionClient,
        renderer: Renderer,
        events: EventSink,
        builder: CaptureTopologyBuilder | None = None,
    ):
        self.app_config = app_config
        self.store = store
        self.client = client
        self.renderer = renderer
        self.events = events
        self.builder = builder or CaptureTopologyBuilder(client, app_config)

        self.controllers: dict[PlaybackMode, ModeController] = {
            PlaybackMode.LIVE_RENDER: LiveRenderController(
                renderer, client, self.builder, events
            ),
            PlaybackMode.SCENE_GRAPH: SceneGraphController(client, self.builder, events),
        }
        self.controller: ModeController | None = None
        self.program: Program | None = None

        renderer.set_display(app_config.default_display)

    @classmethod
    def from_config(
        cls,
        app_config: AppConfig | Path | str | None = None,
        *,
        events: EventSink | None = None,
    ) -> ProgramSessionCoordinator:
        """Build a coordinator and its collaborators from application config.

        Args:
            app_config: AppConfig instance, path, or None (uses default path)
            events: Event sink shared by all components (new EventBus if None)

        Raises:
            TypeError: If app_config is the wrong type
            ValidationError: If the config file is invalid
        """
        if app_config is None:
            config = AppConfig.load_or_default()
        elif isinstance(app_config, (Path, str)):
            config = AppConfig.load_or_default(Path(app_config))
        elif isinstance(app_config, AppConfig):
            config = app_config
        else:
            raise TypeError(
                f"Expected AppConfig, Path, str, or None; got {type(app_config).__name__}"
            )

        sink = events or EventBus()
        return cls(
            config,
            store=FileProgramStore(config.data_dir),
            client=create_production_client(config, sink),
            renderer=RendererSupervisor(config.renderer, sink),
            events=sink,
        )

    # Program lifecycle

    async def load_program(self, program_id: str) -> CommandResult:
        async def run() -> CommandResult:
            program = await self.store.load_program(program_id)
            controller = self.controllers[program.mode]
            await controller.load_program(program)
            self.program = program
            self.controller = controller
            logger.info(f"Loaded program {program.id} in {program.mode.value} mode")
            return CommandResult.ok(
                program=ProgramSummary.from_program(program).model_dump(mode="json"),
                mode=program.mode.value,
            )

        return await self._execute("load_program", run)

    async def start(self, display: int | None = None) -> CommandResult:
        async def run() -> CommandResult:
            await self._require_controller().start(display)
            return CommandResult.ok()

        return await self._execute("start", run)

    async def stop(self) -> CommandResult:
        async def run() -> CommandResult:
            await self._require_controller().stop()
            return CommandResult.ok()

        return await self._execute("stop", run)

    # Navigation

    async def next(self) -> CommandResult:
        return await self._navigate("next", lambda c: c.next())

    async def prev(self) -> CommandResult:
        return await self._navigate("prev", lambda c: c.prev())

    async def first(self) -> CommandResult:
        return await self._navigate("first", lambda c: c.first())

    async def last(self) -> CommandResult:
        return await self._navigate("last", lambda c: c.last())

    async def jump(self, index: int) -> CommandResult:
        return await self._navigate("jump", lambda c: c.jump(index))

    async def blackout(self) -> CommandResult:
        """Cut program output to the blackout container."""

        async def run() -> CommandResult:
            if not self.client.connected:
                raise NotConnectedError("Not connected to OBS")
            await self.builder.ensure_blackout_container()
            await self.builder.activate_blackout()
            if self.controller is not None:
                self.controller.mark_blackout()
            self.events.emit(
                Event(
                    type=EventType.BLACKOUT,
                    source=EventSource.SESSION,
                    payload=self.builder.naming.blackout_container,
                )
            )
            return CommandResult.ok()

        return await self._execute("blackout", run)

    # Status and settings

    async def get_status(self) -> CommandResult:
        async def run() -> CommandResult:
            if self.controller is None:
                return CommandResult.ok(mode=None, program_loaded=False, connected=self.client.connected)
            status = self.controller.get_status().model_dump(mode="json")
            return CommandResult.ok(
                **status,
                program_id=self.program.id if self.program else None,
                connected=self.client.connected,
            )

        return await self._execute("get_status", run)

    async def set_display(self, index: int) -> CommandResult:
        async def run() -> CommandResult:
            self.renderer.set_display(index)
            return CommandResult.ok(display=index)

        return await self._execute("set_display", run)

    async def get_renderer_availability(self) -> CommandResult:
        async def run() -> CommandResult:
            return CommandResult.ok(available=await self.renderer.check_availability())

        return await self._execute("get_renderer_availability", run)

    async def list_programs(self) -> CommandResult:
        async def run() -> CommandResult:
            summaries = await self.store.list_programs()
            return CommandResult.ok(programs=[s.model_dump(mode="json") for s in summaries])

        return await self._execute("list_programs", run)

    # Production session

    async def connect(self, address: str | None = None, password: str | None = None) -> CommandResult:
        """Open the production session and make sure the blackout container exists."""

        async def run() -> CommandResult:
            target = address or self.app_config.production.address
            secret = password if password is not None else self.app_config.production.password
            await self.client.connect(target, secret)
            try:
                await self.builder.ensure_blackout_container()
            except StageForgeError as e:
                logger.warning(f"Could not create blackout container: {e}")
            return CommandResult.ok(address=target)

        return await self._execute("connect", run)

    async def disconnect(self) -> CommandResult:
        async def run() -> CommandResult:
            await self.client.disconnect()
            return CommandResult.ok()

        return await self._execute("disconnect", run)

    async def get_current_scene(self) -> CommandResult:
        async def run() -> CommandResult:
            if not self.client.connected:
                raise NotConnectedError("Not connected to OBS")
            return CommandResult.ok(scene=await self.client.query_active_container())

        return await self._execute("get_current_scene", run)

    # Internals

    def _require_controller(self) -> ModeController:
        if self.controller is None:
            raise NotLoadedError("No program loaded")
        return self.controller

    async def _navigate(
        self, name: str, action: Callable[[ModeController], Awaitable[Any]]
    ) -> CommandResult:
        async def run() -> CommandResult:
            await action(self._require_controller())
            return CommandResult.ok()

        return await self._execute(name, run)

    async def _execute(
        self, name: str, run: Callable[[], Awaitable[CommandResult]]
    ) -> CommandResult:
        try:
            return await run()
        except StageForgeError as e:
            logger.error(f"Error in {name}: {e.message}")
            return CommandResult.fail(e.message)
        except Exception as e:
            logger.exception(f"Unexpected error in {name}")
            return CommandResult.fail(str(e))
