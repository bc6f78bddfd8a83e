"""Capture topology builder.

Turns a program's ordered acts into production containers, one per act, with
deterministic names and replace-on-create semantics. Also owns the two fixed
containers outside the per-act set: the live-render window capture and the
session-wide blackout.
"""

from __future__ import annotations

import logging

from stageforge.core.config.models import AppConfig, NamingConfig
from stageforge.core.errors import ContainerNotFoundError, SetupError, StageForgeError
from stageforge.core.production.protocols import ProductionClient
from stageforge.core.programs.models import Act, Program
from stageforge.core.topology.models import SceneRecord
from stageforge.core.topology.naming import (
    act_container_name,
    live_container_name,
    video_container_name,
)

logger = logging.getLogger(__name__)


class CaptureTopologyBuilder:
    """Synthesizes production containers from programs.

    Every per-program container is created with replace semantics: any
    container already holding the name is removed first, so re-importing a
    program never leaves stale bindings behind. Failures are not retried and
    already-created containers are not rolled back.

    Example:
        builder = CaptureTopologyBuilder(client, app_config)
        records = await builder.build_program(program)
        await builder.switch_to(records[0].name)
    """

    def __init__(self, client: ProductionClient, config: AppConfig):
        self.client = client
        self.config = config

    @property
    def naming(self) -> NamingConfig:
        return self.config.naming

    async def replace_create(self, name: str) -> str:
        """Remove any container called ``name``, then create it empty."""
        try:
            await self.client.remove_container(name)
            logger.debug(f"Removed existing container {name}")
        except ContainerNotFoundError:
            pass  # first creation
        await self.client.create_container(name)
        return name

    async def build_program(self, program: Program) -> list[SceneRecord]:
        """Create one container per act, in act order.

        Raises:
            SetupError: On the first failing act; earlier containers remain
        """
        records: list[SceneRecord] = []
        for act in program.acts:
            try:
                records.append(await self.build_act_container(program, act))
            except StageForgeError as e:
                logger.error(f"Error creating container for act {act.index} of {program.id}: {e}")
                raise SetupError(
                    f"Failed to create scene for act {act.index + 1} of {program.name}: {e.message}"
                ) from e

        logger.info(f"Created {len(records)} containers for program {program.id}")
        return records

    async def build_act_container(self, program: Program, act: Act) -> SceneRecord:
        """Create the container (and nested video container) for one act."""
        name = await self.replace_create(act_container_name(self.naming, program.id, act.index))

        if act.image_path:
            await self.client.bind_image_source(name, act.image_path)
            await self._fit_binding(name)

        video_container = None
        if act.declares_video:
            video_container = await self._build_video_container(name, act.video_path or "")

        return SceneRecord(
            name=name,
            act_index=act.index,
            act_name=act.name,
            video_container=video_container,
            has_video=video_container is not None,
        )

    async def prepare_live_capture(self, program: Program) -> str:
        """Create the window-capture container for live-render playback.

        Raises:
            SetupError: If the container or capture binding cannot be created
        """
        name = live_container_name(self.naming, program.id)
        try:
            await self.replace_create(name)
            await self.client.bind_window_capture(
                name, capture_cursor=self.config.capture.capture_cursor
            )
        except StageForgeError as e:
            logger.error(f"Error setting up capture container {name}: {e}")
            raise SetupError(f"Failed to set up capture for {program.name}: {e.message}") from e
        return name

    async def container_exists(self, name: str) -> bool:
        try:
            await self.client.list_source_bindings(name)
        except ContainerNotFoundError:
            return False
        return True

    async def ensure_blackout_container(self) -> bool:
        """Create the blackout container if it does not exist yet.

        Unlike program containers this is create-if-absent, so reconnecting
        never disturbs an existing blackout.

        Returns:
            True if the container was created by this call
        """
        name = self.naming.blackout_container
        if await self.container_exists(name):
            return False

        transform = self.config.capture.image_transform
        await self.client.create_container(name)
        await self.client.bind_color_source(
            name,
            self.config.capture.blackout_color,
            source_name=self.config.capture.blackout_source_name,
            width=transform.width,
            height=transform.height,
        )
        logger.info(f"Created blackout container {name}")
        return True

    async def activate_blackout(self) -> None:
        await self.switch_to(self.naming.blackout_container)

    async def switch_to(self, name: str) -> None:
        await self.client.switch_active_container(name)

    async def _build_video_container(self, parent: str, video_path: str) -> str:
        # Parent keeps the still as its poster frame; video plays only when
        # this container is switched in.
        name = await self.replace_create(video_container_name(self.naming, parent))
        source_name = f"{name}_Video"
        await self.client.bind_media_source(name, video_path, source_name=source_name)
        await self._fit_binding(name, source_name=source_name)
        return name

    async def _fit_binding(self, container: str, source_name: str | None = None) -> None:
        """Apply the configured transform to the first (or named) binding."""
        bindings = await self.client.list_source_bindings(container)
        if source_name is not None:
            bindings = [b for b in bindings if b.source_name == source_name]
        if not bindings:
            return
        await self.client.set_binding_transform(
            container, bindings[0].binding_id, self.config.capture.image_transform
        )
