"""OBS Studio production client over obs-websocket v5.

obsws-python is synchronous; every request runs in a worker thread so the
event loop never blocks on the socket. Events arrive on the library's own
thread and are handed back to the loop before reaching the sink.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Any
from urllib.parse import urlparse

import obsws_python as obs
from obsws_python.error import OBSSDKError, OBSSDKRequestError
from websocket import WebSocketException

from stageforge.core.errors import (
    ContainerExistsError,
    ContainerNotFoundError,
    NotConnectedError,
    ProductionConnectionError,
    ProductionRequestError,
)
from stageforge.core.events import Event, EventSink, EventSource, EventType, NullEventSink

from .models import Alignment, BindingTransform, BoundsMode, SourceBinding, SourceKind

logger = logging.getLogger(__name__)

# obs-websocket RequestStatus codes
_RESOURCE_NOT_FOUND = 600
_RESOURCE_ALREADY_EXISTS = 601

_BOUNDS_TYPES = {
    BoundsMode.NONE: "OBS_BOUNDS_NONE",
    BoundsMode.STRETCH: "OBS_BOUNDS_STRETCH",
    BoundsMode.SCALE_INNER: "OBS_BOUNDS_SCALE_INNER",
    BoundsMode.SCALE_OUTER: "OBS_BOUNDS_SCALE_OUTER",
    BoundsMode.SCALE_TO_WIDTH: "OBS_BOUNDS_SCALE_TO_WIDTH",
    BoundsMode.SCALE_TO_HEIGHT: "OBS_BOUNDS_SCALE_TO_HEIGHT",
    BoundsMode.MAX_ONLY: "OBS_BOUNDS_MAX_ONLY",
}

# libobs alignment bit flags: LEFT=1, RIGHT=2, TOP=4, BOTTOM=8, center=0
_ALIGNMENTS = {
    Alignment.CENTER: 0,
    Alignment.LEFT: 1,
    Alignment.RIGHT: 2,
    Alignment.TOP: 4,
    Alignment.TOP_LEFT: 5,
    Alignment.TOP_RIGHT: 6,
    Alignment.BOTTOM: 8,
    Alignment.BOTTOM_LEFT: 9,
    Alignment.BOTTOM_RIGHT: 10,
}

_INPUT_KINDS = {
    "image_source": SourceKind.IMAGE,
    "color_source_v3": SourceKind.COLOR,
    "ffmpeg_source": SourceKind.MEDIA,
    "window_capture": SourceKind.WINDOW_CAPTURE,
    "xcomposite_input": SourceKind.WINDOW_CAPTURE,
    "screen_capture": SourceKind.WINDOW_CAPTURE,
}

_WINDOW_CAPTURE_KINDS = {
    "win32": "window_capture",
    "darwin": "screen_capture",
    "linux": "xcomposite_input",
}


def window_capture_kind(platform: str = sys.platform) -> str:
    """OBS input kind used for window capture on a platform."""
    return _WINDOW_CAPTURE_KINDS.get(platform, "window_capture")


def parse_address(address: str) -> tuple[str, int]:
    """Split ``ws://host:port`` into host and port (default port 4455).

    Example:
        >>> parse_address("ws://127.0.0.1:4455")
        ('127.0.0.1', 4455)
    """
    parsed = urlparse(address if "://" in address else f"ws://{address}")
    return parsed.hostname or "localhost", parsed.port or 4455


class OBSProductionClient:
    """Production client driving OBS Studio scenes and inputs."""

    def __init__(self, events: EventSink | None = None, *, timeout_s: float = 3.0):
        self._events: EventSink = events or NullEventSink()
        self.timeout_s = timeout_s
        self._req: Any = None
        self._evt: Any = None
        self._loop: asyncio.AbstractEventLoop | None = None

    @property
    def connected(self) -> bool:
        return self._req is not None

    async def connect(self, address: str, password: str = "") -> None:
        if self.connected:
            await self.disconnect()

        host, port = parse_address(address)
        self._loop = asyncio.get_running_loop()
        try:
            self._req = await asyncio.to_thread(
                obs.ReqClient, host=host, port=port, password=password, timeout=self.timeout_s
            )
            self._evt = await asyncio.to_thread(
                obs.EventClient, host=host, port=port, password=password
            )
        except (OBSSDKError, OSError, WebSocketException) as e:
            await asyncio.to_thread(self._close_clients, self._detach())
            raise ProductionConnectionError(f"Failed to connect to OBS at {address}: {e}") from e

        self._evt.callback.register(
            [self.on_current_program_scene_changed, self.on_exit_started]
        )
        logger.info(f"Connected to OBS at {host}:{port}")
        self._emit(EventType.CONNECTED, {"address": address})

    async def disconnect(self) -> None:
        if not self.connected:
            return
        clients = self._detach()
        await asyncio.to_thread(self._close_clients, clients)
        self._emit(EventType.DISCONNECTED, None)

    async def create_container(self, name: str) -> None:
        await self._call("create_scene", name, container=name)

    async def remove_container(self, name: str) -> None:
        await self._call("remove_scene", name, container=name)

    async def list_source_bindings(self, container: str) -> list[SourceBinding]:
        resp = await self._call("get_scene_item_list", container, container=container)
        return [self._to_binding(item) for item in resp.scene_items]

    async def bind_image_source(
        self, container: str, path: str, *, source_name: str | None = None
    ) -> int:
        return await self._create_input(
            container, source_name or f"{container}_Image", "image_source", {"file": path}
        )

    async def bind_window_capture(
        self, container: str, *, source_name: str | None = None, capture_cursor: bool = False
    ) -> int:
        return await self._create_input(
            container,
            source_name or f"{container}_WindowCapture",
            window_capture_kind(),
            {"capture_cursor": capture_cursor},
        )

    async def bind_color_source(
        self,
        container: str,
        color: int,
        *,
        source_name: str | None = None,
        width: int = 1920,
        height: int = 1080,
    ) -> int:
        return await self._create_input(
            container,
            source_name or f"{container}_Color",
            "color_source_v3",
            {"color": color, "width": width, "height": height},
        )

    async def bind_media_source(
        self, container: str, path: str, *, source_name: str | None = None
    ) -> int:
        return await self._create_input(
            container,
            source_name or f"{container}_Video",
            "ffmpeg_source",
            {
                "local_file": path,
                "looping": False,
                "restart_on_activate": True,
                "clear_on_media_end": False,
            },
        )

    async def set_binding_transform(
        self, container: str, binding_id: int, transform: BindingTransform
    ) -> None:
        await self._call(
            "set_scene_item_transform",
            container,
            binding_id,
            {
                "boundsType": _BOUNDS_TYPES[transform.bounds_mode],
                "boundsWidth": float(transform.width),
                "boundsHeight": float(transform.height),
                "alignment": _ALIGNMENTS[transform.alignment],
            },
            container=container,
        )

    async def switch_active_container(self, name: str) -> None:
        await self._call("set_current_program_scene", name, container=name)

    async def query_active_container(self) -> str:
        resp = await self._call("get_current_program_scene")
        return resp.current_program_scene_name

    # obs-websocket event callbacks (run on the EventClient thread)

    def on_current_program_scene_changed(self, data: Any) -> None:
        self._emit_threadsafe(EventType.ACTIVE_CONTAINER_CHANGED, data.scene_name)

    def on_exit_started(self, data: Any) -> None:
        if self._loop is None or self._loop.is_closed():
            return
        self._loop.call_soon_threadsafe(self._drop_session, "obs-exiting")

    # Internals

    async def _create_input(
        self, container: str, source_name: str, kind: str, settings: dict[str, Any]
    ) -> int:
        resp = await self._call(
            "create_input", container, source_name, kind, settings, True, container=container
        )
        return resp.scene_item_id

    async def _call(self, request: str, *args: Any, container: str | None = None) -> Any:
        if self._req is None:
            raise NotConnectedError("Not connected to OBS")
        try:
            return await asyncio.to_thread(getattr(self._req, request), *args)
        except OBSSDKRequestError as e:
            code = getattr(e, "code", None)
            if code == _RESOURCE_NOT_FOUND and container is not None:
                raise ContainerNotFoundError(container) from e
            if code == _RESOURCE_ALREADY_EXISTS and container is not None:
                raise ContainerExistsError(container) from e
            raise ProductionRequestError(f"OBS request {request} failed: {e}") from e
        except (OBSSDKError, OSError, WebSocketException) as e:
            self._drop_session("connection-lost")
            raise ProductionConnectionError(f"Lost connection to OBS during {request}: {e}") from e

    def _detach(self) -> tuple[Any, ...]:
        clients = tuple(c for c in (self._evt, self._req) if c is not None)
        self._req = None
        self._evt = None
        return clients

    def _drop_session(self, reason: str) -> None:
        """Forget a session that OBS ended or that stopped answering."""
        if not self.connected:
            return
        clients = self._detach()
        logger.warning(f"OBS session ended: {reason}")
        asyncio.get_running_loop().run_in_executor(None, self._close_clients, clients)
        self._emit(EventType.DISCONNECTED, {"reason": reason})

    @staticmethod
    def _close_clients(clients: tuple[Any, ...]) -> None:
        for client in clients:
            try:
                client.disconnect()
            except (OBSSDKError, OSError, WebSocketException) as e:
                logger.warning(f"Error while disconnecting from OBS: {e}")

    @staticmethod
    def _to_binding(item: dict[str, Any]) -> SourceBinding:
        raw = item.get("sceneItemTransform") or {}
        transform = None
        bounds = {v: k for k, v in _BOUNDS_TYPES.items()}.get(raw.get("boundsType", ""))
        alignment = {v: k for k, v in _ALIGNMENTS.items()}.get(raw.get("alignment"))
        if bounds is not None and bounds != BoundsMode.NONE and alignment is not None:
            transform = BindingTransform(
                bounds_mode=bounds,
                width=max(1, int(raw.get("boundsWidth", 1))),
                height=max(1, int(raw.get("boundsHeight", 1))),
                alignment=alignment,
            )
        return SourceBinding(
            binding_id=item["sceneItemId"],
            source_name=item.get("sourceName", ""),
            kind=_INPUT_KINDS.get(item.get("inputKind") or "", SourceKind.IMAGE),
            transform=transform,
        )

    def _emit(self, event_type: EventType, payload: Any) -> None:
        self._events.emit(Event(type=event_type, source=EventSource.PRODUCTION, payload=payload))

    def _emit_threadsafe(self, event_type: EventType, payload: Any) -> None:
        if self._loop is None or self._loop.is_closed():
            return
        self._loop.call_soon_threadsafe(self._emit, event_type, payload)
