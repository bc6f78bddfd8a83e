"""In-process production service.

Models containers, bindings and program output the way OBS Studio does, so
the orchestration core can run without a live service (dry runs, tests).
"""

from __future__ import annotations

import logging
from typing import Any

from stageforge.core.errors import (
    ContainerExistsError,
    ContainerNotFoundError,
    NotConnectedError,
    ProductionConnectionError,
    ProductionRequestError,
)
from stageforge.core.events import Event, EventSink, EventSource, EventType, NullEventSink

from .models import BindingTransform, SourceBinding, SourceKind

logger = logging.getLogger(__name__)


class InMemoryProductionClient:
    """
    Production client keeping all state in memory.

    Every request is appended to ``calls`` as ``(operation, args)`` so tests
    can assert exactly which remote calls were issued. Failures can be
    injected per operation with ``inject_failure``.
    """

    def __init__(
        self,
        events: EventSink | None = None,
        *,
        expected_password: str | None = None,
        reachable: bool = True,
    ):
        self._events: EventSink = events or NullEventSink()
        self.expected_password = expected_password
        self.reachable = reachable

        self._connected = False
        self._address: str | None = None
        self._containers: dict[str, list[SourceBinding]] = {}
        self._active: str | None = None
        self._next_binding_id = 1
        self._failures: list[tuple[str, str | None, Exception]] = []

        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    # Test/dry-run helpers (no I/O semantics)

    def inject_failure(
        self, operation: str, error: Exception | None = None, *, container: str | None = None
    ) -> None:
        """Make the next matching request fail once.

        Args:
            operation: Method name, e.g. "create_container"
            error: Exception to raise (default ProductionRequestError)
            container: Only fail for this container name
        """
        self._failures.append(
            (operation, container, error or ProductionRequestError(f"{operation} failed"))
        )

    def container_names(self) -> list[str]:
        return list(self._containers)

    def bindings(self, container: str) -> list[SourceBinding]:
        return list(self._containers.get(container, []))

    @property
    def active_container(self) -> str | None:
        return self._active

    @property
    def address(self) -> str | None:
        return self._address

    # ProductionClient

    @property
    def connected(self) -> bool:
        return self._connected

    async def connect(self, address: str, password: str = "") -> None:
        self._record("connect", address)
        if not self.reachable:
            raise ProductionConnectionError(f"Failed to connect to {address}: unreachable")
        if self.expected_password is not None and password != self.expected_password:
            raise ProductionConnectionError(f"Failed to connect to {address}: authentication failed")

        self._connected = True
        self._address = address
        logger.info(f"Connected to in-memory production service at {address}")
        self._emit(EventType.CONNECTED, {"address": address})

    async def disconnect(self) -> None:
        self._record("disconnect")
        if not self._connected:
            return
        self._connected = False
        self._emit(EventType.DISCONNECTED, None)

    async def create_container(self, name: str) -> None:
        self._request("create_container", name)
        if name in self._containers:
            raise ContainerExistsError(name)
        self._containers[name] = []

    async def remove_container(self, name: str) -> None:
        self._request("remove_container", name)
        if name not in self._containers:
            raise ContainerNotFoundError(name)
        del self._containers[name]
        if self._active == name:
            self._active = None

    async def list_source_bindings(self, container: str) -> list[SourceBinding]:
        self._request("list_source_bindings", container)
        return [b.model_copy() for b in self._require(container)]

    async def bind_image_source(
        self, container: str, path: str, *, source_name: str | None = None
    ) -> int:
        self._request("bind_image_source", container, path)
        return self._bind(
            container, source_name or f"{container}_Image", SourceKind.IMAGE, {"file": path}
        )

    async def bind_window_capture(
        self, container: str, *, source_name: str | None = None, capture_cursor: bool = False
    ) -> int:
        self._request("bind_window_capture", container)
        return self._bind(
            container,
            source_name or f"{container}_WindowCapture",
            SourceKind.WINDOW_CAPTURE,
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
        self._request("bind_color_source", container, color)
        return self._bind(
            container,
            source_name or f"{container}_Color",
            SourceKind.COLOR,
            {"color": color, "width": width, "height": height},
        )

    async def bind_media_source(
        self, container: str, path: str, *, source_name: str | None = None
    ) -> int:
        self._request("bind_media_source", container, path)
        return self._bind(
            container,
            source_name or f"{container}_Video",
            SourceKind.MEDIA,
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
        self._request("set_binding_transform", container, binding_id)
        bindings = self._require(container)
        for position, binding in enumerate(bindings):
            if binding.binding_id == binding_id:
                bindings[position] = binding.model_copy(update={"transform": transform})
                return
        raise ProductionRequestError(f"No binding {binding_id} in container {container}")

    async def switch_active_container(self, name: str) -> None:
        self._request("switch_active_container", name)
        self._require(name)
        if self._active == name:
            return
        self._active = name
        self._emit(EventType.ACTIVE_CONTAINER_CHANGED, name)

    async def query_active_container(self) -> str:
        self._request("query_active_container")
        return self._active or ""

    # Internals

    def _record(self, operation: str, *args: Any) -> None:
        self.calls.append((operation, args))

    def _request(self, operation: str, *args: Any) -> None:
        self._record(operation, *args)
        if not self._connected:
            raise NotConnectedError("Not connected to production service")
        container = args[0] if args else None
        for position, (op, target, error) in enumerate(self._failures):
            if op == operation and (target is None or target == container):
                del self._failures[position]
                raise error

    def _require(self, container: str) -> list[SourceBinding]:
        try:
            return self._containers[container]
        except KeyError:
            raise ContainerNotFoundError(container) from None

    def _bind(
        self, container: str, source_name: str, kind: SourceKind, settings: dict[str, Any]
    ) -> int:
        bindings = self._require(container)
        if any(b.source_name == source_name for b in bindings):
            raise ProductionRequestError(f"Source {source_name} already exists in {container}")

        binding_id = self._next_binding_id
        self._next_binding_id += 1
        bindings.append(
            SourceBinding(
                binding_id=binding_id, source_name=source_name, kind=kind, settings=settings
            )
        )
        return binding_id

    def _emit(self, event_type: EventType, payload: Any) -> None:
        self._events.emit(Event(type=event_type, source=EventSource.PRODUCTION, payload=payload))
