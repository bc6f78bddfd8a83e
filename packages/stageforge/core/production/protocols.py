"""Protocol for the remote production service (OBS Studio or a stand-in)."""

from typing import Protocol

from .models import BindingTransform, SourceBinding


class ProductionClient(Protocol):
    """
    Session wrapper around a remote capture/production service.

    A "container" is the service's named, switchable presentation unit (an
    OBS scene). Implementations emit ``connected``, ``disconnected`` and
    ``active-container-changed`` events to the sink they were built with.

    Idempotency contract:
    - ``create_container`` fails if the name is taken
      (ContainerExistsError); callers wanting replace semantics remove first.
    - ``remove_container`` fails if the name is absent
      (ContainerNotFoundError); callers must tolerate it.
    - ``switch_active_container`` to the already-active container is a no-op.

    Every request raises NotConnectedError when no session is active and
    ProductionRequestError when the service rejects it.
    """

    @property
    def connected(self) -> bool:
        """Whether a session is active. Never performs I/O."""
        ...

    async def connect(self, address: str, password: str = "") -> None:
        """
        Open a session.

        Raises:
            ProductionConnectionError: If the service cannot be reached or
                rejects the credential
        """
        ...

    async def disconnect(self) -> None:
        """Close the session. No-op when not connected."""
        ...

    async def create_container(self, name: str) -> None:
        """Create a new, empty container."""
        ...

    async def remove_container(self, name: str) -> None:
        """Remove a container and its bindings."""
        ...

    async def list_source_bindings(self, container: str) -> list[SourceBinding]:
        """Bindings of a container in stacking order."""
        ...

    async def bind_image_source(
        self, container: str, path: str, *, source_name: str | None = None
    ) -> int:
        """Attach a still image. Returns the binding id."""
        ...

    async def bind_window_capture(
        self, container: str, *, source_name: str | None = None, capture_cursor: bool = False
    ) -> int:
        """Attach a window/region capture. Returns the binding id."""
        ...

    async def bind_color_source(
        self,
        container: str,
        color: int,
        *,
        source_name: str | None = None,
        width: int = 1920,
        height: int = 1080,
    ) -> int:
        """Attach a full-canvas solid color (ABGR). Returns the binding id."""
        ...

    async def bind_media_source(
        self, container: str, path: str, *, source_name: str | None = None
    ) -> int:
        """
        Attach a media playback source.

        Playback is non-looping, restarts when the container becomes active
        and keeps the last frame when the media ends.

        Returns:
            The binding id
        """
        ...

    async def set_binding_transform(
        self, container: str, binding_id: int, transform: BindingTransform
    ) -> None:
        """Apply bounds/alignment to one binding."""
        ...

    async def switch_active_container(self, name: str) -> None:
        """Make a container the live program output."""
        ...

    async def query_active_container(self) -> str:
        """Name of the container currently on program output."""
        ...
