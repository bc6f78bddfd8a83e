"""Protocol for the renderer as seen by the live-render mode controller."""

from typing import Protocol


class Renderer(Protocol):
    """
    External renderer handle.

    RendererSupervisor is the production implementation; the live-render
    controller depends only on this surface.
    """

    @property
    def is_running(self) -> bool:
        """Whether a renderer process is alive and past startup. No I/O."""
        ...

    @property
    def display_index(self) -> int:
        """Target display for the next launch."""
        ...

    def set_display(self, display_index: int) -> None:
        """Select the display used by the next launch."""
        ...

    async def check_availability(self) -> bool:
        """Whether a renderer executable is installed. Never raises."""
        ...

    async def launch(self, asset_path: str, display: int | None = None) -> None:
        """Start the renderer on an asset, replacing any running instance."""
        ...

    async def stop(self) -> None:
        """Shut the renderer down. Never raises."""
        ...

    async def next_slide(self) -> None: ...

    async def prev_slide(self) -> None: ...

    async def first_slide(self) -> None: ...

    async def last_slide(self) -> None: ...
