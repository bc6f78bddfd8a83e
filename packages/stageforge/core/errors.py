"""Error taxonomy for StageForge.

Every error raised by the core derives from StageForgeError so the session
coordinator can map any failure onto the outward command envelope.
"""

from __future__ import annotations


class StageForgeError(Exception):
    """Base exception for all StageForge core errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidArgumentError(StageForgeError):
    """Missing or malformed input to a public method."""


class NotLoadedError(StageForgeError):
    """Navigation attempted with no active program or container set."""


class NotConnectedError(StageForgeError):
    """Remote-session-dependent operation attempted without a session."""


class IndexOutOfRangeError(StageForgeError):
    """Jump target outside the valid bounds."""

    def __init__(self, index: int, count: int) -> None:
        self.index = index
        self.count = count
        super().__init__(f"Invalid scene index {index} (valid range 0..{count - 1})")


class SetupError(StageForgeError):
    """Capture-topology synthesis failed."""


class UnavailableError(StageForgeError):
    """External renderer executable not found."""


class LaunchError(StageForgeError):
    """External renderer could not be spawned or exited during startup."""


class NotRunningError(StageForgeError):
    """Command sent to a renderer process that is not running."""


class KeyInjectionError(StageForgeError):
    """Platform input injection failed to deliver a key."""


class ProgramNotFoundError(StageForgeError):
    """No stored program matches the requested identifier."""

    def __init__(self, program_id: str, reason: str | None = None) -> None:
        self.program_id = program_id
        detail = f": {reason}" if reason else ""
        super().__init__(f"Program not found: {program_id}{detail}")


class ProductionError(StageForgeError):
    """Base class for remote production service failures."""


class ProductionConnectionError(ProductionError):
    """Connecting to the remote production service failed."""


class ProductionRequestError(ProductionError):
    """A request against the remote production service failed."""


class ContainerNotFoundError(ProductionRequestError):
    """The named container does not exist on the remote service."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Container not found: {name}")


class ContainerExistsError(ProductionRequestError):
    """A container with the requested name already exists."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Container already exists: {name}")
