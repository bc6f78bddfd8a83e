"""Program and Act models plus read-only program stores."""

from stageforge.core.programs.models import Act, PlaybackMode, Program, ProgramSummary
from stageforge.core.programs.store import FileProgramStore, InMemoryProgramStore, ProgramStore

__all__ = [
    # Models
    "Act",
    "PlaybackMode",
    "Program",
    "ProgramSummary",
    # Stores
    "ProgramStore",
    "FileProgramStore",
    "InMemoryProgramStore",
]
