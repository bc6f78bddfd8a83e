"""Read-only access to imported programs.

The import pipeline writes ``<data_dir>/programs/<id>/metadata.json``; the
stores here only read that layout.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

import aiofiles  # type: ignore[import-untyped]
import aiofiles.os  # type: ignore[import-untyped]
from pydantic import ValidationError

from stageforge.core.errors import ProgramNotFoundError
from stageforge.core.programs.models import Program, ProgramSummary
from stageforge.core.utils.formatting import sanitize_program_id

logger = logging.getLogger(__name__)

PROGRAMS_DIRNAME = "programs"
METADATA_FILENAME = "metadata.json"


class ProgramStore(Protocol):
    """Protocol for program metadata sources."""

    async def load_program(self, program_id: str) -> Program:
        """Load one program.

        Raises:
            ProgramNotFoundError: If no valid program exists for the id
        """
        ...

    async def list_programs(self) -> list[ProgramSummary]:
        """List every loadable program. Unreadable entries are skipped."""
        ...


class FileProgramStore:
    """Program store backed by the import pipeline's metadata directory."""

    def __init__(self, data_dir: str | Path):
        self.programs_dir = Path(data_dir) / PROGRAMS_DIRNAME

    def metadata_path(self, program_id: str) -> Path:
        return self.programs_dir / program_id / METADATA_FILENAME

    async def load_program(self, program_id: str) -> Program:
        if not program_id or sanitize_program_id(program_id) != program_id:
            raise ProgramNotFoundError(program_id, "invalid program id")

        path = self.metadata_path(program_id)
        try:
            async with aiofiles.open(path, encoding="utf-8") as f:
                raw = await f.read()
        except FileNotFoundError as e:
            raise ProgramNotFoundError(program_id) from e
        except OSError as e:
            raise ProgramNotFoundError(program_id, str(e)) from e

        try:
            return Program.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as e:
            raise ProgramNotFoundError(program_id, f"invalid metadata: {e}") from e

    async def list_programs(self) -> list[ProgramSummary]:
        if not await aiofiles.os.path.isdir(self.programs_dir):
            return []

        names: list[str] = sorted(await aiofiles.os.listdir(self.programs_dir))
        summaries: list[ProgramSummary] = []
        for name in names:
            if not await aiofiles.os.path.isdir(self.programs_dir / name):
                continue
            try:
                program = await self.load_program(name)
            except ProgramNotFoundError as e:
                logger.error(f"Error loading program {name}: {e}")
                continue
            summaries.append(ProgramSummary.from_program(program))
        return summaries


class InMemoryProgramStore:
    """Program store holding programs in a dict, for tests and dry runs."""

    def __init__(self, programs: list[Program] | None = None):
        self._programs: dict[str, Program] = {p.id: p for p in programs or []}

    def add(self, program: Program) -> None:
        self._programs[program.id] = program

    async def load_program(self, program_id: str) -> Program:
        try:
            return self._programs[program_id]
        except KeyError:
            raise ProgramNotFoundError(program_id) from None

    async def list_programs(self) -> list[ProgramSummary]:
        return [ProgramSummary.from_program(p) for p in self._programs.values()]
