"""Shared utilities for StageForge."""

from stageforge.core.utils.formatting import program_id_from_path, sanitize_program_id

__all__ = [
    "program_id_from_path",
    "sanitize_program_id",
]
