import re
from pathlib import Path


def sanitize_program_id(name: str, replacement_char: str = "_") -> str:
    """
    Derive a stable program identifier from a deck filename stem.

    Every character outside ``[A-Za-z0-9_-]`` becomes ``replacement_char`` so the
    id is safe to embed in container names and directory names.
    """
    sanitized = re.sub(r"[^a-zA-Z0-9_-]", replacement_char, name)
    return sanitized or replacement_char


def program_id_from_path(file_path: str | Path) -> str:
    """Program id for a deck path: the sanitized filename without extension."""
    return sanitize_program_id(Path(file_path).stem)
