"""Filesystem helper utilities shared across common modules."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

from .errors import InvalidInput, PathNotFound


def require_directory(path: Optional[Path | str], label: str = "Path") -> Path:
    """Return ``path`` resolved, failing unless it names an existing directory."""
    if path is None or not str(path).strip():
        raise InvalidInput(f"{label} is required")
    p = Path(path).expanduser()
    if not p.exists():
        raise PathNotFound(p, label)
    if not p.is_dir():
        raise InvalidInput(f"{label} is not a directory: {p}")
    return p.resolve()


def folder_label(path: Path) -> str:
    """Name used to prefix output files; drive roots have no ``name``."""
    name = path.name
    if name:
        return name
    anchor = path.anchor.strip("\\/:")
    return anchor or "root"


def human_size(num: float, suffix: str = "B") -> str:
    units: Iterable[str] = ["", "K", "M", "G", "T", "P", "E", "Z"]
    value = float(num)
    for unit in units:
        if abs(value) < 1024.0:
            return f"{value:3.1f}{unit}{suffix}"
        value /= 1024.0
    return f"{value:.1f}Y{suffix}"
