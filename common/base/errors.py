"""
common.base.errors

Error taxonomy shared by the folder audit tools.

Every error derives from ``AuditError`` and from the closest builtin
exception, so callers may catch either ``AuditError`` or the usual
``OSError``/``ValueError`` families.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class AuditError(Exception):
    """Base class for all user-facing folder audit failures."""


class InvalidInput(AuditError, ValueError):
    """A required parameter is empty, missing or malformed."""


class PathNotFound(AuditError, FileNotFoundError):
    """A source, destination or save path does not exist."""

    def __init__(self, path: Path | str, label: str = "Path") -> None:
        self.path = Path(path)
        self.label = label
        super().__init__(f"{label} not found: {self.path}")

    def __str__(self) -> str:
        return f"{self.label} not found: {self.path}"


class UnsupportedAlgorithm(AuditError, ValueError):
    """Requested digest algorithm is not in the supported set."""


class UnreadableFile(AuditError, OSError):
    """A file could not be opened or read while hashing."""

    def __init__(self, path: Path | str, reason: Optional[str] = None) -> None:
        self.path = Path(path)
        self.reason = reason or "unreadable"
        super().__init__(f"Cannot read file {self.path}: {self.reason}")

    def __str__(self) -> str:
        return f"Cannot read file {self.path}: {self.reason}"


class WriteConflict(AuditError, FileExistsError):
    """Output file already exists; reports are never overwritten."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        super().__init__(f"Output file already exists: {self.path}")

    def __str__(self) -> str:
        return f"Output file already exists: {self.path}"


class DestinationUnwritable(AuditError, OSError):
    """Output file could not be created or written."""

    def __init__(self, path: Path | str, reason: Optional[str] = None) -> None:
        self.path = Path(path)
        self.reason = reason or "write failed"
        super().__init__(f"Cannot write {self.path}: {self.reason}")

    def __str__(self) -> str:
        return f"Cannot write {self.path}: {self.reason}"


__all__ = [
    "AuditError",
    "InvalidInput",
    "PathNotFound",
    "UnsupportedAlgorithm",
    "UnreadableFile",
    "WriteConflict",
    "DestinationUnwritable",
]
