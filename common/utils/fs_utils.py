"""
Shared filesystem utilities: the recursive file walker used by both tools.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from common.base.fs import require_directory
from common.base.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class FileEntry:
    """A file discovered by the walker.

    ``base_name`` is the name without its final extension and ``extension``
    keeps the leading dot (``"report.tar.gz"`` -> ``"report.tar"``, ``".gz"``).
    """

    path: Path
    base_name: str
    extension: str

    @property
    def full_name(self) -> str:
        return f"{self.base_name}{self.extension}"

    @classmethod
    def from_path(cls, path: Path) -> "FileEntry":
        name = path.name
        stem, dot, suffix = name.rpartition(".")
        # Windows semantics: ".gitignore" is all extension, "notes." has none.
        if not dot or not suffix:
            return cls(path=path, base_name=name, extension="")
        return cls(path=path, base_name=stem, extension=f".{suffix}")


def _log_walk_error(error: OSError) -> None:
    log.warning("⚠️ unreadable_directory path=%s error=%s", error.filename, error.strerror or error)


def iter_file_entries(root: Path | str) -> Iterator[FileEntry]:
    """
    Walk ``root`` recursively and yield a FileEntry for every regular file.

    Hidden and system files are included. Directory symlinks are not followed,
    and names are visited in sorted order so a fixed tree always yields the
    same sequence. Directories that cannot be listed are logged and skipped.

    Raises:
        PathNotFound: ``root`` does not exist.
        InvalidInput: ``root`` is not a directory.
    """
    resolved_root = require_directory(root, "Source folder")
    for dirpath, dirnames, filenames in os.walk(resolved_root, onerror=_log_walk_error):
        dirnames.sort()
        dir_path = Path(dirpath)
        for fname in sorted(filenames):
            path = dir_path / fname
            if not path.is_file():
                log.debug("Skipping non-regular entry: %s", path)
                continue
            yield FileEntry.from_path(path)
