"""Utility helpers for performing file I/O with consistent defaults."""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Mapping, Optional

import yaml


DEFAULT_ENCODING = "utf-8"
CHUNK_SIZE = 1024 * 1024


def _to_path(path: Path | str) -> Path:
    return Path(path).expanduser()


@contextmanager
def open_file(
    path: Path | str,
    mode: str = "r",
    *,
    encoding: str = DEFAULT_ENCODING,
    newline: Optional[str] = None,
) -> Iterator[Any]:
    path_obj = _to_path(path)
    kwargs: dict[str, Any] = {}
    is_binary = "b" in mode
    if is_binary:
        if newline is not None:
            raise ValueError("newline is not supported in binary mode")
    else:
        kwargs["encoding"] = encoding
        kwargs["newline"] = newline
    with open(path_obj, mode, **kwargs) as handle:
        yield handle


def iter_chunks(path: Path | str, chunk_size: int = CHUNK_SIZE) -> Iterator[bytes]:
    """Yield the content of ``path`` in fixed-size binary chunks."""
    with open_file(path, "rb") as handle:
        while True:
            chunk = handle.read(chunk_size)
            if not chunk:
                break
            yield chunk


def read_yaml(path: Path | str) -> Mapping[str, Any] | list[Any]:
    with open_file(path, "r") as handle:
        data = yaml.safe_load(handle)
    return data if data is not None else {}
