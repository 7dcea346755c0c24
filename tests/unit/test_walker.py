from __future__ import annotations

from pathlib import Path

import pytest

from common.base.errors import InvalidInput, PathNotFound
from common.utils.fs_utils import FileEntry, iter_file_entries


def _make_tree(root: Path) -> set[Path]:
    files = [
        root / "a.txt",
        root / ".hidden",
        root / "sub" / "b..txt",
        root / "sub" / "deeper" / "café.txt",
        root / "sub" / "deeper" / "no_extension",
    ]
    for path in files:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(path.name, encoding="utf-8")
    (root / "empty_dir").mkdir()
    return {path.resolve() for path in files}


def test_walker_visits_every_file_once(tmp_path: Path) -> None:
    expected = _make_tree(tmp_path)

    visited = [entry.path for entry in iter_file_entries(tmp_path)]

    assert len(visited) == len(set(visited))
    assert set(visited) == expected


def test_walker_order_is_deterministic(tmp_path: Path) -> None:
    _make_tree(tmp_path)

    first = [entry.path for entry in iter_file_entries(tmp_path)]
    second = [entry.path for entry in iter_file_entries(tmp_path)]

    assert first == second


def test_walker_empty_folder(tmp_path: Path) -> None:
    assert list(iter_file_entries(tmp_path)) == []


def test_walker_missing_root(tmp_path: Path) -> None:
    with pytest.raises(PathNotFound):
        list(iter_file_entries(tmp_path / "missing"))


def test_walker_root_is_file(tmp_path: Path) -> None:
    target = tmp_path / "file.txt"
    target.write_text("x", encoding="utf-8")

    with pytest.raises(InvalidInput):
        list(iter_file_entries(target))


@pytest.mark.parametrize(
    ("name", "base_name", "extension"),
    [
        ("a.txt", "a", ".txt"),
        ("b..txt", "b.", ".txt"),
        ("archive.tar.gz", "archive.tar", ".gz"),
        ("no_extension", "no_extension", ""),
        (".gitignore", "", ".gitignore"),
        ("notes.", "notes.", ""),
    ],
)
def test_file_entry_splits_extension(name: str, base_name: str, extension: str) -> None:
    entry = FileEntry.from_path(Path("/data") / name)

    assert entry.base_name == base_name
    assert entry.extension == extension
    assert entry.full_name == name
