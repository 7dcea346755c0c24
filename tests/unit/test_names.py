from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, Iterable, List

import pytest

from audit.names import (
    REPORT_KEYS,
    audit_folder,
    audit_report_paths,
    tally_names,
    write_audit_reports,
)
from common.base.errors import PathNotFound, WriteConflict
from common.utils.fs_utils import FileEntry

CsvRows = Callable[[Path], List[Dict[str, str]]]

MOMENT = datetime(2025, 1, 2, 3, 4, 5)


def _entries(names: Iterable[str]) -> List[FileEntry]:
    return [FileEntry.from_path(Path("/share") / name) for name in names]


def _touch(root: Path, names: Iterable[str]) -> Path:
    root.mkdir(parents=True, exist_ok=True)
    for name in names:
        (root / name).write_text("", encoding="utf-8")
    return root


def test_scenario_mixed_names() -> None:
    result = tally_names(_entries(["a.txt", "b..txt", "café.txt"]), include_extension=True)

    assert result.files_scanned == 3
    assert [path.name for path in result.extra_dot_files] == ["b..txt"]
    assert dict(result.nonascii_characters) == {"é": 1}
    assert [path.name for path in result.nonascii_files] == ["café.txt"]
    assert {"a", ".", "t", "x", "b", "c", "f", "é"} <= set(result.characters)
    assert result.characters["."] == 4
    assert result.characters["t"] == 6


def test_tally_sum_matches_character_count() -> None:
    names = ["a.txt", "b..txt", "café.txt", "ÅÄÖ åäö.doc", "README"]

    with_ext = tally_names(_entries(names), include_extension=True)
    without_ext = tally_names(_entries(names), include_extension=False)

    assert sum(with_ext.characters.values()) == sum(len(name) for name in names)
    expected_base = sum(len(entry.base_name) for entry in _entries(names))
    assert sum(without_ext.characters.values()) == expected_base


def test_extra_dot_with_and_without_extension() -> None:
    names = ["report.final.txt", ".profile.txt", "plain.txt", "archive.tar.gz", "single"]

    with_ext = tally_names(_entries(names), include_extension=True)
    without_ext = tally_names(_entries(names), include_extension=False)

    assert [p.name for p in with_ext.extra_dot_files] == ["report.final.txt", ".profile.txt", "archive.tar.gz"]
    # base names keep a dot, which exceeds the zero allowed without extensions
    assert [p.name for p in without_ext.extra_dot_files] == ["report.final.txt", ".profile.txt", "archive.tar.gz"]
    assert without_ext.characters["."] == 3


def test_trailing_dot_counts_only_with_extension() -> None:
    result_with = tally_names(_entries(["notes.txt."]), include_extension=True)
    result_without = tally_names(_entries(["notes.txt."]), include_extension=False)

    assert len(result_with.extra_dot_files) == 1
    assert len(result_without.extra_dot_files) == 1


def test_nonascii_file_listed_once() -> None:
    result = tally_names(_entries(["naïve résumé.txt", "straße.txt"]))

    assert [p.name for p in result.nonascii_files] == ["naïve résumé.txt", "straße.txt"]
    assert result.nonascii_characters == {"ï": 1, "é": 2, "ß": 1}


def test_extension_characters_excluded() -> None:
    result = tally_names(_entries(["data.cév"]), include_extension=False)

    assert result.nonascii_files == []
    assert "." not in result.characters
    assert sum(result.characters.values()) == len("data")


def test_audit_folder_walks_tree(tmp_path: Path) -> None:
    root = _touch(tmp_path / "Share", ["a.txt", "b..txt", "café.txt"])
    _touch(root / "sub", ["ok.txt"])

    result = audit_folder(root, include_progress=False)

    assert result.files_scanned == 4
    assert result.extra_dot_files == [root.resolve() / "b..txt"]
    assert result.nonascii_files == [root.resolve() / "café.txt"]


def test_audit_folder_missing(tmp_path: Path) -> None:
    with pytest.raises(PathNotFound):
        audit_folder(tmp_path / "missing", include_progress=False)


def test_write_reports(tmp_path: Path, csv_rows: CsvRows) -> None:
    root = _touch(tmp_path / "Share", ["a.txt", "b..txt", "café.txt"])
    save_dir = tmp_path / "out"
    save_dir.mkdir()
    result = audit_folder(root, include_progress=False)

    outcome = write_audit_reports(result, root, save_dir, moment=MOMENT)

    assert outcome.ok
    assert set(outcome.written) == set(REPORT_KEYS)
    assert outcome.written["character_counts"].name == "Share_20250102030405_character_counts.csv"

    characters = csv_rows(outcome.written["character_counts"])
    assert [row["Character"] for row in characters] == sorted(row["Character"] for row in characters)
    assert {row["Character"]: row["Count"] for row in characters}["."] == "4"

    nonascii = csv_rows(outcome.written["nonascii_character_counts"])
    assert nonascii == [{"Character": "é", "Count": "1"}]

    files = csv_rows(outcome.written["nonascii_files"])
    assert [Path(row["Path"]).name for row in files] == ["café.txt"]

    dots = csv_rows(outcome.written["extra_dot_files"])
    assert [Path(row["Path"]).name for row in dots] == ["b..txt"]


def test_write_reports_empty_folder(tmp_path: Path) -> None:
    root = _touch(tmp_path / "Empty", [])
    save_dir = tmp_path / "out"
    save_dir.mkdir()
    result = audit_folder(root, include_progress=False)

    outcome = write_audit_reports(result, root, save_dir, moment=MOMENT)

    assert result.files_scanned == 0
    assert not result.characters and not result.nonascii_characters
    assert outcome.ok
    headers = {
        key: path.read_text(encoding="utf-8").splitlines() for key, path in outcome.written.items()
    }
    assert headers["character_counts"] == ["Character,Count"]
    assert headers["nonascii_character_counts"] == ["Character,Count"]
    assert headers["nonascii_files"] == ["Path"]
    assert headers["extra_dot_files"] == ["Path"]


def test_write_reports_conflict_is_isolated(tmp_path: Path) -> None:
    root = _touch(tmp_path / "Share", ["a.txt"])
    save_dir = tmp_path / "out"
    save_dir.mkdir()
    blocked = audit_report_paths(root, save_dir, MOMENT)["nonascii_files"]
    blocked.write_text("existing", encoding="utf-8")
    result = audit_folder(root, include_progress=False)

    outcome = write_audit_reports(result, root, save_dir, moment=MOMENT)

    assert not outcome.ok
    assert isinstance(outcome.errors["nonascii_files"], WriteConflict)
    assert set(outcome.written) == set(REPORT_KEYS) - {"nonascii_files"}
    assert blocked.read_text(encoding="utf-8") == "existing"
