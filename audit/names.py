"""
audit.names

File-name auditor: tallies character frequencies across every file name in
a folder tree and flags names that are likely to cause trouble when copied
between systems:

 - names containing non-ASCII characters (code point > 127)
 - names with more dots than the single extension separator

Reports (optional, written independently of each other):
    <folder>_<ts>_character_counts.csv          Character, Count
    <folder>_<ts>_nonascii_character_counts.csv Character, Count
    <folder>_<ts>_nonascii_files.csv            Path
    <folder>_<ts>_extra_dot_files.csv           Path
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from common.base.errors import AuditError
from common.base.fs import folder_label, require_directory
from common.base.logging import get_logger
from common.shared.report import ColumnSpec, run_timestamp, summarize_counts, timestamped_filename, write_csv
from common.shared.utils import with_progress
from common.utils.fs_utils import FileEntry, iter_file_entries

log = get_logger(__name__)

ASCII_MAX = 127
DOT = "."

CHARACTER_COLUMNS: List[ColumnSpec] = [
    ColumnSpec("character", "Character"),
    ColumnSpec("count", "Count"),
]
PATH_COLUMNS: List[ColumnSpec] = [ColumnSpec("path", "Path")]

REPORT_CHARACTERS = "character_counts"
REPORT_NONASCII_CHARACTERS = "nonascii_character_counts"
REPORT_NONASCII_FILES = "nonascii_files"
REPORT_EXTRA_DOT_FILES = "extra_dot_files"
REPORT_KEYS = (
    REPORT_CHARACTERS,
    REPORT_NONASCII_CHARACTERS,
    REPORT_NONASCII_FILES,
    REPORT_EXTRA_DOT_FILES,
)


@dataclass
class NameAuditResult:
    """Aggregated tallies and anomaly lists for one audit run."""

    include_extension: bool = True
    files_scanned: int = 0
    characters: Counter = field(default_factory=Counter)
    nonascii_characters: Counter = field(default_factory=Counter)
    nonascii_files: List[Path] = field(default_factory=list)
    extra_dot_files: List[Path] = field(default_factory=list)

    @property
    def max_dots(self) -> int:
        return 1 if self.include_extension else 0

    def analyzed_name(self, entry: FileEntry) -> str:
        return entry.full_name if self.include_extension else entry.base_name

    def add(self, entry: FileEntry) -> None:
        """Fold one file name into the tallies."""
        name = self.analyzed_name(entry)
        self.files_scanned += 1

        if name.count(DOT) > self.max_dots:
            self.extra_dot_files.append(entry.path)

        flagged = False
        for char in name:
            self.characters[char] += 1
            if ord(char) > ASCII_MAX:
                self.nonascii_characters[char] += 1
                if not flagged:
                    self.nonascii_files.append(entry.path)
                    flagged = True


@dataclass
class AuditReportResult:
    written: Dict[str, Path] = field(default_factory=dict)
    errors: Dict[str, AuditError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


def tally_names(
    entries: Iterable[FileEntry],
    include_extension: bool = True,
    *,
    include_progress: bool = False,
) -> NameAuditResult:
    """Accumulate character and anomaly statistics for ``entries``."""
    result = NameAuditResult(include_extension=include_extension)
    for entry in with_progress(entries, include_progress, "Scanning names"):
        result.add(entry)
    return result


def audit_folder(
    root: Path | str,
    include_extension: bool = True,
    *,
    include_progress: bool = True,
) -> NameAuditResult:
    root_dir = require_directory(root, "Folder")
    log.info("🔍 Auditing file names under %s (extensions %s)", root_dir, "included" if include_extension else "excluded")
    result = tally_names(iter_file_entries(root_dir), include_extension, include_progress=include_progress)
    log_audit_summary(result)
    return result


def _format_char(char: str) -> str:
    return f"{char!r} U+{ord(char):04X}"


def log_audit_summary(result: NameAuditResult) -> None:
    for char, count in sorted(result.characters.items()):
        log.info("%s: %d", _format_char(char), count)
    for path in result.nonascii_files:
        log.warning("⚠️ Non-ASCII name: %s", path)
    for path in result.extra_dot_files:
        log.warning("⚠️ Extra dots in name: %s", path)
    log.info(
        summarize_counts(
            "Name Audit Summary",
            {
                "Files scanned": result.files_scanned,
                "Distinct characters": len(result.characters),
                "Non-ASCII characters": sum(result.nonascii_characters.values()),
                "Files with non-ASCII names": len(result.nonascii_files),
                "Files with extra dots": len(result.extra_dot_files),
            },
        )
    )


def _character_rows(tally: Mapping[str, int]) -> List[Dict[str, object]]:
    return [{"character": char, "count": count} for char, count in sorted(tally.items())]


def _path_rows(paths: Iterable[Path]) -> List[Dict[str, object]]:
    return [{"path": str(path)} for path in paths]


def audit_report_paths(
    root: Path,
    save_dir: Path,
    moment: Optional[datetime] = None,
) -> Dict[str, Path]:
    stamp = run_timestamp(moment)
    label = folder_label(root)
    return {key: timestamped_filename([label, stamp, key], save_dir) for key in REPORT_KEYS}


def write_audit_reports(
    result: NameAuditResult,
    root: Path | str,
    save_dir: Path | str,
    *,
    moment: Optional[datetime] = None,
) -> AuditReportResult:
    """
    Write the four audit CSVs into ``save_dir``.

    Each report is attempted independently: a WriteConflict or write failure
    on one is logged and recorded without stopping the others.
    """
    save_path = require_directory(save_dir, "Save folder")
    paths = audit_report_paths(Path(root), save_path, moment)
    jobs: List[Tuple[str, Callable[[], List[Dict[str, object]]], List[ColumnSpec]]] = [
        (REPORT_CHARACTERS, lambda: _character_rows(result.characters), CHARACTER_COLUMNS),
        (REPORT_NONASCII_CHARACTERS, lambda: _character_rows(result.nonascii_characters), CHARACTER_COLUMNS),
        (REPORT_NONASCII_FILES, lambda: _path_rows(result.nonascii_files), PATH_COLUMNS),
        (REPORT_EXTRA_DOT_FILES, lambda: _path_rows(result.extra_dot_files), PATH_COLUMNS),
    ]

    outcome = AuditReportResult()
    for key, build_rows, columns in jobs:
        try:
            outcome.written[key] = write_csv(build_rows(), paths[key], columns)
            log.info("📄 CSV written to: %s", paths[key])
        except AuditError as exc:
            log.error("❌ Failed to write %s report: %s", key, exc)
            outcome.errors[key] = exc
    return outcome
