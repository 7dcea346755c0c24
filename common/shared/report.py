"""
common.shared.report

Centralized CSV reporting utilities for the folder audit tools.

 - timestamped, deterministic report filenames
 - no-clobber CSV writer (existing files are never overwritten)
 - header-only output when there are no rows
 - human-readable summary blocks for console logs
"""

from __future__ import annotations

import csv
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence

from common.base.errors import DestinationUnwritable, WriteConflict
from common.base.file_io import open_file
from common.base.logging import get_logger

log = get_logger(__name__)

TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"


@dataclass(frozen=True)
class ColumnSpec:
    key: str
    header: str


# ----------------------------------------------------------------------
# TIMESTAMPED FILENAMES
# ----------------------------------------------------------------------

def run_timestamp(moment: Optional[datetime] = None) -> str:
    """Second-granularity stamp used in every report name (e.g. 20251006103000)."""
    return (moment or datetime.now()).strftime(TIMESTAMP_FORMAT)


def timestamped_filename(
    parts: Sequence[str],
    output_dir: Path,
    ext: str = "csv",
) -> Path:
    """
    Join name parts with underscores under ``output_dir``.

    Example:
        timestamped_filename(["Docs", "20251006103000", "md5", "digest"], dest)
        -> dest / "Docs_20251006103000_md5_digest.csv"
    """
    name = "_".join(part for part in parts if part)
    return Path(output_dir) / f"{name}.{ext}"


# ----------------------------------------------------------------------
# CSV WRITERS
# ----------------------------------------------------------------------

def write_csv(
    rows: Iterable[Mapping[str, Any]],
    output_path: Path,
    columns: Sequence[ColumnSpec],
) -> Path:
    """
    Write rows to a new UTF-8 CSV file with a header row.

    The file is opened in exclusive-create mode: an existing file raises
    ``WriteConflict`` and is left untouched. Any other I/O failure raises
    ``DestinationUnwritable``. An empty ``rows`` iterable yields a header-only file.
    """
    output_path = Path(output_path)
    fieldnames = [spec.key for spec in columns]
    header = {spec.key: spec.header for spec in columns}
    count = 0
    try:
        with open_file(output_path, "x", newline="") as handle:
            writer = csv.DictWriter(handle, fieldnames=fieldnames, extrasaction="ignore")
            writer.writerow(header)
            for row in rows:
                writer.writerow({key: row.get(key, "") for key in fieldnames})
                count += 1
    except FileExistsError as exc:
        raise WriteConflict(output_path) from exc
    except OSError as exc:
        raise DestinationUnwritable(output_path, exc.strerror or str(exc)) from exc

    log.debug("📊 CSV report saved (%d rows) → %s", count, output_path)
    return output_path


# ----------------------------------------------------------------------
# HUMAN-READABLE SUMMARY
# ----------------------------------------------------------------------

def summarize_counts(title: str, summary: Dict[str, Any]) -> str:
    """
    Return a formatted, human-readable summary string.
    Example:
        summarize_counts("Digest Summary", {"Files": 12, "Skipped": 3})
    """
    lines = [f"\n===== {title.upper()} ====="]
    for key, val in summary.items():
        lines.append(f"{key}: {val}")
    lines.append("=====================\n")
    return "\n".join(lines)


