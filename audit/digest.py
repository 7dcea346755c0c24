"""
audit.digest

Digest exporter: hashes every file under a source folder and writes the
results to a timestamped CSV manifest in a destination folder.

Output file name:
    <destination>/<source folder>_<YYYYMMDDHHMMSS>_<algorithm>_digest.csv

Columns: Algorithm, Hash (uppercase hex), Path.
"""

from __future__ import annotations

import hashlib
from collections import deque
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Deque, Dict, Iterable, Iterator, List, Optional, Tuple, Union

from common.base.errors import InvalidInput, UnreadableFile, UnsupportedAlgorithm, WriteConflict
from common.base.file_io import iter_chunks
from common.base.fs import folder_label, human_size, require_directory
from common.base.logging import get_logger
from common.shared.report import ColumnSpec, run_timestamp, summarize_counts, timestamped_filename, write_csv
from common.shared.utils import with_progress
from common.utils.fs_utils import FileEntry, iter_file_entries

log = get_logger(__name__)

# Display name -> hashlib constructor name.
ALGORITHMS: Dict[str, str] = {
    "SHA1": "sha1",
    "SHA256": "sha256",
    "SHA384": "sha384",
    "SHA512": "sha512",
    "MD5": "md5",
}
DEFAULT_ALGORITHM = "MD5"
REPORT_SUFFIX = "digest"

DIGEST_COLUMNS: List[ColumnSpec] = [
    ColumnSpec("algorithm", "Algorithm"),
    ColumnSpec("hash", "Hash"),
    ColumnSpec("path", "Path"),
]


@dataclass(frozen=True)
class DigestRecord:
    algorithm: str
    hash: str
    path: Path

    def as_row(self) -> Dict[str, str]:
        return {"algorithm": self.algorithm, "hash": self.hash, "path": str(self.path)}


@dataclass(frozen=True)
class DigestFailure:
    path: Path
    error: str


@dataclass
class DigestRun:
    algorithm: str
    source: Path
    output_path: Path
    records: List[DigestRecord] = field(default_factory=list)
    failures: List[DigestFailure] = field(default_factory=list)
    bytes_hashed: int = 0

    @property
    def ok(self) -> bool:
        return not self.failures


def normalize_algorithm(name: Optional[str]) -> str:
    """Return the canonical display name (``"sha256"`` -> ``"SHA256"``)."""
    if name is None or not str(name).strip():
        return DEFAULT_ALGORITHM
    candidate = str(name).strip().upper().replace("-", "")
    if candidate not in ALGORITHMS:
        raise UnsupportedAlgorithm(
            f"Unsupported algorithm '{name}'. Expected one of: {', '.join(ALGORITHMS)}"
        )
    return candidate


def compute_digest(path: Path | str, algorithm: str = DEFAULT_ALGORITHM) -> str:
    """
    Hash the full content of ``path`` and return it as uppercase hex.

    Raises:
        UnsupportedAlgorithm: ``algorithm`` is not in ALGORITHMS.
        UnreadableFile: the file is locked, missing or permission is denied.
    """
    hasher = hashlib.new(ALGORITHMS[normalize_algorithm(algorithm)])
    try:
        for chunk in iter_chunks(path):
            hasher.update(chunk)
    except OSError as exc:
        raise UnreadableFile(path, exc.strerror or str(exc)) from exc
    return hasher.hexdigest().upper()


def digest_filename(
    source: Path,
    destination: Path,
    algorithm: str,
    moment: Optional[datetime] = None,
) -> Path:
    return timestamped_filename(
        [folder_label(source), run_timestamp(moment), normalize_algorithm(algorithm).lower(), REPORT_SUFFIX],
        destination,
    )


def _hash_entry(entry: FileEntry, algorithm: str) -> Union[DigestRecord, UnreadableFile]:
    try:
        return DigestRecord(algorithm=algorithm, hash=compute_digest(entry.path, algorithm), path=entry.path)
    except UnreadableFile as exc:
        return exc


def _iter_results(
    entries: Iterable[FileEntry],
    algorithm: str,
    workers: int,
) -> Iterator[Tuple[FileEntry, Union[DigestRecord, UnreadableFile]]]:
    if workers <= 1:
        for entry in entries:
            yield entry, _hash_entry(entry, algorithm)
        return

    # At most `window` files are queued; results are yielded in discovery order.
    window = workers * 2
    pending: Deque[Tuple[FileEntry, Future[Union[DigestRecord, UnreadableFile]]]] = deque()
    executor = ThreadPoolExecutor(max_workers=workers)
    try:
        for entry in entries:
            pending.append((entry, executor.submit(_hash_entry, entry, algorithm)))
            if len(pending) >= window:
                queued, future = pending.popleft()
                yield queued, future.result()
        while pending:
            queued, future = pending.popleft()
            yield queued, future.result()
    finally:
        for _, future in pending:
            future.cancel()
        executor.shutdown(wait=True)


def hash_entries(
    entries: Iterable[FileEntry],
    algorithm: str = DEFAULT_ALGORITHM,
    *,
    strict: bool = False,
    workers: int = 1,
    include_progress: bool = False,
) -> Tuple[List[DigestRecord], List[DigestFailure]]:
    """
    Hash every entry, returning records in discovery order plus skipped files.

    With ``strict`` the first unreadable file raises UnreadableFile instead of
    being recorded as a failure.
    """
    algorithm = normalize_algorithm(algorithm)
    records: List[DigestRecord] = []
    failures: List[DigestFailure] = []

    source = _iter_results(entries, algorithm, workers)
    try:
        for entry, result in with_progress(source, include_progress, f"Hashing ({algorithm})"):
            if isinstance(result, UnreadableFile):
                if strict:
                    raise result
                log.warning("⚠️ Skipping unreadable file %s: %s", entry.path, result.reason)
                failures.append(DigestFailure(path=entry.path, error=result.reason))
                continue
            log.debug("%s %s", result.hash, entry.path)
            records.append(result)
    finally:
        # Stops the worker pool as soon as a strict failure propagates.
        source.close()
    return records, failures


def export_digests(
    source: Path | str,
    destination: Path | str,
    algorithm: Optional[str] = DEFAULT_ALGORITHM,
    *,
    strict: bool = False,
    workers: int = 1,
    include_progress: bool = True,
    moment: Optional[datetime] = None,
) -> DigestRun:
    """
    Hash every file under ``source`` and write the manifest into ``destination``.

    All inputs are validated before any file is read. The manifest is never
    overwritten: an existing file with the computed name raises WriteConflict.

    Args:
        source: Folder to hash (recursively).
        destination: Existing folder that receives the CSV.
        algorithm: One of ALGORITHMS (case-insensitive); MD5 when None.
        strict: Abort on the first unreadable file instead of skipping it.
        workers: Thread pool size for hashing; 1 hashes sequentially.
        include_progress: Display a tqdm progress bar.
        moment: Timestamp used in the output name (defaults to now).

    Returns:
        DigestRun with the written path, records and skipped files.
    """
    resolved_algorithm = normalize_algorithm(algorithm)
    source_dir = require_directory(source, "Source folder")
    destination_dir = require_directory(destination, "Destination folder")
    if workers < 1:
        raise InvalidInput(f"workers must be at least 1, got {workers}")

    output_path = digest_filename(source_dir, destination_dir, resolved_algorithm, moment)
    if output_path.exists():
        raise WriteConflict(output_path)

    log.info("🔍 Hashing files under %s with %s", source_dir, resolved_algorithm)
    records, failures = hash_entries(
        iter_file_entries(source_dir),
        resolved_algorithm,
        strict=strict,
        workers=workers,
        include_progress=include_progress,
    )

    run = DigestRun(
        algorithm=resolved_algorithm,
        source=source_dir,
        output_path=output_path,
        records=records,
        failures=failures,
        bytes_hashed=sum(_size_of(record.path) for record in records),
    )
    write_csv((record.as_row() for record in records), output_path, DIGEST_COLUMNS)
    log.info("📄 CSV written to: %s", output_path)

    log.info(
        summarize_counts(
            "Digest Summary",
            {
                "Algorithm": resolved_algorithm,
                "Files hashed": len(records),
                "Files skipped": len(failures),
                "Data hashed": human_size(run.bytes_hashed),
                "Manifest": output_path,
            },
        )
    )
    for failure in failures:
        log.error("❌ %s: %s", failure.path, failure.error)
    return run


def _size_of(path: Path) -> int:
    try:
        return path.stat().st_size
    except OSError:
        return 0
