from __future__ import annotations

import csv
from pathlib import Path
from typing import Callable, Dict, List

import pytest

Rows = List[Dict[str, str]]


@pytest.fixture
def csv_rows() -> Callable[[Path], Rows]:
    """Read a report written by ``write_csv`` back into dict rows keyed by header."""

    def _read(path: Path) -> Rows:
        with Path(path).open("r", encoding="utf-8", newline="") as handle:
            return [dict(row) for row in csv.DictReader(handle)]

    return _read
