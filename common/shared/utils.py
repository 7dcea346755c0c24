"""
common.shared.utils

Common reusable utilities shared across the folder audit tools.
"""

from __future__ import annotations

from typing import Any, Iterable, Iterator, Optional

from tqdm import tqdm


# ----------------------------------------------------------------------
# PROGRESS HELPERS
# ----------------------------------------------------------------------

class Progress:
    """
    Simple wrapper for tqdm progress bars that automatically closes
    on completion or interruption.
    """

    def __init__(
        self,
        iterable: Iterable[Any],
        desc: str = "Processing",
        total: Optional[int] = None,
        unit: str = "file",
    ):
        self._tqdm = tqdm(
            iterable,
            desc=desc,
            total=total,
            unit=unit,
            ncols=100,
            leave=False,
            dynamic_ncols=True,
        )

    def __iter__(self) -> Iterator[Any]:
        try:
            for item in self._tqdm:
                yield item
        finally:
            self._tqdm.close()


def with_progress(
    iterable: Iterable[Any],
    enabled: bool,
    desc: str,
    total: Optional[int] = None,
) -> Iterable[Any]:
    """Wrap ``iterable`` in a progress bar only when ``enabled``."""
    return Progress(iterable, desc=desc, total=total) if enabled else iterable
