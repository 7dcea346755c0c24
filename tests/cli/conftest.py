from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from common.base.logging import ROOT_LOGGER_NAME
from common.shared import loader


@pytest.fixture(autouse=True)
def isolated_cli(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Ignore any repository config and drop CLI log handlers after each test."""
    monkeypatch.setattr(loader, "CONFIGS_DIR", tmp_path / "no-configs")
    yield
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger._initialized = False  # type: ignore[attr-defined]
