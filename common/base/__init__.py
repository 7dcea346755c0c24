"""Low-level shared utilities for the folder audit tools."""

from .errors import (
    AuditError,
    DestinationUnwritable,
    InvalidInput,
    PathNotFound,
    UnreadableFile,
    UnsupportedAlgorithm,
    WriteConflict,
)
from .logging import AuditLogger, get_logger, setup_logging

__all__ = [
    "get_logger",
    "setup_logging",
    "AuditLogger",
    "AuditError",
    "DestinationUnwritable",
    "InvalidInput",
    "PathNotFound",
    "UnreadableFile",
    "UnsupportedAlgorithm",
    "WriteConflict",
]
