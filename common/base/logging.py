"""
common.base.logging

Logging setup for the folder audit tools.

One ``audit`` logger hierarchy is shared by every module:
 - console output through Rich (emoji level column) or plain ANSI colours
 - an optional per-run log file when a log directory is configured
 - level and Rich toggle driven by the ``logging`` config section
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, NamedTuple, Optional, cast

from rich.logging import RichHandler
from rich.text import Text

ROOT_LOGGER_NAME = "audit"
ANSI_RESET = "\033[0m"

CONSOLE_FORMAT = "%(asctime)s %(level_display)s %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s %(level_emoji)s [%(levelname)s] %(name)s: %(message)s"


class LevelStyle(NamedTuple):
    emoji: str
    ansi: str
    rich: str


LEVEL_STYLES: Dict[int, LevelStyle] = {
    logging.DEBUG: LevelStyle("🐛", "\033[36m", "bright_cyan"),
    logging.INFO: LevelStyle("ℹ️", "\033[32m", "green"),
    logging.WARNING: LevelStyle("⚠️", "\033[33m", "yellow"),
    logging.ERROR: LevelStyle("❌", "\033[31m", "red"),
    logging.CRITICAL: LevelStyle("💥", "\033[95m", "bold magenta"),
}
DEFAULT_STYLE = LEVEL_STYLES[logging.INFO]

_ORIGINAL_RECORD_FACTORY = logging.getLogRecordFactory()


def _style_for(levelno: int) -> LevelStyle:
    return LEVEL_STYLES.get(levelno, DEFAULT_STYLE)


def _audit_record_factory(*args: Any, **kwargs: Any) -> logging.LogRecord:
    # Every record carries its emoji and coloured label, so plain
    # logging.Formatter instances can render them.
    record = _ORIGINAL_RECORD_FACTORY(*args, **kwargs)
    style = _style_for(record.levelno)
    record.level_emoji = style.emoji  # type: ignore[attr-defined]
    record.level_display = f"{style.ansi}{style.emoji} {record.levelname}{ANSI_RESET}"  # type: ignore[attr-defined]
    return record


logging.setLogRecordFactory(_audit_record_factory)


class AuditRichHandler(RichHandler):
    """Rich console handler whose level column starts with the level emoji."""

    def get_level_text(self, record: logging.LogRecord) -> Text:
        style = _style_for(record.levelno)
        return Text.assemble((f"{style.emoji} ", style.rich), (record.levelname, style.rich))


class AuditLogger(logging.Logger):
    """Logger class for the ``audit`` hierarchy."""

    rich_enabled: bool = False
    log_file: Optional[Path] = None


def _normalize_level(value: Any) -> str:
    if isinstance(value, str):
        candidate = value.strip().upper()
        if candidate in logging._nameToLevel:  # type: ignore[attr-defined]
            return candidate
    elif isinstance(value, int):
        label = logging.getLevelName(value)
        if isinstance(label, str) and not label.startswith("Level "):
            return label
    return "INFO"


def normalize_use_rich(value: Any) -> Optional[bool]:
    """Map config values (bool, 'auto', 'yes', ...) to True/False/None."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1", "on"}:
            return True
        if lowered in {"false", "no", "0", "off"}:
            return False
    return None


def _console_handler(use_rich: bool) -> logging.Handler:
    if use_rich:
        return AuditRichHandler(
            rich_tracebacks=True,
            markup=False,
            show_path=False,
            log_time_format="[%X]",
        )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=CONSOLE_FORMAT, datefmt="%H:%M:%S"))
    return handler


def _file_handler(log_dir: Path | str, prefix: str) -> logging.FileHandler:
    directory = Path(log_dir).expanduser()
    directory.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    handler = logging.FileHandler(directory / f"{prefix}_{stamp}.log", mode="a", encoding="utf-8")
    handler.setFormatter(logging.Formatter(fmt=FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logging(
    level: str | int | None = None,
    use_rich: Optional[bool] = None,
    log_dir: Optional[Path | str] = None,
    file_prefix: Optional[str] = None,
) -> AuditLogger:
    """
    Configure and return the shared ``audit`` logger.

    Calling it again replaces the handlers installed by the previous call.

    Args:
        level: Desired logging level (INFO if unset or unknown).
        use_rich: Force-enable or disable the Rich handler. None enables Rich
            only when stdout is a terminal.
        log_dir: Directory for a per-run log file. No file is written when unset.
        file_prefix: Prefix for generated log filenames.
    """
    resolved_level = _normalize_level(level)
    rich_enabled = sys.stdout.isatty() if use_rich is None else bool(use_rich)

    logging.setLoggerClass(AuditLogger)
    logger = cast(AuditLogger, logging.getLogger(ROOT_LOGGER_NAME))
    logger.setLevel(resolved_level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.addHandler(_console_handler(rich_enabled))
    logger.rich_enabled = rich_enabled

    logger.log_file = None
    if log_dir:
        file_handler = _file_handler(log_dir, file_prefix or ROOT_LOGGER_NAME)
        logger.addHandler(file_handler)
        logger.log_file = Path(file_handler.baseFilename)

    logger.propagate = False
    logger._initialized = True  # type: ignore[attr-defined]
    logger.debug("Logger initialized at level %s (Rich=%s)", resolved_level, "ON" if rich_enabled else "OFF")
    if logger.log_file is not None:
        logger.info("📄 Log file created at: %s", logger.log_file)
    return logger


def get_logger(name: str = ROOT_LOGGER_NAME) -> AuditLogger:
    """Retrieve a namespaced audit logger (configured later via setup_logging)."""
    logging.setLoggerClass(AuditLogger)
    base = cast(AuditLogger, logging.getLogger(ROOT_LOGGER_NAME))
    if not getattr(base, "_initialized", False) and not base.handlers:
        base.addHandler(logging.NullHandler())

    if not name or name == ROOT_LOGGER_NAME:
        return base
    if name.startswith(f"{ROOT_LOGGER_NAME}."):
        return cast(AuditLogger, logging.getLogger(name))
    return cast(AuditLogger, base.getChild(name))
