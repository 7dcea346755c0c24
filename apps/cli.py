"""Command-line entry points for the folder audit tools.

Installed as ``console_scripts`` (``file-digest`` and ``name-audit``) so they
run from any directory, with shell auto-completion via ``argcomplete``.
Command-line flags override values from the optional YAML config.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Optional

import argcomplete
from rich.console import Console
from rich.markup import escape

from audit.digest import ALGORITHMS, DEFAULT_ALGORITHM, export_digests
from audit.names import audit_folder, write_audit_reports
from common.base.errors import AuditError, InvalidInput
from common.base.fs import require_directory
from common.base.logging import get_logger, normalize_use_rich, setup_logging
from common.shared.loader import load_task_config, parse_bool

log = get_logger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _enable_autocomplete(parser: argparse.ArgumentParser) -> None:
    argcomplete.autocomplete(parser)


def _flag(value: Any, option: str) -> bool:
    try:
        return parse_bool(value)
    except ValueError as exc:
        raise InvalidInput(f"{option} must be true or false, got {value!r}") from exc


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", "-c", help="Path to configuration YAML (defaults to repo config when present).")
    parser.add_argument("--log-level", choices=LOG_LEVELS, type=str.upper, help="Logging verbosity (default: INFO).")
    parser.add_argument("--log-dir", help="Write a per-run log file into this directory.")
    parser.add_argument("--no-progress", action="store_true", help="Disable the progress bar.")


def _configure_logging(logging_cfg: Dict[str, Any], args: argparse.Namespace) -> None:
    setup_logging(
        level=args.log_level or logging_cfg.get("level"),
        use_rich=normalize_use_rich(logging_cfg.get("use_rich")),
        log_dir=args.log_dir or logging_cfg.get("log_dir"),
        file_prefix=logging_cfg.get("file_prefix"),
    )


def report_failure(message: str) -> None:
    """Print a single red diagnostic line to stderr."""
    Console(stderr=True, highlight=False, soft_wrap=True).print(f"[bold red]❌ {escape(message)}[/bold red]")


def _run_task(
    task: str,
    args: argparse.Namespace,
    body: Callable[[Dict[str, Any]], int],
) -> int:
    """Load config, configure logging, and run ``body`` with unified error handling."""
    try:
        cfg: Dict[str, Any] = dict(load_task_config(task, args.config))
    except (OSError, ValueError) as exc:
        report_failure(f"Invalid configuration: {exc}")
        return 1

    _configure_logging(cfg.pop("__logging__", {}) or {}, args)
    log.debug("Arguments: %s", args)

    try:
        return body(cfg)
    except KeyboardInterrupt:
        log.warning("⚠️ Operation cancelled by user.")
        return 130
    except AuditError as exc:
        report_failure(str(exc))
        return 1
    except Exception as exc:
        log.debug("Unexpected error: %s", exc, exc_info=True)
        report_failure(f"Unexpected error: {exc}")
        return 1


def _pick(cli_value: Any, cfg: Dict[str, Any], key: str, default: Any = None) -> Any:
    if cli_value is not None:
        return cli_value
    return cfg.get(key, default)


def _as_path(value: Any) -> Optional[Path]:
    if value is None or not str(value).strip():
        return None
    return Path(str(value)).expanduser()


# ----------------------------------------------------------------------
# DIGEST EXPORTER
# ----------------------------------------------------------------------

def build_digest_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="file-digest",
        description="Hash every file in a folder tree and export the digests to a CSV manifest.",
    )
    parser.add_argument("--source", "-s", help="Folder to hash recursively.")
    parser.add_argument("--destination", "-d", help="Existing folder that receives the CSV manifest.")
    parser.add_argument(
        "--algorithm",
        "-a",
        metavar="ALGORITHM",
        help=f"Digest algorithm: {', '.join(ALGORITHMS)} (default: {DEFAULT_ALGORITHM}).",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Abort on the first unreadable file instead of skipping it.",
    )
    parser.add_argument("--workers", "-w", type=int, help="Hash with N worker threads (default: 1).")
    _add_common_arguments(parser)
    return parser


def cli_file_digest(argv: Optional[Iterable[str]] = None) -> int:
    parser = build_digest_parser()
    _enable_autocomplete(parser)
    args = parser.parse_args(list(argv) if argv is not None else None)

    def _body(cfg: Dict[str, Any]) -> int:
        source = _as_path(_pick(args.source, cfg, "source"))
        destination = _as_path(_pick(args.destination, cfg, "destination"))
        if source is None:
            raise InvalidInput("Source folder is required (--source)")
        if destination is None:
            raise InvalidInput("Destination folder is required (--destination)")

        run = export_digests(
            source,
            destination,
            _pick(args.algorithm, cfg, "algorithm", DEFAULT_ALGORITHM),
            strict=bool(_pick(args.strict, cfg, "strict", False)),
            workers=int(_pick(args.workers, cfg, "workers", 1)),
            include_progress=not args.no_progress,
        )
        print(run.output_path)
        if not run.ok:
            report_failure(f"{len(run.failures)} file(s) could not be read and were skipped")
            return 1
        return 0

    return _run_task("file_digest", args, _body)


# ----------------------------------------------------------------------
# NAME AUDITOR
# ----------------------------------------------------------------------

def build_name_audit_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="name-audit",
        description="Report character frequencies in file names and flag non-ASCII or extra-dot names.",
    )
    parser.add_argument("--path", "-p", help="Folder whose file names are audited recursively.")
    parser.add_argument(
        "--include-extension",
        metavar="{true,false}",
        help="Analyze names with their extension (default: true).",
    )
    parser.add_argument(
        "--save",
        nargs="?",
        const="true",
        metavar="BOOL",
        help="Write the four CSV reports (default: false).",
    )
    parser.add_argument("--save-path", help="Existing folder for the CSV reports; required with --save.")
    _add_common_arguments(parser)
    return parser


def cli_name_audit(argv: Optional[Iterable[str]] = None) -> int:
    parser = build_name_audit_parser()
    _enable_autocomplete(parser)
    args = parser.parse_args(list(argv) if argv is not None else None)

    def _body(cfg: Dict[str, Any]) -> int:
        root = _as_path(_pick(args.path, cfg, "path"))
        if root is None:
            raise InvalidInput("Folder path is required (--path)")
        include_extension = _flag(_pick(args.include_extension, cfg, "include_extension", True), "--include-extension")
        save = _flag(_pick(args.save, cfg, "save", False), "--save")
        save_path = _as_path(_pick(args.save_path, cfg, "save_path"))

        root = require_directory(root, "Folder")
        if save:
            if save_path is None:
                raise InvalidInput("--save-path is required when --save is true")
            save_path = require_directory(save_path, "Save folder")

        result = audit_folder(root, include_extension, include_progress=not args.no_progress)
        if not save:
            return 0

        reports = write_audit_reports(result, root, save_path)
        for path in reports.written.values():
            print(path)
        if not reports.ok:
            report_failure(f"{len(reports.errors)} of 4 reports could not be written")
            return 1
        return 0

    return _run_task("name_audit", args, _body)

