"""
Shared configuration loading and validation helpers.

Provides:
 - `load_config`: basic YAML loader
 - `load_task_config`: validated configuration for a given task
 - `cli_main`: command-line entry point exposed as the `folder-audit-config` script
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional

from common.base.file_io import read_yaml


ConfigDict = Dict[str, Any]

DEFAULT_CONFIG_FILENAME = "config.yaml"
LOGGING_SECTION_KEY = "logging"
TASKS_SECTION_KEY = "tasks"
CONFIGS_DIR = Path(__file__).resolve().parents[2] / "configs"


TASK_SCHEMAS: Dict[str, Dict[str, Iterable[str]]] = {
    "file_digest": {
        "required": [],
        "optional": ["source", "destination", "algorithm", "strict", "workers"],
    },
    "name_audit": {
        "required": [],
        "optional": ["path", "include_extension", "save", "save_path"],
    },
}

FIELD_ALIASES = {
    "root": "source",
    "output_dir": "destination",
    "include_extensions": "include_extension",
}

SINGLE_PATH_FIELDS = {"source", "destination", "path", "save_path"}
BOOLEAN_FIELDS = {"strict", "include_extension", "save"}
INTEGER_FIELDS = {"workers"}
UPPERCASE_FIELDS = {"algorithm"}
LOGGING_ALLOWED_KEYS = {"level", "use_rich", "log_dir", "file_prefix"}

YES_VALUES = {"1", "true", "yes", "y", "on"}
NO_VALUES = {"0", "false", "no", "n", "off"}


def load_config(path: str | Path | None) -> Mapping[str, Any] | Dict[str, Any]:
    if not path:
        return {}

    cfg_path = Path(path).expanduser()
    if not cfg_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {cfg_path}")

    data = read_yaml(cfg_path)
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ValueError(f"Configuration root must be a mapping in {cfg_path}")

    return data or {}


def default_config_path() -> Optional[Path]:
    """Repository-level ``configs/config.yaml`` when it exists."""
    candidate = CONFIGS_DIR / DEFAULT_CONFIG_FILENAME
    return candidate if candidate.exists() else None


def parse_bool(value: object, key: str = "value", source: str | Path = "arguments") -> bool:
    """Interpret yes/no style values; raises ValueError for anything else."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    text = str(value).strip().lower()
    if text in YES_VALUES:
        return True
    if text in NO_VALUES:
        return False
    raise ValueError(f"'{key}' in {source} must be true or false, got {value!r}.")


def load_task_config(task: str, config_path: str | Path | None = None) -> ConfigDict:
    """
    Load and validate the ``tasks.<task>`` section of a YAML config.

    Returns an empty task payload (plus ``__task__``) when no config path is
    given and no default config file exists.
    """
    if task not in TASK_SCHEMAS:
        raise ValueError(f"Unknown task '{task}'. Expected one of: {', '.join(sorted(TASK_SCHEMAS))}")

    resolved_path = Path(config_path).expanduser() if config_path else default_config_path()
    if resolved_path is None:
        return {"__task__": task}

    root_config = dict(load_config(resolved_path))
    task_config_raw = _extract_task_config(root_config, task, resolved_path)
    task_logging_override: Dict[str, Any] = {}
    if "logging" in task_config_raw:
        logging_payload = task_config_raw.pop("logging")
        if not isinstance(logging_payload, Mapping):
            raise ValueError(
                f"Task '{task}' logging section must be a mapping in {resolved_path}"
            )
        task_logging_override = _validate_logging_keys(
            dict(logging_payload), f"Task '{task}' logging section", resolved_path
        )
    config = _apply_aliases(task_config_raw)

    schema = TASK_SCHEMAS[task]
    required = set(schema.get("required", []))
    optional = set(schema.get("optional", []))
    allowed_keys = required | optional

    missing = [key for key in required if not config.get(key)]
    if missing:
        raise ValueError(
            f"Configuration '{resolved_path}' missing required fields for task '{task}': {', '.join(missing)}"
        )

    unexpected = [key for key in config if key not in allowed_keys]
    if unexpected:
        raise ValueError(
            f"Configuration '{resolved_path}' contains unsupported keys for task '{task}': {', '.join(sorted(unexpected))}"
        )

    normalized: ConfigDict = {}
    for key, value in config.items():
        if value is None or value == "":
            continue
        if key in SINGLE_PATH_FIELDS:
            normalized[key] = _normalize_single_path(value, resolved_path)
        elif key in BOOLEAN_FIELDS:
            normalized[key] = parse_bool(value, key, resolved_path)
        elif key in INTEGER_FIELDS:
            normalized[key] = _coerce_int(value, key, resolved_path)
        elif key in UPPERCASE_FIELDS:
            normalized[key] = str(value).strip().upper()
        else:
            normalized[key] = value

    normalized["__task__"] = task
    normalized["__config_path__"] = str(resolved_path)

    merged_logging = _extract_logging_settings(root_config, resolved_path)
    merged_logging.update(task_logging_override)
    merged_logging = _apply_logging_defaults(merged_logging, resolved_path)
    if merged_logging:
        normalized["__logging__"] = merged_logging
    return normalized


def _apply_aliases(config: Mapping[str, Any]) -> ConfigDict:
    result: ConfigDict = {}
    for key, value in config.items():
        canonical = FIELD_ALIASES.get(key, key)
        result[canonical] = value
    return result


def _normalize_single_path(value: Any, config_path: Path) -> str:
    # Relative paths are anchored at the config file's directory.
    candidate = Path(str(value)).expanduser()
    if not candidate.is_absolute():
        candidate = config_path.expanduser().resolve().parent / candidate
    return str(candidate)


def _coerce_int(value: Any, field: str, config_path: Path) -> int:
    if isinstance(value, bool):
        raise ValueError(
            f"Configuration '{config_path}' field '{field}' must be an integer."
        )
    try:
        return int(str(value).strip())
    except (TypeError, ValueError) as exc:
        raise ValueError(
            f"Configuration '{config_path}' field '{field}' must be an integer."
        ) from exc


def _extract_task_config(root: Mapping[str, Any], task: str, config_path: Path) -> ConfigDict:
    tasks_section = root.get(TASKS_SECTION_KEY) or {}
    if not isinstance(tasks_section, Mapping):
        raise ValueError(f"'tasks' section must be a mapping in {config_path}")
    task_payload = tasks_section.get(task) or {}
    if not isinstance(task_payload, Mapping):
        raise ValueError(f"Task '{task}' entry must be a mapping in {config_path}")
    return dict(task_payload)


def _validate_logging_keys(section: Dict[str, Any], label: str, config_path: Path) -> Dict[str, Any]:
    invalid = [key for key in section if key not in LOGGING_ALLOWED_KEYS]
    if invalid:
        raise ValueError(
            f"{label} contains unsupported keys in {config_path}: {', '.join(sorted(invalid))}"
        )
    return section


def _extract_logging_settings(root: Mapping[str, Any], config_path: Optional[Path]) -> Dict[str, Any]:
    section = root.get(LOGGING_SECTION_KEY, {})
    if not isinstance(section, Mapping):
        return {}
    return _validate_logging_keys(dict(section), "'logging' section", config_path or Path("."))


def _apply_logging_defaults(logging_cfg: Dict[str, Any], config_path: Path) -> Dict[str, Any]:
    cfg = dict(logging_cfg)
    log_dir_value = cfg.get("log_dir")
    if log_dir_value:
        cfg["log_dir"] = str(Path(_normalize_single_path(log_dir_value, config_path)).resolve())
    return cfg


def cli_main(argv: Optional[Iterable[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Load and validate folder audit YAML configs.")
    parser.add_argument("task", help=f"Task identifier ({', '.join(sorted(TASK_SCHEMAS))})")
    parser.add_argument("config_path", nargs="?", help="Path to YAML file (defaults to configs/config.yaml)")
    args = parser.parse_args(list(argv) if argv is not None else None)

    config = load_task_config(args.task, args.config_path)
    print(json.dumps(config, indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    raise SystemExit(cli_main())
