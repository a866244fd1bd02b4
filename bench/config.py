"""
Persisted reporter settings.

Lives in ``~/.neobench/config.json``::

    {
      "output": "auto",          # auto | interactive | csv
      "records_file": ""         # record file used when the CLI gets none
    }

Invalid values never reach the reporter factory: they are logged and
replaced by their defaults when the file is loaded.
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict

from loguru import logger

from .constants import APP_DIR_NAME, DEFAULT_OUTPUT_FORMAT, OUTPUT_FORMATS

_CONFIG_DIR = os.path.join(Path.home(), APP_DIR_NAME)
_CONFIG_FILE = "config.json"


def _config_path() -> str:
    return os.path.join(_CONFIG_DIR, _CONFIG_FILE)


def config_path() -> str:
    """Return the config file path (for display purposes)."""
    return _config_path()


DEFAULTS: Dict[str, Any] = {
    "output": DEFAULT_OUTPUT_FORMAT,
    "records_file": "",
}


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def check_output_format(name: Any) -> str:
    """Return *name* if it is a known output format, else raise ``ValueError``."""
    if name not in OUTPUT_FORMATS:
        raise ValueError(
            f"unknown output format {name!r}, choose one of {', '.join(OUTPUT_FORMATS)}"
        )
    return name


def _sanitise(raw: Dict[str, Any], path: str) -> Dict[str, Any]:
    config = dict(DEFAULTS)
    config.update(raw)

    try:
        check_output_format(config["output"])
    except ValueError as exc:
        logger.warning("{}: {}; using {!r}", path, exc, DEFAULT_OUTPUT_FORMAT)
        config["output"] = DEFAULT_OUTPUT_FORMAT

    if not isinstance(config["records_file"], str):
        logger.warning("{}: records_file must be a path string; ignoring it", path)
        config["records_file"] = DEFAULTS["records_file"]

    return config


# ---------------------------------------------------------------------------
# Read / Write
# ---------------------------------------------------------------------------

def load_config() -> Dict[str, Any]:
    """Settings from disk, with defaults for missing or invalid keys."""
    path = _config_path()
    if not os.path.isfile(path):
        return dict(DEFAULTS)

    try:
        with open(path, encoding="utf-8") as fh:
            raw = json.load(fh)
    except (ValueError, OSError) as exc:
        logger.warning("Ignoring unreadable config {}: {}", path, exc)
        return dict(DEFAULTS)

    if not isinstance(raw, dict):
        logger.warning("Ignoring config {}: top level is not an object", path)
        return dict(DEFAULTS)

    return _sanitise(raw, path)


def save_config(config: Dict[str, Any]) -> str:
    """Write *config* atomically (write-tmp then rename).  Returns the path."""
    path = _config_path()
    os.makedirs(os.path.dirname(path), exist_ok=True)
    tmp = os.path.join(os.path.dirname(path), f".tmp_{os.path.basename(path)}")

    try:
        with open(tmp, "w", encoding="utf-8") as fh:
            json.dump(config, fh, indent=2, ensure_ascii=False)
        os.replace(tmp, path)
    except OSError:
        if os.path.exists(tmp):
            os.unlink(tmp)
        raise

    return path


def set_default_format(name: str) -> str:
    """Persist *name* as the default output format.  Returns the config path."""
    config = load_config()
    config["output"] = check_output_format(name)
    return save_config(config)
