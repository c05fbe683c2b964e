"""Configuration loading for cmdwatch.

Loads settings from TOML config files with sensible defaults.
Search order: $CMDWATCH_CONFIG → ~/.config/cmdwatch/config.toml → defaults only.
"""

from __future__ import annotations

import logging
import os
import sys
import tomllib
from pathlib import Path
from typing import Any

from cmdwatch.options import MAX_INTERVAL

DEFAULT_CONFIG: dict[str, Any] = {
    "interval": 2,
    "time_format": "%a %b %e %H:%M:%S %Y",
    "log": {
        "file": "",
        "level": "INFO",
    },
}

ENV_VAR = "CMDWATCH_CONFIG"

_DEFAULT_PATH = Path.home() / ".config" / "cmdwatch" / "config.toml"


def _deep_merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Merge overlay into base. Nested dicts are merged at the first level only."""
    merged = {k: dict(v) if isinstance(v, dict) else v for k, v in base.items()}
    for key, value in overlay.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = {**merged[key], **value}
        else:
            merged[key] = value
    return merged


def _fail(message: str) -> SystemExit:
    print(f"cmdwatch: {message}", file=sys.stderr)
    return SystemExit(1)


def _validate(config: dict[str, Any], source: Path | str) -> dict[str, Any]:
    interval = config["interval"]
    # bool is an int subclass; `interval = true` is still a mistake
    if (
        isinstance(interval, bool)
        or not isinstance(interval, int)
        or not 0 < interval <= MAX_INTERVAL
    ):
        raise _fail(
            f"{source}: interval must be a positive integer up to {MAX_INTERVAL},"
            f" got {interval!r}"
        )
    if not isinstance(config["time_format"], str):
        raise _fail(f"{source}: time_format must be a string")
    if not isinstance(config["log"], dict):
        raise _fail(f"{source}: [log] must be a table")
    level = config["log"].get("level", "INFO")
    if not isinstance(logging.getLevelName(str(level).upper()), int):
        raise _fail(f"{source}: unknown log level {level!r}")
    return config


def resolve_path(environ: dict[str, str] | None = None) -> Path | None:
    """Return the explicit config path named by $CMDWATCH_CONFIG, if any."""
    env = os.environ if environ is None else environ
    value = env.get(ENV_VAR, "")
    return Path(value).expanduser() if value else None


def _read(path: Path) -> dict[str, Any]:
    """Parse *path* and return it merged over the defaults."""
    user_config = tomllib.loads(path.read_text(encoding="utf-8"))
    return _validate(_deep_merge(DEFAULT_CONFIG, user_config), path)


def load_config(path: Path | None = None) -> dict[str, Any]:
    """Load configuration, merging user TOML over defaults.

    An explicit file (from $CMDWATCH_CONFIG) must exist and parse. The file
    at ~/.config/cmdwatch/config.toml is optional, and a broken one is only
    warned about.

    Raises:
        SystemExit: On a missing or unparsable explicit file, or an invalid
                    value in any file.
    """
    if path is not None:
        if not path.is_file():
            raise _fail(f"config file not found: {path}")
        try:
            return _read(path)
        except tomllib.TOMLDecodeError as e:
            raise _fail(f"invalid TOML in {path}: {e}") from e

    if not _DEFAULT_PATH.is_file():
        return _deep_merge(DEFAULT_CONFIG, {})
    try:
        return _read(_DEFAULT_PATH)
    except tomllib.TOMLDecodeError:
        print(
            f"cmdwatch: warning: ignoring invalid TOML in {_DEFAULT_PATH}",
            file=sys.stderr,
        )
        return _deep_merge(DEFAULT_CONFIG, {})
