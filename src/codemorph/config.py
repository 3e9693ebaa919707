"""TOML configuration: timing constants and diff scoring knobs.

A ``codemorph.toml`` looks like::

    [timings]
    positioning = 600
    pause = 0
    stagger = 100
    new_easing = "linear"

    [diff]
    accept_threshold = 0.4
"""

from __future__ import annotations

import dataclasses
import tomllib
from pathlib import Path
from typing import Any

from codemorph.diff import DiffConfig
from codemorph.errors import ConfigError
from codemorph.timing import Timings

CONFIG_FILENAME = "codemorph.toml"


def load_config(config_path: Path | None, search_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict when none is present."""
    path = config_path if config_path is not None else search_dir / CONFIG_FILENAME

    if not path.is_file():
        if config_path is not None:
            raise ConfigError("config file not found", path)
        return {}

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"invalid TOML: {exc}", path) from exc


def _coerce(table: str, cls: type, values: Any, path: Path | None) -> Any:
    """Build dataclass *cls* from a TOML table, checking names and types."""
    if values is None:
        return cls()
    if not isinstance(values, dict):
        raise ConfigError(f"'{table}' must be a table", path, table)

    fields = {f.name: f for f in dataclasses.fields(cls)}
    kwargs: dict[str, Any] = {}
    for name, value in values.items():
        key = f"{table}.{name}"
        if name not in fields:
            raise ConfigError(f"unknown setting '{name}'", path, key)
        default = fields[name].default
        if isinstance(default, str):
            if not isinstance(value, str):
                raise ConfigError("expected a string", path, key)
            kwargs[name] = value
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError("expected a number", path, key)
        if value < 0:
            raise ConfigError("must not be negative", path, key)
        kwargs[name] = float(value)
    return cls(**kwargs)


def timings_from_config(config: dict[str, Any], path: Path | None = None) -> Timings:
    return _coerce("timings", Timings, config.get("timings"), path)


def diff_config_from_config(config: dict[str, Any], path: Path | None = None) -> DiffConfig:
    return _coerce("diff", DiffConfig, config.get("diff"), path)
