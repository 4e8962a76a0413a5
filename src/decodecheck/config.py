"""
TOML-based config file loading for decodecheck.

The nearest `.decodecheck.toml`, `decodecheck.toml`, or `pyproject.toml` with a
`[tool.decodecheck]` table, searching upward from the current directory, supplies
defaults for the CLI flags. Keys are the flag names without leading dashes:

    paths = ["live", "modules"]
    extend-exclude-dirs = ["vendor"]
    max-open = 8

Explicit CLI flags > config file > built-in defaults.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, TypeVar

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]


@dataclass
class DecodecheckConfig:
    """
    Settings read from a config file. `None` means the key was absent, so the
    CLI default (or an explicit flag) stays in effect.
    """

    paths: list[str] | None = None
    match_patterns: list[str] | None = None
    extend_match_patterns: list[str] | None = None
    exclude_dirs: list[str] | None = None
    extend_exclude_dirs: list[str] | None = None
    max_open: int | None = None


_CONFIG_FILENAMES = (".decodecheck.toml", "decodecheck.toml", "pyproject.toml")

_INT_FIELDS = {"max_open"}
_LIST_FIELDS = {f.name for f in fields(DecodecheckConfig)} - _INT_FIELDS


def _tool_table(pyproject: Path) -> dict[str, Any] | None:
    """The `[tool.decodecheck]` table of a pyproject.toml, if present."""
    data = tomllib.loads(pyproject.read_text())
    return data.get("tool", {}).get("decodecheck")


def find_config_file(start_dir: Path) -> Path | None:
    """
    Nearest config file at or above `start_dir`. Within one directory the order
    is `.decodecheck.toml`, `decodecheck.toml`, then `pyproject.toml`, which only
    counts if it has a `[tool.decodecheck]` table.
    """
    start = start_dir.resolve()
    for directory in (start, *start.parents):
        for filename in _CONFIG_FILENAMES:
            candidate = directory / filename
            if not candidate.is_file():
                continue
            if filename != "pyproject.toml":
                return candidate
            try:
                if _tool_table(candidate) is not None:
                    return candidate
            except (tomllib.TOMLDecodeError, OSError):
                # An unrelated broken pyproject.toml is not our config.
                continue
    return None


def load_config(config_path: Path) -> DecodecheckConfig:
    """
    Load a `DecodecheckConfig` from `config_path`. Unknown keys are ignored.

    Raises `tomllib.TOMLDecodeError` on malformed TOML and `ValueError` when a
    value has the wrong type.
    """
    if config_path.name == "pyproject.toml":
        data = _tool_table(config_path) or {}
    else:
        data = tomllib.loads(config_path.read_text())

    values: dict[str, Any] = {}
    for key, value in data.items():
        name = key.replace("-", "_")
        if name in _INT_FIELDS:
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValueError(f"{key} must be an integer, got: {value!r}")
        elif name in _LIST_FIELDS:
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ValueError(f"{key} must be a list of strings, got: {value!r}")
        else:
            continue
        values[name] = value

    return DecodecheckConfig(**values)


_T = TypeVar("_T")


def merge_cli_with_config(
    cli_opts: _T,
    config: DecodecheckConfig | None,
    explicit_flags: set[str],
) -> _T:
    """
    Copy every value set in `config` onto `cli_opts`, except for options named in
    `explicit_flags`, which were given on the command line.
    """
    if config is None:
        return cli_opts

    for cfg_field in fields(DecodecheckConfig):
        value = getattr(config, cfg_field.name)
        if value is None or cfg_field.name in explicit_flags:
            continue
        setattr(cli_opts, cfg_field.name, value)

    return cli_opts
