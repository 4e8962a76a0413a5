"""Tests for config file loading and merging."""

from __future__ import annotations

from pathlib import Path

import pytest

from decodecheck.cli import Options, _parse_args  # pyright: ignore[reportPrivateUsage]
from decodecheck.config import (
    DecodecheckConfig,
    find_config_file,
    load_config,
    merge_cli_with_config,
)


def _default_options() -> Options:
    options, _ = _parse_args([])
    return options


def test_find_config_decodecheck_toml(tmp_path: Path) -> None:
    config_file = tmp_path / "decodecheck.toml"
    config_file.write_text("max-open = 8\n")
    assert find_config_file(tmp_path) == config_file


def test_find_config_dot_decodecheck_toml_takes_precedence(tmp_path: Path) -> None:
    (tmp_path / "decodecheck.toml").write_text("max-open = 8\n")
    dot_config = tmp_path / ".decodecheck.toml"
    dot_config.write_text("max-open = 4\n")
    assert find_config_file(tmp_path) == dot_config


def test_find_config_pyproject_toml(tmp_path: Path) -> None:
    config_file = tmp_path / "pyproject.toml"
    config_file.write_text("[tool.decodecheck]\nmax-open = 8\n")
    assert find_config_file(tmp_path) == config_file


def test_find_config_pyproject_without_section_skipped(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text("[tool.ruff]\nline-length = 100\n")
    assert find_config_file(tmp_path) is None


def test_find_config_walks_up(tmp_path: Path) -> None:
    config_file = tmp_path / "decodecheck.toml"
    config_file.write_text("max-open = 8\n")
    subdir = tmp_path / "sub" / "deep"
    subdir.mkdir(parents=True)
    assert find_config_file(subdir) == config_file


def test_find_config_none_when_missing(tmp_path: Path) -> None:
    assert find_config_file(tmp_path) is None


def test_load_config_kebab_case(tmp_path: Path) -> None:
    config_file = tmp_path / "decodecheck.toml"
    config_file.write_text(
        'match-patterns = ["*.json", "*.yml"]\n'
        'extend-exclude-dirs = ["vendor"]\n'
        "max-open = 12\n"
    )
    config = load_config(config_file)
    assert config.match_patterns == ["*.json", "*.yml"]
    assert config.extend_exclude_dirs == ["vendor"]
    assert config.max_open == 12
    assert config.exclude_dirs is None


def test_load_config_ignores_tables(tmp_path: Path) -> None:
    config_file = tmp_path / "decodecheck.toml"
    config_file.write_text('paths = ["live"]\n[walk]\nmax-open = 12\n')
    config = load_config(config_file)
    assert config.paths == ["live"]
    assert config.max_open is None


def test_find_config_skips_broken_pyproject(tmp_path: Path) -> None:
    config_file = tmp_path / "decodecheck.toml"
    config_file.write_text("max-open = 8\n")
    subdir = tmp_path / "sub"
    subdir.mkdir()
    (subdir / "pyproject.toml").write_text("[tool.decodecheck\n")
    assert find_config_file(subdir) == config_file


def test_load_config_pyproject_section(tmp_path: Path) -> None:
    config_file = tmp_path / "pyproject.toml"
    config_file.write_text('[tool.decodecheck]\npaths = ["live"]\nunknown-key = 1\n')
    config = load_config(config_file)
    assert config.paths == ["live"]


def test_load_config_rejects_wrong_types(tmp_path: Path) -> None:
    config_file = tmp_path / "decodecheck.toml"
    config_file.write_text('max-open = "many"\n')
    with pytest.raises(ValueError):
        load_config(config_file)

    config_file.write_text('match-patterns = "*.json"\n')
    with pytest.raises(ValueError):
        load_config(config_file)


def test_merge_config_fills_unset_options() -> None:
    options = _default_options()
    config = DecodecheckConfig(match_patterns=["*.yml"], max_open=7)
    merge_cli_with_config(options, config, explicit_flags=set())
    assert options.match_patterns == ["*.yml"]
    assert options.max_open == 7
    assert options.paths == ["."]


def test_merge_explicit_flags_win() -> None:
    options, explicit = _parse_args(["--max-open", "3", "--path", "src"])
    config = DecodecheckConfig(max_open=7, paths=["live"], exclude_dirs=["tmp"])
    merge_cli_with_config(options, config, explicit)
    assert options.max_open == 3
    assert options.paths == ["src"]
    assert options.exclude_dirs == ["tmp"]


def test_explicit_flag_detection_with_default_value() -> None:
    """Passing the default value explicitly still counts as explicit."""
    _, explicit = _parse_args(["--max-open", "20"])
    assert explicit == {"max_open"}


def test_merge_with_no_config_is_noop() -> None:
    options = _default_options()
    assert merge_cli_with_config(options, None, set()) is options
