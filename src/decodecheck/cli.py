#!/usr/bin/env python3
"""
decodecheck: Verify that every JSON and YAML file in a tree decodes cleanly

Common usage:
  decodecheck
  decodecheck --path infra/
  decodecheck --match-patterns '*.json,*.yaml,*.yml' --path live/
  decodecheck --list-files --path .

Exits with status 1 if any file fails to decode.
"""

from __future__ import annotations

import argparse
import importlib.metadata
import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from strif import atomic_output_file

from decodecheck.config import find_config_file, load_config, merge_cli_with_config
from decodecheck.orchestrator import list_files, scan
from decodecheck.scanner import DEFAULT_MAX_OPEN, ScanConfig

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]

log = logging.getLogger("decodecheck")

# Marks the handler installed by `_configure_logging` so reruns replace it.
_HANDLER_TAG_ATTR = "_decodecheck_handler"


@dataclass
class Options:
    """Command-line options for the decodecheck tool."""

    paths: list[str]
    match_patterns: list[str] | None
    extend_match_patterns: list[str]
    exclude_dirs: list[str] | None
    extend_exclude_dirs: list[str]
    max_open: int
    report_file: str | None
    list_files: bool
    verbose: bool
    quiet: bool
    version: bool


def _comma_list(value: str) -> list[str]:
    """Split a comma-separated flag value, trimming whitespace around each item."""
    return [item.strip() for item in value.split(",") if item.strip()]


def _parse_args(args: list[str] | None = None) -> tuple[Options, set[str]]:
    """
    Parse command-line arguments.

    Returns a tuple of (options, explicit_flags) where `explicit_flags` tracks which
    flags the user explicitly passed (for config merge precedence).
    """
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    description = doc_parts[0]
    epilog = "\n\n".join(doc_parts[1:])

    parser = argparse.ArgumentParser(
        prog="decodecheck",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    # Tracked flags default to None so an explicit value is distinguishable from
    # a built-in default when merging with the config file.
    parser.add_argument(
        "--path",
        action="append",
        dest="paths",
        default=None,
        metavar="DIR",
        help="Root directory to search (default: current directory). Can be repeated",
    )
    parser.add_argument(
        "--match-patterns",
        type=_comma_list,
        default=None,
        metavar="PATTERNS",
        help="Comma-separated glob patterns matched against file names; "
        "replaces the defaults (*.json, *.yaml)",
    )
    parser.add_argument(
        "--extend-match-patterns",
        action="append",
        default=None,
        metavar="PATTERN",
        help="Additional file pattern to match (e.g., '*.yml'). Can be repeated",
    )
    parser.add_argument(
        "--exclude-dirs",
        type=_comma_list,
        default=None,
        metavar="NAMES",
        help="Comma-separated directory names to skip; replaces the defaults "
        "(.git, .terragrunt-cache, scripts)",
    )
    parser.add_argument(
        "--extend-exclude-dirs",
        action="append",
        default=None,
        metavar="NAME",
        help="Additional directory name to skip. Can be repeated",
    )
    parser.add_argument(
        "--max-open",
        type=int,
        default=None,
        metavar="N",
        help=f"Maximum concurrently open files and directories (default: {DEFAULT_MAX_OPEN})",
    )
    parser.add_argument(
        "--report-file",
        type=str,
        default=None,
        metavar="FILE",
        help="Also write the run report as JSON to this file",
    )
    parser.add_argument(
        "--list-files",
        action="store_true",
        help="Print the files that would be decoded, without decoding them",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log every directory skipped and file decoded"
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Only log errors and the final failure"
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information and exit",
    )
    opts = parser.parse_args(args)

    tracked = (
        "paths",
        "match_patterns",
        "extend_match_patterns",
        "exclude_dirs",
        "extend_exclude_dirs",
        "max_open",
    )
    explicit_flags = {name for name in tracked if getattr(opts, name) is not None}

    return (
        Options(
            paths=opts.paths if opts.paths is not None else ["."],
            match_patterns=opts.match_patterns,
            extend_match_patterns=opts.extend_match_patterns or [],
            exclude_dirs=opts.exclude_dirs,
            extend_exclude_dirs=opts.extend_exclude_dirs or [],
            max_open=opts.max_open if opts.max_open is not None else DEFAULT_MAX_OPEN,
            report_file=opts.report_file,
            list_files=opts.list_files,
            verbose=opts.verbose,
            quiet=opts.quiet,
            version=opts.version,
        ),
        explicit_flags,
    )


def _configure_logging(options: Options) -> None:
    """
    Send decodecheck log records to stderr as bare messages. Replaces any handler a
    previous call installed, and leaves other handlers alone.
    """
    level = logging.INFO
    if options.verbose:
        level = logging.DEBUG
    elif options.quiet:
        level = logging.ERROR

    for handler in list(log.handlers):
        if getattr(handler, _HANDLER_TAG_ATTR, False):
            log.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    setattr(handler, _HANDLER_TAG_ATTR, True)
    log.addHandler(handler)
    log.setLevel(level)


def _to_scan_config(options: Options) -> ScanConfig:
    return ScanConfig(
        roots=list(options.paths),
        match_patterns=options.match_patterns,
        extend_match_patterns=list(options.extend_match_patterns),
        exclude_dirs=options.exclude_dirs,
        extend_exclude_dirs=list(options.extend_exclude_dirs),
        max_open=options.max_open,
    )


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the decodecheck CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 if every file decoded, 1 on decode errors or bad configuration)
    """
    options, explicit_flags = _parse_args(args)

    if options.version:
        try:
            version = importlib.metadata.version("decodecheck")
            print(f"v{version}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return 0

    _configure_logging(options)

    config_path = find_config_file(Path.cwd())
    if config_path:
        try:
            config = load_config(config_path)
        except (tomllib.TOMLDecodeError, ValueError, OSError) as e:
            print(f"Error: invalid config file {config_path}: {e}", file=sys.stderr)
            return 1
        log.debug("Using config file %s", config_path)
        merge_cli_with_config(options, config, explicit_flags)

    if options.max_open < 1:
        print(f"Error: --max-open must be at least 1: {options.max_open}", file=sys.stderr)
        return 1

    try:
        scan_config = _to_scan_config(options)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if options.list_files:
        for path in list_files(scan_config):
            print(path)
        return 0

    report = scan(scan_config)
    for line in report.summary_lines():
        log.info(line)

    if options.report_file:
        with atomic_output_file(options.report_file, make_parents=True) as tmp_path:
            Path(tmp_path).write_text(json.dumps(report.to_dict(), indent=2) + "\n")

    if not report.ok:
        log.error("Decode errors found in files")
        return 1

    log.info("All files decoded successfully")
    return 0


if __name__ == "__main__":
    sys.exit(main())
