"""Configuration and value types for tree scanning."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple

import pathspec

from decodecheck.scanner.defaults import (
    DEFAULT_EXCLUDE_DIRS,
    DEFAULT_MATCH_PATTERNS,
    DEFAULT_MAX_OPEN,
)


class DirEntry(NamedTuple):
    """One entry of a directory listing. `size` is only meaningful for non-directories."""

    name: str
    is_dir: bool
    size: int


@dataclass(frozen=True)
class Discovery:
    """A candidate file found by the walker."""

    size: int
    path: str


@dataclass
class ScanConfig:
    """
    Match criteria and limits for a scan.

    `match_patterns=None` means use `DEFAULT_MATCH_PATTERNS`; providing a list
    replaces them entirely. The same holds for `exclude_dirs`.
    `max_open` is the capacity of the shared resource gate.
    """

    roots: list[str] = field(default_factory=lambda: ["."])
    match_patterns: list[str] | None = None
    extend_match_patterns: list[str] = field(default_factory=list)
    exclude_dirs: list[str] | None = None
    extend_exclude_dirs: list[str] = field(default_factory=list)
    max_open: int = DEFAULT_MAX_OPEN

    def __post_init__(self) -> None:
        for pattern in self.effective_patterns:
            if pattern.endswith("/"):
                raise ValueError(f"match pattern cannot end with '/': {pattern!r}")

    @property
    def effective_patterns(self) -> list[str]:
        """Combined match patterns: defaults (or `match_patterns`) + `extend_match_patterns`."""
        base = (
            self.match_patterns
            if self.match_patterns is not None
            else list(DEFAULT_MATCH_PATTERNS)
        )
        return base + self.extend_match_patterns

    @property
    def effective_exclude_dirs(self) -> frozenset[str]:
        """Combined excluded names: defaults (or `exclude_dirs`) + `extend_exclude_dirs`."""
        base = self.exclude_dirs if self.exclude_dirs is not None else list(DEFAULT_EXCLUDE_DIRS)
        return frozenset(base + self.extend_exclude_dirs)

    def compile_patterns(self) -> list[pathspec.PathSpec]:
        """
        Compile each effective pattern on its own, for base-name matching.

        A name matches if any one spec matches it, so patterns never cancel each
        other. A leading `!` or `#` is escaped so it is matched literally rather
        than read as a negation or a comment.
        """
        return [
            pathspec.PathSpec.from_lines("gitignore", [_literal_prefix(pattern)])
            for pattern in self.effective_patterns
        ]


def _literal_prefix(pattern: str) -> str:
    if pattern.startswith(("!", "#")):
        return "\\" + pattern
    return pattern
