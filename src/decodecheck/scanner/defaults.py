"""
Default match patterns, excluded directory names and resource limits.

Match patterns use glob syntax and are tested against base names only.
Excluded directories are exact names, never paths or patterns.
"""

from __future__ import annotations

DEFAULT_MATCH_PATTERNS: list[str] = ["*.json", "*.yaml"]

# Directories that never hold inputs worth decoding.
# Pruned during traversal (not entered at all).
DEFAULT_EXCLUDE_DIRS: list[str] = [
    ".git",
    ".terragrunt-cache",
    "scripts",
]

# Upper bound on concurrently open file descriptors (directory listings plus file reads).
DEFAULT_MAX_OPEN: int = 20
