"""Gated directory listing that reports failures instead of raising them."""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Callable

from decodecheck.scanner.gate import ResourceGate
from decodecheck.scanner.types import DirEntry

log = logging.getLogger(__name__)

ErrorCallback = Callable[[str, OSError], None]


def _read_entries(path: str) -> tuple[list[DirEntry], list[OSError]]:
    """
    Blocking listing of `path`. Symlinks are reported as they are, not followed,
    so a link to a directory is never descended into.
    """
    entries: list[DirEntry] = []
    errors: list[OSError] = []
    try:
        scanner = os.scandir(path)
    except OSError as e:
        errors.append(e)
        return entries, errors

    with scanner:
        try:
            for entry in scanner:
                try:
                    is_dir = entry.is_dir(follow_symlinks=False)
                    size = 0 if is_dir else entry.stat(follow_symlinks=False).st_size
                except OSError as e:
                    # Entry vanished or became unreadable between readdir and stat.
                    errors.append(e)
                    continue
                entries.append(DirEntry(entry.name, is_dir, size))
        except OSError as e:
            # Keep the partial listing.
            errors.append(e)
    return entries, errors


async def list_directory(
    path: str, gate: ResourceGate, on_error: ErrorCallback | None = None
) -> list[DirEntry]:
    """
    List the immediate entries of `path` while holding one gate token.

    Failures are logged and passed to `on_error`; whatever was read before the
    failure (possibly nothing) is returned.
    """
    async with gate:
        entries, errors = await asyncio.to_thread(_read_entries, path)
    for error in errors:
        log.warning("decodecheck: %s", error)
        if on_error is not None:
            on_error(path, error)
    return entries
