"""
Concurrent recursive walker.

Every directory is its own asyncio task: the task lists the directory, spawns a
task per eligible subdirectory and sends a discovery for each matching non-empty
file. A shared `WaitGroup` tracks the whole recursive tree, so `wait()` returns only
after the deepest walk has finished sending.
"""

from __future__ import annotations

import asyncio
import logging
import os

import pathspec

from decodecheck.scanner.channel import Channel
from decodecheck.scanner.gate import ResourceGate
from decodecheck.scanner.latch import WaitGroup
from decodecheck.scanner.lister import ErrorCallback, list_directory
from decodecheck.scanner.types import Discovery, ScanConfig

log = logging.getLogger(__name__)


class TreeWalker:
    """
    Discovers files matching `config` under one or more roots.

    For each match the file size is sent on `sizes` and the joined path on `names`.
    The caller owns both channels and closes them after `wait()` returns.
    """

    def __init__(
        self,
        config: ScanConfig,
        gate: ResourceGate,
        sizes: Channel[int],
        names: Channel[str],
        on_error: ErrorCallback | None = None,
    ) -> None:
        self._patterns: list[pathspec.PathSpec] = config.compile_patterns()
        self._exclude_dirs: frozenset[str] = config.effective_exclude_dirs
        self._gate: ResourceGate = gate
        self._sizes: Channel[int] = sizes
        self._names: Channel[str] = names
        self._on_error: ErrorCallback | None = on_error
        self._pending: WaitGroup = WaitGroup()
        # Strong references so running walks are not garbage collected.
        self._tasks: set[asyncio.Task[None]] = set()
        self._failures: list[Exception] = []

    def start(self, root: str) -> None:
        """Register and spawn the walk of `root`. Must be called from a running loop."""
        self._spawn(root)

    async def wait(self) -> None:
        """
        Block until every walk, including all recursively spawned ones, has finished.
        Re-raises the first unexpected exception raised by a walk, if any.
        """
        await self._pending.wait()
        if self._failures:
            raise self._failures[0]

    def matches(self, name: str) -> bool:
        """True if the base name matches any configured pattern."""
        return any(spec.match_file(name) for spec in self._patterns)

    def _spawn(self, directory: str) -> None:
        # Register before scheduling so the count never reaches zero early.
        self._pending.add()
        task = asyncio.create_task(self._walk(directory))
        self._tasks.add(task)
        task.add_done_callback(self._finished)

    def _finished(self, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)

    async def _walk(self, directory: str) -> None:
        try:
            for entry in await list_directory(directory, self._gate, self._on_error):
                path = os.path.join(directory, entry.name)
                if entry.is_dir:
                    if entry.name in self._exclude_dirs:
                        log.debug("Skipping excluded directory: %s", path)
                    else:
                        self._spawn(path)
                elif entry.size > 0 and self.matches(entry.name):
                    await self._emit(Discovery(entry.size, path))
        except Exception as e:
            # Recorded before done() so wait() is guaranteed to see it.
            self._failures.append(e)
        finally:
            self._pending.done()

    async def _emit(self, discovery: Discovery) -> None:
        await self._sizes.send(discovery.size)
        await self._names.send(discovery.path)
