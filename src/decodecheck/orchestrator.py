"""
Runs a full scan: walk, decode each discovery as it arrives, and total the results.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from decodecheck.aggregator import Aggregator, RunReport
from decodecheck.decoders import DecodeResult, DecoderRegistry, file_extension
from decodecheck.scanner import Channel, ResourceGate, ScanConfig, TreeWalker, select

log = logging.getLogger(__name__)


async def _close_when_done(walker: TreeWalker, *channels: Channel[Any]) -> None:
    """Close the result channels once the whole recursive walk has finished."""
    try:
        await walker.wait()
    finally:
        for channel in channels:
            await channel.close()


def _start_walk(
    config: ScanConfig, gate: ResourceGate
) -> tuple[Channel[int], Channel[str], asyncio.Task[None]]:
    sizes: Channel[int] = Channel()
    names: Channel[str] = Channel()
    walker = TreeWalker(config, gate, sizes, names)
    for root in config.roots:
        log.debug("Walking %s", root)
        walker.start(root)
    supervisor = asyncio.create_task(_close_when_done(walker, sizes, names))
    return sizes, names, supervisor


async def run_scan(
    config: ScanConfig,
    registry: DecoderRegistry | None = None,
    gate: ResourceGate | None = None,
) -> RunReport:
    """
    Walk every root in `config`, decode each discovered file and return the totals.

    Decoding happens inline as each path arrives, competing with directory listing
    for the same gate tokens. The report is taken only after both result channels
    have closed, so no walker can still be sending.
    """
    registry = registry if registry is not None else DecoderRegistry()
    gate = gate if gate is not None else ResourceGate(config.max_open)
    aggregator = Aggregator()
    failures: list[DecodeResult] = []

    sizes, names, supervisor = _start_walk(config, gate)
    async for channel, item in select(sizes, names):
        if channel is sizes:
            aggregator.add_bytes(item)
            continue
        extension = file_extension(item)
        aggregator.add_file(extension)
        result = await registry.decode(item, gate)
        if not result.ok:
            aggregator.add_error(extension)
            failures.append(result)

    # Surfaces any unexpected walker exception.
    await supervisor
    return aggregator.report(failures)


async def discover_paths(config: ScanConfig, gate: ResourceGate | None = None) -> list[str]:
    """Walk without decoding and return the sorted paths of all discoveries."""
    gate = gate if gate is not None else ResourceGate(config.max_open)
    paths: list[str] = []

    sizes, names, supervisor = _start_walk(config, gate)
    async for channel, item in select(sizes, names):
        if channel is names:
            paths.append(item)

    await supervisor
    paths.sort()
    return paths


def scan(config: ScanConfig, registry: DecoderRegistry | None = None) -> RunReport:
    """Synchronous entry point: run `run_scan()` on a fresh event loop."""
    return asyncio.run(run_scan(config, registry))


def list_files(config: ScanConfig) -> list[str]:
    """Synchronous entry point for `discover_paths()`."""
    return asyncio.run(discover_paths(config))
