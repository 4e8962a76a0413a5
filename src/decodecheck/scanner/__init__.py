"""
Bounded-concurrency discovery of files by glob pattern.

Usage::

    import asyncio

    from decodecheck.scanner import Channel, ResourceGate, ScanConfig, TreeWalker, select

    async def find(root: str) -> list[str]:
        config = ScanConfig(match_patterns=["*.json"], extend_exclude_dirs=["vendor"])
        sizes, names = Channel[int](), Channel[str]()
        walker = TreeWalker(config, ResourceGate(config.max_open), sizes, names)
        walker.start(root)

        async def close_when_done() -> None:
            await walker.wait()
            await sizes.close()
            await names.close()

        closer = asyncio.create_task(close_when_done())
        found = [item async for channel, item in select(sizes, names) if channel is names]
        await closer
        return found

    paths = asyncio.run(find("infra"))
"""

from decodecheck.scanner.channel import Channel, ChannelClosed, select
from decodecheck.scanner.defaults import (
    DEFAULT_EXCLUDE_DIRS,
    DEFAULT_MATCH_PATTERNS,
    DEFAULT_MAX_OPEN,
)
from decodecheck.scanner.gate import ResourceGate
from decodecheck.scanner.latch import WaitGroup
from decodecheck.scanner.lister import list_directory
from decodecheck.scanner.types import DirEntry, Discovery, ScanConfig
from decodecheck.scanner.walker import TreeWalker

__all__ = [
    "DEFAULT_EXCLUDE_DIRS",
    "DEFAULT_MATCH_PATTERNS",
    "DEFAULT_MAX_OPEN",
    "Channel",
    "ChannelClosed",
    "DirEntry",
    "Discovery",
    "ResourceGate",
    "ScanConfig",
    "TreeWalker",
    "WaitGroup",
    "list_directory",
    "select",
]
