"""
decodecheck: concurrently find configuration files in a tree and check that each
one decodes.
"""

from decodecheck.aggregator import Aggregator, RunReport
from decodecheck.decoders import DecodeResult, DecoderRegistry, FailureKind
from decodecheck.orchestrator import discover_paths, list_files, run_scan, scan
from decodecheck.scanner import ScanConfig

__all__ = [
    "Aggregator",
    "DecodeResult",
    "DecoderRegistry",
    "FailureKind",
    "RunReport",
    "ScanConfig",
    "discover_paths",
    "list_files",
    "run_scan",
    "scan",
]
