"""Thread-safe counters for a scan and the final run report."""

from __future__ import annotations

import threading
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from decodecheck.decoders import DecodeResult

TOTAL = "total"


@dataclass(frozen=True)
class RunReport:
    """
    Result of a scan. Both count maps carry a `"total"` key equal to the sum of the
    per-extension entries.
    """

    file_counts: dict[str, int]
    error_counts: dict[str, int]
    total_bytes: int
    failures: list[DecodeResult] = field(default_factory=list)

    @property
    def total_files(self) -> int:
        return self.file_counts[TOTAL]

    @property
    def total_errors(self) -> int:
        return self.error_counts[TOTAL]

    @property
    def ok(self) -> bool:
        return self.total_errors == 0

    @property
    def extensions(self) -> list[str]:
        return sorted(ext for ext in self.file_counts if ext != TOTAL)

    def summary_lines(self) -> list[str]:
        """Human-readable totals: one overall line, then one line per extension."""
        lines = [f"{self.total_files} total files  {self.total_bytes / 1e6:.1f} MB"]
        for ext in self.extensions:
            lines.append(
                f"{self.file_counts[ext]} {ext} files, "
                f"{self.error_counts.get(ext, 0)} decode errors"
            )
        return lines

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "total_bytes": self.total_bytes,
            "file_counts": dict(self.file_counts),
            "error_counts": dict(self.error_counts),
            "failures": [
                {"path": f.path, "kind": f.kind.value if f.kind else None, "detail": f.detail}
                for f in self.failures
            ],
        }


class Aggregator:
    """
    Accumulates byte volume, per-extension file counts and per-extension error counts.

    All three updates share one lock so a total can never be observed out of step
    with its per-extension entries.
    """

    def __init__(self) -> None:
        self._lock: threading.Lock = threading.Lock()
        self._total_bytes: int = 0
        self._file_counts: dict[str, int] = {TOTAL: 0}
        self._error_counts: dict[str, int] = {TOTAL: 0}

    def add_bytes(self, size: int) -> None:
        with self._lock:
            self._total_bytes += size

    def add_file(self, extension: str) -> None:
        with self._lock:
            self._file_counts[TOTAL] += 1
            self._file_counts[extension] = self._file_counts.get(extension, 0) + 1

    def add_error(self, extension: str) -> None:
        with self._lock:
            self._error_counts[TOTAL] += 1
            self._error_counts[extension] = self._error_counts.get(extension, 0) + 1

    def report(self, failures: Iterable[DecodeResult] = ()) -> RunReport:
        """Snapshot the counters. Call only after all producers have finished."""
        with self._lock:
            return RunReport(
                file_counts=dict(self._file_counts),
                error_counts=dict(self._error_counts),
                total_bytes=self._total_bytes,
                failures=list(failures),
            )
