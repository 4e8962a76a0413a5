"""
Decoder registry and dispatch.

A decoder is any callable taking the raw file content and returning the decoded
value; raising means the content is invalid. Dispatch reads the file and runs the
decoder under one gate token, then classifies the outcome.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum

import yaml

from decodecheck.scanner.gate import ResourceGate

log = logging.getLogger(__name__)

Decoder = Callable[[bytes], object]


class FailureKind(str, Enum):
    """Why a file failed to decode."""

    UNSUPPORTED = "unsupported type"
    READ = "read error"
    DECODE = "decode error"


@dataclass(frozen=True)
class DecodeResult:
    path: str
    kind: FailureKind | None = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.kind is None


def file_extension(path: str) -> str:
    """
    Suffix of the base name starting at its last dot, or "" if there is none.
    Unlike `os.path.splitext`, a dotfile such as `.json` has extension `.json`.
    """
    name = os.path.basename(path)
    dot = name.rfind(".")
    return name[dot:] if dot >= 0 else ""


def decode_json(raw: bytes) -> object:
    return json.loads(raw)


def decode_yaml(raw: bytes) -> object:
    # A single document is expected; multi-document streams are rejected.
    return yaml.safe_load(raw)


DEFAULT_DECODERS: dict[str, Decoder] = {
    ".json": decode_json,
    ".yaml": decode_yaml,
    ".yml": decode_yaml,
}


class DecoderRegistry:
    """Maps file extensions (with leading dot) to decoders."""

    def __init__(self, decoders: Mapping[str, Decoder] | None = None) -> None:
        self._decoders: dict[str, Decoder] = dict(
            DEFAULT_DECODERS if decoders is None else decoders
        )

    @property
    def extensions(self) -> list[str]:
        return sorted(self._decoders)

    def register(self, extension: str, decoder: Decoder) -> None:
        """Add or replace the decoder for `extension`."""
        self._decoders[extension] = decoder

    def lookup(self, extension: str) -> Decoder | None:
        return self._decoders.get(extension)

    async def decode(self, path: str, gate: ResourceGate) -> DecodeResult:
        """
        Read `path` and run the decoder registered for its extension.

        Never raises for bad input: a missing decoder, an unreadable file, and a
        decoder error each come back as a failed `DecodeResult`, with the original
        error text kept in `detail`.
        """
        extension = file_extension(path)
        decoder = self.lookup(extension)
        if decoder is None:
            # Only reachable when match patterns and registered decoders disagree.
            log.warning("No decoder for file type %s: %s", extension, path)
            return DecodeResult(path, FailureKind.UNSUPPORTED, FailureKind.UNSUPPORTED.value)

        async with gate:
            result = await asyncio.to_thread(_read_and_decode, path, decoder)

        if result.kind is FailureKind.READ:
            log.warning("error reading file %s: %s", path, result.detail)
        elif result.kind is FailureKind.DECODE:
            log.warning("error decoding file %s: %s", path, result.detail)
        else:
            log.debug("Decoded %s", path)
        return result


def _read_and_decode(path: str, decoder: Decoder) -> DecodeResult:
    try:
        with open(path, "rb") as f:
            raw = f.read()
    except OSError as e:
        return DecodeResult(path, FailureKind.READ, str(e))

    try:
        decoder(raw)
    except Exception as e:
        # Any decoder error counts against the file; the message (with line and
        # column where the decoder gives them) is kept verbatim.
        return DecodeResult(path, FailureKind.DECODE, str(e))
    return DecodeResult(path)
