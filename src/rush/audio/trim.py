"""Trim WAV files to ``[offset, offset + length)`` seconds."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List

from rush.audio.io import read_samples, write_samples
from rush.errors import InvalidArgumentError
from rush.operations.base import BaseOperation
from rush.partition import Range

logger = logging.getLogger(__name__)

EXTENSIONS = ("wav",)


def trim_range(total_samples: int, sample_rate: int, channels: int,
               offset: float, length: float) -> Range:
    """Interleaved-sample range covering *length* seconds from *offset*."""
    start = int(sample_rate * offset) * channels
    size = int(sample_rate * length) * channels
    if start > total_samples:
        raise InvalidArgumentError("Requested offset larger than file length")
    if start + size > total_samples:
        raise InvalidArgumentError("Requested length larger than file length")
    return Range(start, start + size)


def trim_file(path: Path, length: float, output: Path, offset: float = 0.0) -> Path:
    spec, samples = read_samples(path)
    rng = trim_range(len(samples), spec.sample_rate, spec.channels, offset, length)
    write_samples(output, spec, samples[rng.as_slice()])
    logger.debug("Trimmed %s to samples [%d, %d)", path, rng.start, rng.end)
    return output


class TrimOperation(BaseOperation):
    """``audio trim``: keep a fixed window of every file."""

    extensions = EXTENSIONS
    output_kind = "file"

    def __init__(self, length: float, offset: float = 0.0, overwrite: bool = False) -> None:
        super().__init__(overwrite=overwrite)
        self.length = float(length)
        self.offset = float(offset)

    @property
    def name(self) -> str:
        return "audio.trim"

    def validate(self) -> None:
        if self.length <= 0:
            raise InvalidArgumentError(f"Length must be > 0, got {self.length}")
        if self.offset < 0:
            raise InvalidArgumentError(f"Offset must be >= 0, got {self.offset}")

    def params(self) -> Dict[str, Any]:
        return {"length": self.length, "offset": self.offset, "overwrite": self.overwrite}

    def process_file(self, path: Path, output: Path) -> List[Path]:
        self.guard_overwrite(path, output)
        return [trim_file(path, self.length, output, offset=self.offset)]
