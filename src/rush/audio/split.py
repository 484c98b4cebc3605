"""Split WAV files into fixed-duration chunks.

``track.wav`` cut into 1 s chunks becomes ``track@0.wav`` … ``track@4.wav``;
the index is zero-padded to the number of digits in the chunk count, so
ten chunks are named ``@00`` … ``@09``.  The last chunk is padded with
silence up to the full chunk length.
"""
from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Any, Dict, List

import numpy as np

from rush.audio.io import read_samples, write_samples
from rush.errors import InvalidArgumentError
from rush.operations.base import BaseOperation
from rush.partition import partition_by_size

logger = logging.getLogger(__name__)

EXTENSIONS = ("wav",)


def chunk_size_in_samples(sample_rate: int, channels: int, chunk_duration: float) -> int:
    """Samples per chunk in a flat interleaved buffer.

    Frames are ``sample_rate * chunk_duration`` rounded half up (2.5 frames
    become 3), then multiplied by *channels* so chunks always hold whole
    frames.
    """
    if chunk_duration <= 0:
        raise InvalidArgumentError(f"Chunk duration must be > 0, got {chunk_duration}")
    frames = math.floor(sample_rate * chunk_duration + 0.5)
    if frames < 1:
        raise InvalidArgumentError(
            f"Chunk duration {chunk_duration}s is shorter than one frame at {sample_rate} Hz"
        )
    return frames * channels


def chunk_filename(stem: str, index: int, num_chunks: int) -> str:
    # 5 chunks -> @0..@4, 10 chunks -> @00..@09
    width = len(str(max(num_chunks, 1)))
    return f"{stem}@{index:0{width}d}.wav"


def emit_chunks(samples: np.ndarray, channels: int, chunk_size: int) -> List[np.ndarray]:
    """Cut *samples* into buffers of exactly *chunk_size* samples.

    *chunk_size* counts interleaved samples and must be a multiple of
    *channels*.  The final buffer is zero-padded when the input does not
    divide evenly; an empty input gives no buffers.
    """
    if channels < 1:
        raise InvalidArgumentError(f"Channel count must be >= 1, got {channels}")
    if chunk_size % channels:
        raise InvalidArgumentError(
            f"Chunk size {chunk_size} is not a whole number of {channels}-channel frames"
        )

    chunks: List[np.ndarray] = []
    for rng in partition_by_size(len(samples), chunk_size):
        chunk = samples[rng.as_slice()]
        if rng.length < chunk_size:
            chunk = np.concatenate(
                [chunk, np.zeros(chunk_size - rng.length, dtype=samples.dtype)]
            )
        chunks.append(chunk)
    return chunks


def split_file(path: Path, chunk_duration: float, output_dir: Path) -> List[Path]:
    """Split one WAV file into ``<stem>@<i>.wav`` chunks under *output_dir*."""
    spec, samples = read_samples(path)
    chunk_size = chunk_size_in_samples(spec.sample_rate, spec.channels, chunk_duration)
    chunks = emit_chunks(samples, spec.channels, chunk_size)

    written: List[Path] = []
    for index, chunk in enumerate(chunks):
        out_path = output_dir / chunk_filename(path.stem, index, len(chunks))
        write_samples(out_path, spec, chunk)
        written.append(out_path)

    logger.debug("Split %s into %d chunk(s)", path, len(written))
    return written


class SplitOperation(BaseOperation):
    """``audio split``: fixed-duration chunks, mirrored folder layout."""

    extensions = EXTENSIONS
    output_kind = "directory"

    def __init__(self, chunk_duration: float, delete_original: bool = False) -> None:
        super().__init__(delete_original=delete_original)
        self.chunk_duration = float(chunk_duration)

    @property
    def name(self) -> str:
        return "audio.split"

    def validate(self) -> None:
        if self.chunk_duration <= 0:
            raise InvalidArgumentError(
                f"Chunk duration must be > 0, got {self.chunk_duration}"
            )

    def params(self) -> Dict[str, Any]:
        return {"chunk_duration": self.chunk_duration, "delete_original": self.delete_original}

    def process_file(self, path: Path, output: Path) -> List[Path]:
        return split_file(path, self.chunk_duration, output)
