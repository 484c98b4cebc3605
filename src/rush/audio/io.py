"""WAV reading/writing for the audio operations.

Samples travel as a flat, channel-interleaved ``int32`` array scaled to the
full 32-bit range, so 8/16/24/32-bit PCM all round-trip without loss: on
write, :mod:`soundfile` scales back to the file's own subtype.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

import numpy as np
import soundfile as sf

from rush.errors import InvalidArgumentError, MediaIOError, UnsupportedFormatError

BITS_PER_SUBTYPE = {
    "PCM_U8": 8,
    "PCM_S8": 8,
    "PCM_16": 16,
    "PCM_24": 24,
    "PCM_32": 32,
}


@dataclass(frozen=True)
class WavSpec:
    channels: int
    sample_rate: int
    bits_per_sample: int
    subtype: str


def read_spec(path: Path) -> WavSpec:
    """Probe *path* without decoding its samples."""
    try:
        info = sf.info(str(path))
    except (RuntimeError, OSError) as exc:
        raise MediaIOError(f"Failed to open WAV file: {path}") from exc
    if info.subtype not in BITS_PER_SUBTYPE:
        raise UnsupportedFormatError(
            f"Unsupported sample format {info.subtype!r} in {path}"
        )
    return WavSpec(
        channels=info.channels,
        sample_rate=info.samplerate,
        bits_per_sample=BITS_PER_SUBTYPE[info.subtype],
        subtype=info.subtype,
    )


def read_samples(path: Path) -> Tuple[WavSpec, np.ndarray]:
    """Return the spec and the interleaved ``int32`` samples of *path*."""
    spec = read_spec(path)
    try:
        data, _ = sf.read(str(path), dtype="int32", always_2d=True)
    except (RuntimeError, OSError) as exc:
        raise MediaIOError(f"Failed to read samples from {path}") from exc
    return spec, data.reshape(-1)


def write_samples(path: Path, spec: WavSpec, samples: np.ndarray) -> None:
    """Write interleaved ``int32`` *samples* to *path* using *spec*."""
    if samples.size % spec.channels:
        raise InvalidArgumentError(
            f"{samples.size} samples do not fill whole frames of {spec.channels} channel(s)"
        )
    frames = np.asarray(samples, dtype=np.int32).reshape(-1, spec.channels)
    try:
        sf.write(str(path), frames, spec.sample_rate, subtype=spec.subtype, format="WAV")
    except (RuntimeError, OSError) as exc:
        raise MediaIOError(f"Failed to write WAV file: {path}") from exc
