"""Aggregate statistics over a folder of audio files."""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Set

import soundfile as sf

from rush.batch import collect_inputs, resolve_jobs
from rush.errors import UnsupportedFormatError

logger = logging.getLogger(__name__)

EXTENSIONS = ("wav", "flac", "ogg", "mp3")

_SUBTYPE_BITS = {
    "PCM_U8": 8, "PCM_S8": 8, "PCM_16": 16, "PCM_24": 24, "PCM_32": 32,
    "FLOAT": 32, "DOUBLE": 64,
}


@dataclass(frozen=True)
class AudioInfo:
    path: Path
    duration_sec: float
    sample_rate: int
    channels: int
    bit_depth: Optional[int]


@dataclass
class AudioSummary:
    files: List[AudioInfo] = field(default_factory=list)

    @property
    def total_duration_sec(self) -> float:
        return sum(f.duration_sec for f in self.files)

    @property
    def sample_rates(self) -> Set[int]:
        return {f.sample_rate for f in self.files}

    @property
    def channels(self) -> Set[int]:
        return {f.channels for f in self.files}

    @property
    def bit_depths(self) -> Set[int]:
        return {f.bit_depth for f in self.files if f.bit_depth is not None}

    @property
    def durations(self) -> Set[float]:
        return {f.duration_sec for f in self.files}


def probe_audio(path: Path) -> Optional[AudioInfo]:
    """Read header info of *path*; ``None`` if the file cannot be probed."""
    try:
        info = sf.info(str(path))
    except (RuntimeError, OSError) as exc:
        logger.warning("Skipping unreadable audio file %s: %s", path, exc)
        return None
    return AudioInfo(
        path=path,
        duration_sec=info.frames / info.samplerate if info.samplerate else 0.0,
        sample_rate=info.samplerate,
        channels=info.channels,
        bit_depth=_SUBTYPE_BITS.get(info.subtype),
    )


def summarize(target: Path, jobs: Optional[int] = None) -> AudioSummary:
    jobs = resolve_jobs(jobs)
    try:
        files = collect_inputs(target, EXTENSIONS)
    except UnsupportedFormatError:
        logger.warning("Target is neither a directory nor an audio file: %s", target)
        files = []
    with ThreadPoolExecutor(max_workers=jobs) as executor:
        infos = [i for i in executor.map(probe_audio, files) if i is not None]
    return AudioSummary(files=infos)


def format_hms(seconds: float) -> str:
    total = int(seconds)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def format_summary(summary: AudioSummary) -> str:
    n = len(summary.files)
    if n == 0:
        return "Total files: 0"
    lines = [
        f"Total files: {n}",
        f"Total Duration: {format_hms(summary.total_duration_sec)}",
        f"Average Duration: {summary.total_duration_sec / n:.2f} s",
        f"Sample Rates: {sorted(summary.sample_rates)} Hz",
        f"Channels: {sorted(summary.channels)}",
        f"Bit Depths: {sorted(summary.bit_depths)}",
        f"Unique durations: {len(summary.durations)}",
        f"Min duration: {min(summary.durations):.3f} s",
        f"Max duration: {max(summary.durations):.3f} s",
    ]
    return "\n".join(lines)
