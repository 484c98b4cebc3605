"""Resample WAV files to a target sample rate.

Resampling itself is delegated to :func:`librosa.resample`; this module only
handles the per-channel layout, the subtype round-trip and the copy
shortcut for files already at the target rate.
"""
from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Any, Dict, List

import librosa
import numpy as np
import soundfile as sf

from rush.audio.io import read_spec
from rush.errors import InvalidArgumentError, MediaIOError
from rush.operations.base import BaseOperation

logger = logging.getLogger(__name__)

EXTENSIONS = ("wav",)


def resample_file(path: Path, target_sr: int, output: Path) -> Path:
    """Write *path* resampled to *target_sr* Hz at *output*."""
    spec = read_spec(path)

    if spec.sample_rate == target_sr:
        if path.resolve() != output.resolve():
            shutil.copyfile(path, output)
        logger.debug("%s already at %d Hz, copied", path, target_sr)
        return output

    try:
        data, _ = sf.read(str(path), dtype="float64", always_2d=True)
    except (RuntimeError, OSError) as exc:
        raise MediaIOError(f"Failed to read samples from {path}") from exc

    # librosa works on (channels, frames)
    resampled = librosa.resample(
        data.T, orig_sr=spec.sample_rate, target_sr=target_sr, axis=-1
    )
    resampled = np.clip(resampled.T, -1.0, 1.0)

    try:
        sf.write(str(output), resampled, target_sr, subtype=spec.subtype, format="WAV")
    except (RuntimeError, OSError) as exc:
        raise MediaIOError(f"Couldn't write to {output}") from exc

    logger.debug("Resampled %s: %d Hz -> %d Hz", path, spec.sample_rate, target_sr)
    return output


class ResampleOperation(BaseOperation):
    """``audio resample``: one output file per input."""

    extensions = EXTENSIONS
    output_kind = "file"

    def __init__(self, sr: int, overwrite: bool = False) -> None:
        super().__init__(overwrite=overwrite)
        self.sr = int(sr)

    @property
    def name(self) -> str:
        return "audio.resample"

    def validate(self) -> None:
        if self.sr < 1:
            raise InvalidArgumentError(f"Target sample rate must be >= 1, got {self.sr}")

    def params(self) -> Dict[str, Any]:
        return {"sr": self.sr, "overwrite": self.overwrite}

    def process_file(self, path: Path, output: Path) -> List[Path]:
        self.guard_overwrite(path, output)
        return [resample_file(path, self.sr, output)]
