"""Abstract base class for rush batch operations.

An operation knows which files it accepts, where each file's output goes,
and how to process one file.  :meth:`BaseOperation.run` ties those together
with :mod:`rush.batch`: validation, input discovery, output mirroring,
parallel fan-out and ``delete_original`` handling are the same for every
operation.
"""
from __future__ import annotations

import abc
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from rush.batch import (
    BatchSummary,
    check_io,
    collect_inputs,
    ensure_dir,
    output_is_file,
    resolve_jobs,
    run_batch,
)
from rush.errors import InvalidArgumentError, MediaIOError

logger = logging.getLogger(__name__)


class BaseOperation(abc.ABC):
    """Abstract base for all rush operations.

    Sub-classes **must** implement :attr:`name` and :meth:`process_file` and
    set :attr:`extensions`.

    ``output_kind`` decides how outputs are laid out:

    * ``"directory"`` – each input writes one or more files into a
      directory; a folder input maps ``in/a/b.wav`` to ``out/a/``.
    * ``"file"`` – each input writes exactly one file; a folder input maps
      ``in/a/b.wav`` to ``out/a/b.wav`` and a single input may name the
      output file directly.
    """

    extensions: Tuple[str, ...] = ()
    output_kind: str = "directory"

    def __init__(self, *, delete_original: bool = False, overwrite: bool = False) -> None:
        self.delete_original = delete_original
        self.overwrite = overwrite

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Stable dotted identifier (e.g. ``"audio.split"``)."""
        ...

    @abc.abstractmethod
    def process_file(self, path: Path, output: Path) -> List[Path]:
        """Process *path*, writing into/at *output*; return the written paths."""
        ...

    def validate(self) -> None:
        """Raise :exc:`InvalidArgumentError` for unusable parameters.

        Called by :meth:`run` before any I/O.  The default is a no-op.
        """

    def params(self) -> Dict[str, Any]:
        """JSON-serialisable parameters, used in run reports."""
        return {"delete_original": self.delete_original, "overwrite": self.overwrite}

    # ── layout ─────────────────────────────────────────────────────────────

    def output_for(self, path: Path, input_root: Path, output_root: Path) -> Path:
        if input_root.is_file():
            if self.output_kind == "file" and not output_is_file(output_root):
                return output_root / path.name
            return output_root
        relative = path.relative_to(input_root)
        if self.output_kind == "file":
            return output_root / relative
        return output_root / relative.parent

    def guard_overwrite(self, src: Path, dst: Path) -> None:
        if dst.exists() and src.resolve() == dst.resolve() and not self.overwrite:
            raise InvalidArgumentError(f"Refusing to overwrite {src} without --overwrite")

    # ── driver ─────────────────────────────────────────────────────────────

    def run(self, input_path: Path, output: Path, jobs: Optional[int] = None) -> BatchSummary:
        """Process *input_path* (file or folder) into *output*."""
        input_path = Path(input_path)
        output = Path(output)

        self.validate()
        jobs = resolve_jobs(jobs)
        files = collect_inputs(input_path, self.extensions)
        check_io(input_path, output, allow_output_file=self.output_kind == "file")
        logger.info("%s: %d file(s) under %s", self.name, len(files), input_path)

        def _work(path: Path) -> List[Path]:
            target = self.output_for(path, input_path, output)
            ensure_dir(target if self.output_kind == "directory" else target.parent)
            written = self.process_file(path, target)
            if self.delete_original and path.exists() and path not in written:
                try:
                    path.unlink()
                except OSError as exc:
                    raise MediaIOError(f"Failed to delete file: {path}") from exc
            return written

        return run_batch(files, _work, jobs=jobs)
