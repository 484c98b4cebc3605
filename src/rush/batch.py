"""Input discovery, I/O sanity checks and per-file parallel fan-out.

Every batch command follows the same shape::

    check_io(input, output)
    files = collect_inputs(input, EXTENSIONS)
    summary = run_batch(files, process_one, jobs=4)

``run_batch`` never lets one file's failure stop its siblings: errors are
recorded on the matching :class:`FileResult` and the caller decides the exit
status from :attr:`BatchSummary.ok`.
"""
from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from rush.errors import InvalidArgumentError, MediaIOError, UnsupportedFormatError

logger = logging.getLogger(__name__)


# ── result types ────────────────────────────────────────────────────────────

@dataclass
class FileResult:
    """Outcome of processing one input file."""

    input: Path
    outputs: List[Path] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None


@dataclass
class BatchSummary:
    """All per-file results of one batch, sorted by input path."""

    results: List[FileResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def failed(self) -> List[FileResult]:
        return [r for r in self.results if not r.success]

    @property
    def succeeded(self) -> List[FileResult]:
        return [r for r in self.results if r.success]

    @property
    def ok(self) -> bool:
        return not self.failed

    @property
    def outputs(self) -> List[Path]:
        return [p for r in self.results for p in r.outputs]

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "succeeded": len(self.succeeded),
            "failed": len(self.failed),
            "files": [
                {
                    "input": str(r.input),
                    "status": "success" if r.success else "failed",
                    "outputs": [str(p) for p in r.outputs],
                    "error": r.error,
                }
                for r in self.results
            ],
        }


# ── paths ───────────────────────────────────────────────────────────────────

def file_has_right_extension(path: Path, extensions: Iterable[str]) -> bool:
    """Case-insensitive suffix check; *extensions* are given without the dot."""
    suffix = path.suffix.lower().lstrip(".")
    return bool(suffix) and suffix in {e.lower() for e in extensions}


def collect_inputs(src: Path, extensions: Iterable[str]) -> List[Path]:
    """Return a sorted list of admissible files from *src* (file or folder).

    A folder is walked recursively.  A single file with the wrong extension
    is an error rather than an empty result.
    """
    extensions = tuple(extensions)
    if src.is_file():
        if not file_has_right_extension(src, extensions):
            raise UnsupportedFormatError(
                f"Unsupported file type {src.suffix!r} for {src} "
                f"(expected one of: {', '.join(extensions)})"
            )
        return [src]
    if src.is_dir():
        return sorted(
            p for p in src.rglob("*")
            if p.is_file() and file_has_right_extension(p, extensions)
        )
    raise MediaIOError(f"Input path not found: {src}")


def ensure_dir(path: Path) -> Path:
    """Create *path* and its parents; safe when several workers race on it."""
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise MediaIOError(f"Failed to create output directory: {path}") from exc
    return path


def output_is_file(output: Path) -> bool:
    """An output path with a suffix names a file, anything else a directory."""
    return bool(output.suffix)


def check_io(
    input_path: Path,
    output: Path,
    *,
    allow_output_file: bool = False,
    allow_many_to_one: bool = False,
) -> None:
    """Validate an input/output pair before any processing starts.

    Creates *output* when it names a directory that does not exist yet.

    Raises
    ------
    MediaIOError
        If *input_path* does not exist.
    InvalidArgumentError
        If *output* names a file where a directory is required, or a folder
        would be squashed into a single output file.
    """
    if not input_path.exists():
        raise MediaIOError(f"Input file or directory does not exist: {input_path}")

    if output_is_file(output):
        if not allow_output_file:
            raise InvalidArgumentError(f"Output must be a directory, got file: {output}")
        if input_path.is_dir() and not allow_many_to_one:
            raise InvalidArgumentError(
                f"Cannot write the contents of directory {input_path} to a single file {output}"
            )
    elif output.is_file():
        raise InvalidArgumentError(f"Output directory path is an existing file: {output}")
    else:
        ensure_dir(output)


def default_jobs() -> int:
    return os.cpu_count() or 1


def resolve_jobs(jobs: Optional[int]) -> int:
    """``None`` means one worker per CPU; anything below 1 is rejected."""
    jobs = default_jobs() if jobs is None else jobs
    if jobs < 1:
        raise InvalidArgumentError(f"jobs must be >= 1, got {jobs}")
    return jobs


# ── fan-out ─────────────────────────────────────────────────────────────────

def _process_one(path: Path, worker: Callable[[Path], List[Path]]) -> FileResult:
    logger.debug("Processing %s", path)
    try:
        outputs = worker(path)
    except Exception as exc:  # noqa: BLE001 – reported per file
        error_msg = f"{type(exc).__name__}: {exc}"
        logger.error("Failed to process file %s: %s", path, error_msg)
        logger.debug("Traceback for %s", path, exc_info=True)
        return FileResult(input=path, error=error_msg)
    return FileResult(input=path, outputs=list(outputs))


def run_batch(
    files: List[Path],
    worker: Callable[[Path], List[Path]],
    jobs: Optional[int] = None,
) -> BatchSummary:
    """Apply *worker* to every file, in parallel when ``jobs > 1``.

    *worker* returns the paths it wrote.  Exceptions are captured into the
    file's :class:`FileResult`; files that already succeeded keep their
    outputs on disk.
    """
    jobs = resolve_jobs(jobs)

    results: List[FileResult] = []
    if jobs == 1 or len(files) <= 1:
        for path in files:
            results.append(_process_one(path, worker))
    else:
        with ThreadPoolExecutor(max_workers=jobs) as executor:
            futures = [executor.submit(_process_one, path, worker) for path in files]
            for future in as_completed(futures):
                results.append(future.result())

    results.sort(key=lambda r: str(r.input))
    summary = BatchSummary(results=results)
    logger.info(
        "Processed %d file(s): %d succeeded, %d failed",
        summary.total, len(summary.succeeded), len(summary.failed),
    )
    return summary
