"""python -m rush  –  batch media and file manipulation.

Commands
--------
audio split | resample | trim | summary
    WAV chunking, sample-rate conversion, trimming and folder statistics.
image tessellate | resize | to-landscape | to-portrait | summary
    Grid tiling, resizing, reorientation and folder statistics.
file count | extension
    Shallow counts of a directory.
run
    Execute the operations declared in a YAML job file.

Every batch command accepts a single file or a folder (walked recursively);
outputs mirror the input's folder structure.

Examples
--------
Cut every image under data/img into 2×3 tiles::

    rush image tessellate data/img 2 3 out/tiles

Split a WAV into one-second chunks and remove the source::

    rush audio split data/raw/track.wav 1.0 out/chunks --delete-original
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rush.batch import BatchSummary
from rush.errors import RushError
from rush.logging_utils import setup_logging

logger = logging.getLogger("rush")


# ── helpers ─────────────────────────────────────────────────────────────────

def _report(summary: BatchSummary) -> int:
    for result in summary.failed:
        print(f"  × {result.input}\n    → {result.error}", file=sys.stderr)
    return 0 if summary.ok else 1


# ── sub-command handlers ─────────────────────────────────────────────────────

def _cmd_audio_split(args: argparse.Namespace) -> int:
    from rush.audio.split import SplitOperation

    op = SplitOperation(args.chunk_duration, delete_original=args.delete_original)
    return _report(op.run(args.input, args.output, jobs=args.jobs))


def _cmd_audio_resample(args: argparse.Namespace) -> int:
    from rush.audio.resample import ResampleOperation

    op = ResampleOperation(args.sr, overwrite=args.overwrite)
    return _report(op.run(args.input, args.output, jobs=args.jobs))


def _cmd_audio_trim(args: argparse.Namespace) -> int:
    from rush.audio.trim import TrimOperation

    op = TrimOperation(args.length, offset=args.offset, overwrite=args.overwrite)
    return _report(op.run(args.input, args.output, jobs=args.jobs))


def _cmd_audio_summary(args: argparse.Namespace) -> int:
    from rush.audio.summary import format_summary, summarize

    print(format_summary(summarize(args.target, jobs=args.jobs)))
    return 0


def _cmd_image_tessellate(args: argparse.Namespace) -> int:
    from rush.image.tessellate import TessellateOperation

    op = TessellateOperation(
        args.n_vertical, args.n_horizontal, delete_original=args.delete_original
    )
    return _report(op.run(args.input, args.output, jobs=args.jobs))


def _cmd_image_resize(args: argparse.Namespace) -> int:
    from rush.image.resize import ResizeOperation

    op = ResizeOperation(args.height, args.width, overwrite=args.overwrite)
    return _report(op.run(args.input, args.output, jobs=args.jobs))


def _cmd_image_orient(args: argparse.Namespace) -> int:
    from rush.image.orient import OrientOperation

    op = OrientOperation(args.orientation, overwrite=args.overwrite)
    return _report(op.run(args.input, args.output, jobs=args.jobs))


def _cmd_image_summary(args: argparse.Namespace) -> int:
    from rush.image.summary import format_summary, summarize

    print(format_summary(summarize(args.target, jobs=args.jobs)))
    return 0


def _cmd_file_count(args: argparse.Namespace) -> int:
    from rush.files import count_entries

    n_files, n_dirs = count_entries(args.target)
    print(f"Files: {n_files}")
    print(f"Directories: {n_dirs}")
    return 0


def _cmd_file_extension(args: argparse.Namespace) -> int:
    from rush.files import count_extensions

    for ext, count in sorted(count_extensions(args.target).items()):
        print(f"{ext}: {count}")
    return 0


def _cmd_run(args: argparse.Namespace) -> int:
    from rush.config import run_config

    report = run_config(args.config, jobs=args.jobs)
    for op in report.operations:
        print(f"{op.name}: {op.status}" + (f" ({op.error})" if op.error else ""))
    return 0 if report.ok else 1


# ── argument parser ──────────────────────────────────────────────────────────

def _add_batch_io(p: argparse.ArgumentParser) -> None:
    p.add_argument("input", type=Path, help="Input file or directory")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rush",
        description="Batch media and file manipulation",
    )
    parser.add_argument(
        "--jobs", "-j",
        type=int,
        default=None,
        metavar="N",
        help="Number of files processed in parallel (default: CPU count)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    parser.add_argument(
        "--log-level",
        default=None,
        metavar="LEVEL",
        help="Log level name (default: $RUSH_LOG_LEVEL or INFO)",
    )
    groups = parser.add_subparsers(dest="group", required=True)

    # ── audio ────────────────────────────────────────────────────────────────
    audio = groups.add_parser("audio", help="Audio commands").add_subparsers(
        dest="command", required=True
    )

    p = audio.add_parser("split", help="Split WAV files into fixed-length chunks")
    _add_batch_io(p)
    p.add_argument("chunk_duration", type=float, help="Chunk duration in seconds")
    p.add_argument("output", type=Path, help="Output directory")
    p.add_argument("--delete-original", action="store_true", help="Delete original file")
    p.set_defaults(func=_cmd_audio_split)

    p = audio.add_parser("resample", help="Resample WAV files")
    _add_batch_io(p)
    p.add_argument("sr", type=int, help="Target sample rate (Hz)")
    p.add_argument("output", type=Path, help="Output file or directory")
    p.add_argument("--overwrite", action="store_true", help="Allow overwriting the input file")
    p.set_defaults(func=_cmd_audio_resample)

    p = audio.add_parser("trim", help="Trim WAV files")
    _add_batch_io(p)
    p.add_argument("length", type=float, help="Target length in seconds")
    p.add_argument("output", type=Path, help="Output file or directory")
    p.add_argument("offset", type=float, nargs="?", default=0.0, help="Start offset in seconds")
    p.add_argument("--overwrite", action="store_true", help="Allow overwriting the input file")
    p.set_defaults(func=_cmd_audio_trim)

    p = audio.add_parser("summary", help="Summarize a folder of audio files")
    p.add_argument("target", type=Path, help="Target file or directory")
    p.set_defaults(func=_cmd_audio_summary)

    # ── image ────────────────────────────────────────────────────────────────
    image = groups.add_parser("image", help="Image commands").add_subparsers(
        dest="command", required=True
    )

    p = image.add_parser("tessellate", help="Cut images into a grid of tiles")
    _add_batch_io(p)
    p.add_argument("n_vertical", type=int, help="Number of vertical patches")
    p.add_argument("n_horizontal", type=int, help="Number of horizontal patches")
    p.add_argument("output", type=Path, help="Output directory")
    p.add_argument("--delete-original", action="store_true", help="Delete original file")
    p.set_defaults(func=_cmd_image_tessellate)

    p = image.add_parser("resize", help="Resize images")
    _add_batch_io(p)
    p.add_argument("height", type=int, help="Requested height")
    p.add_argument("width", type=int, help="Requested width")
    p.add_argument("output", type=Path, help="Output file or directory")
    p.add_argument("--overwrite", action="store_true", help="Allow overwriting the input file")
    p.set_defaults(func=_cmd_image_resize)

    for orientation in ("landscape", "portrait"):
        p = image.add_parser(f"to-{orientation}", help=f"Rotate images to {orientation}")
        _add_batch_io(p)
        p.add_argument("output", type=Path, help="Output file or directory")
        p.add_argument("--overwrite", action="store_true", help="Allow overwriting the input file")
        p.set_defaults(func=_cmd_image_orient, orientation=orientation)

    p = image.add_parser("summary", help="Summarize a folder of images")
    p.add_argument("target", type=Path, help="Target file or directory")
    p.set_defaults(func=_cmd_image_summary)

    # ── file ─────────────────────────────────────────────────────────────────
    files = groups.add_parser("file", help="File commands").add_subparsers(
        dest="command", required=True
    )

    p = files.add_parser("count", help="Count files and sub-directories")
    p.add_argument("target", type=Path, help="Target directory or file")
    p.set_defaults(func=_cmd_file_count)

    p = files.add_parser("extension", help="Count files per extension")
    p.add_argument("target", type=Path, help="Target directory or file")
    p.set_defaults(func=_cmd_file_extension)

    # ── run ──────────────────────────────────────────────────────────────────
    p = groups.add_parser("run", help="Run operations from a YAML job file")
    p.add_argument(
        "--config",
        type=Path,
        default=Path("rush.yaml"),
        metavar="FILE",
        help="Job file (default: rush.yaml)",
    )
    p.set_defaults(func=_cmd_run)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level, verbose=args.verbose)

    try:
        return args.func(args)
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return 130
    except (RushError, ValueError, OSError) as exc:
        logger.error("%s", exc)
        logger.debug("Traceback", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
