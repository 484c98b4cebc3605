"""Shallow file/extension counters for a target directory."""
from __future__ import annotations

from collections import Counter
from pathlib import Path
from typing import Dict, Tuple

from rush.errors import MediaIOError


def count_entries(target: Path) -> Tuple[int, int]:
    """Return ``(files, sub_directories)`` directly under *target*.

    A file target counts as one file and no directories.
    """
    if not target.exists():
        raise MediaIOError(f"Target does not exist: {target}")
    if target.is_file():
        return 1, 0
    n_files = n_dirs = 0
    for entry in target.iterdir():
        if entry.is_file():
            n_files += 1
        elif entry.is_dir():
            n_dirs += 1
    return n_files, n_dirs


def count_extensions(target: Path) -> Dict[str, int]:
    """Files per extension (without the dot) directly under *target*.

    Files without an extension are not counted.
    """
    if not target.exists():
        raise MediaIOError(f"Target does not exist: {target}")
    entries = [target] if target.is_file() else [p for p in target.iterdir() if p.is_file()]
    return dict(Counter(p.suffix[1:] for p in entries if p.suffix))
