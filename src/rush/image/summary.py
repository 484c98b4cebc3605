"""Count images and list their distinct ``(height, width)`` shapes."""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Set, Tuple

from PIL import Image

from rush.batch import collect_inputs, resolve_jobs
from rush.errors import InvalidArgumentError
from rush.image.tessellate import EXTENSIONS

logger = logging.getLogger(__name__)


@dataclass
class ImageSummary:
    shapes: List[Tuple[int, int]] = field(default_factory=list)

    @property
    def unique_shapes(self) -> Set[Tuple[int, int]]:
        return set(self.shapes)


def probe_image(path: Path) -> Optional[Tuple[int, int]]:
    """``(height, width)`` read from the header, or ``None`` if unreadable."""
    try:
        with Image.open(path) as img:
            width, height = img.size
    except OSError as exc:
        logger.warning("Error extracting image dimensions of %s: %s", path, exc)
        return None
    return height, width


def summarize(target: Path, jobs: Optional[int] = None) -> ImageSummary:
    jobs = resolve_jobs(jobs)
    files = collect_inputs(target, EXTENSIONS)
    if not files:
        raise InvalidArgumentError(f"No admissible image files detected under {target}")
    with ThreadPoolExecutor(max_workers=jobs) as executor:
        shapes = [s for s in executor.map(probe_image, files) if s is not None]
    return ImageSummary(shapes=shapes)


def format_summary(summary: ImageSummary) -> str:
    return (
        f"Total files: {len(summary.shapes)}\n"
        f"Unique (height, width) pairs: {sorted(summary.unique_shapes)}"
    )
