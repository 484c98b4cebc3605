"""Resize images to a fixed ``height`` × ``width``."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List

from PIL import Image

from rush.errors import InvalidArgumentError, MediaIOError
from rush.image.tessellate import EXTENSIONS
from rush.operations.base import BaseOperation

logger = logging.getLogger(__name__)


def resize_file(path: Path, height: int, width: int, output: Path) -> Path:
    try:
        with Image.open(path) as img:
            resized = img.resize((width, height), Image.Resampling.LANCZOS)
    except OSError as exc:
        raise MediaIOError(f"Can't open image: {path}") from exc
    try:
        resized.save(output)
    except (OSError, ValueError) as exc:
        raise MediaIOError(f"Couldn't save image to {output}") from exc
    logger.debug("Resized %s to %dx%d", path, height, width)
    return output


class ResizeOperation(BaseOperation):
    extensions = EXTENSIONS
    output_kind = "file"

    def __init__(self, height: int, width: int, overwrite: bool = False) -> None:
        super().__init__(overwrite=overwrite)
        self.height = int(height)
        self.width = int(width)

    @property
    def name(self) -> str:
        return "image.resize"

    def validate(self) -> None:
        if self.height < 1 or self.width < 1:
            raise InvalidArgumentError(
                f"Height and width must be >= 1, got {self.height}x{self.width}"
            )

    def params(self) -> Dict[str, Any]:
        return {"height": self.height, "width": self.width, "overwrite": self.overwrite}

    def process_file(self, path: Path, output: Path) -> List[Path]:
        self.guard_overwrite(path, output)
        return [resize_file(path, self.height, self.width, output)]
