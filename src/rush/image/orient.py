"""Rotate images so they are landscape (or portrait).

An image already in the requested orientation, or square, is re-saved
unchanged.  Rotation is 90° clockwise.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List

from PIL import Image

from rush.errors import InvalidArgumentError, MediaIOError
from rush.image.tessellate import EXTENSIONS
from rush.operations.base import BaseOperation

logger = logging.getLogger(__name__)

ORIENTATIONS = ("landscape", "portrait")


def needs_rotation(width: int, height: int, orientation: str) -> bool:
    if orientation == "landscape":
        return height > width
    if orientation == "portrait":
        return width > height
    raise InvalidArgumentError(f"Unknown orientation {orientation!r}")


def orient_file(path: Path, orientation: str, output: Path) -> Path:
    try:
        with Image.open(path) as img:
            img.load()
            if needs_rotation(img.width, img.height, orientation):
                result = img.transpose(Image.Transpose.ROTATE_270)
                logger.debug("Rotated %s to %s", path, orientation)
            else:
                result = img.copy()
    except OSError as exc:
        raise MediaIOError(f"Can't open image: {path}") from exc
    try:
        result.save(output)
    except (OSError, ValueError) as exc:
        raise MediaIOError(f"Couldn't save image to {output}") from exc
    return output


class OrientOperation(BaseOperation):
    extensions = EXTENSIONS
    output_kind = "file"

    def __init__(self, orientation: str, overwrite: bool = False) -> None:
        super().__init__(overwrite=overwrite)
        self.orientation = orientation

    @property
    def name(self) -> str:
        return f"image.to_{self.orientation}"

    def validate(self) -> None:
        if self.orientation not in ORIENTATIONS:
            raise InvalidArgumentError(f"Unknown orientation {self.orientation!r}")

    def params(self) -> Dict[str, Any]:
        return {"orientation": self.orientation, "overwrite": self.overwrite}

    def process_file(self, path: Path, output: Path) -> List[Path]:
        self.guard_overwrite(path, output)
        return [orient_file(path, self.orientation, output)]
