"""Cut images into an ``n_vertical`` × ``n_horizontal`` grid of tiles.

Tiles are written as::

    <stem>_id<i>_w<left>-<right>_h<top>-<bottom><suffix>

where ``i`` is the row-major tile index and the bounds are absolute pixel
coordinates (``w`` = horizontal, ``h`` = vertical).  Downstream tooling
parses these names, so the format is fixed.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Tuple

from PIL import Image

from rush.errors import InvalidArgumentError, MediaIOError
from rush.operations.base import BaseOperation
from rush.partition import Tile, plan_tiles

logger = logging.getLogger(__name__)

EXTENSIONS = ("jpg", "jpeg", "png", "bmp", "gif", "tiff", "tif")


def tile_filename(stem: str, tile: Tile, suffix: str) -> str:
    h, v = tile.horizontal, tile.vertical
    return f"{stem}_id{tile.index}_w{h.start}-{h.end}_h{v.start}-{v.end}{suffix}"


def emit_tiles(
    image: Image.Image, n_vertical: int, n_horizontal: int
) -> List[Tuple[Tile, Image.Image]]:
    """Crop *image* into its grid of tiles, in row-major order.

    Zero-area tiles (more pieces than pixels along an axis) are returned
    like any other tile.
    """
    width, height = image.size
    return [
        (tile, image.crop(tile.box))
        for tile in plan_tiles(height, width, n_vertical, n_horizontal)
    ]


def _open_image(path: Path) -> Image.Image:
    try:
        with Image.open(path) as img:
            img.load()
            return img.copy()
    except OSError as exc:
        raise MediaIOError(f"Can't open image: {path}") from exc


def tessellate_file(
    path: Path, n_vertical: int, n_horizontal: int, output_dir: Path
) -> List[Path]:
    """Tessellate one image into *output_dir*; return the tile paths."""
    image = _open_image(path)
    width, height = image.size
    if n_vertical > height or n_horizontal > width:
        raise InvalidArgumentError(
            f"Cannot cut a {height}x{width} image into "
            f"{n_vertical}x{n_horizontal} non-empty tiles"
        )

    written: List[Path] = []
    for tile, patch in emit_tiles(image, n_vertical, n_horizontal):
        out_path = output_dir / tile_filename(path.stem, tile, path.suffix)
        try:
            patch.save(out_path)
        except (OSError, ValueError) as exc:
            raise MediaIOError(f"Couldn't save image to {out_path}") from exc
        written.append(out_path)

    logger.debug("Tessellated %s into %d tile(s)", path, len(written))
    return written


class TessellateOperation(BaseOperation):
    """``image tessellate``: grid tiles, mirrored folder layout."""

    extensions = EXTENSIONS
    output_kind = "directory"

    def __init__(self, n_vertical: int, n_horizontal: int, delete_original: bool = False) -> None:
        super().__init__(delete_original=delete_original)
        self.n_vertical = int(n_vertical)
        self.n_horizontal = int(n_horizontal)

    @property
    def name(self) -> str:
        return "image.tessellate"

    def validate(self) -> None:
        if self.n_vertical < 1 or self.n_horizontal < 1:
            raise InvalidArgumentError(
                f"Tile counts must be >= 1, got {self.n_vertical}x{self.n_horizontal}"
            )

    def params(self) -> Dict[str, Any]:
        return {
            "n_vertical": self.n_vertical,
            "n_horizontal": self.n_horizontal,
            "delete_original": self.delete_original,
        }

    def process_file(self, path: Path, output: Path) -> List[Path]:
        return tessellate_file(path, self.n_vertical, self.n_horizontal, output)
