"""Remainder-aware partitioning of 1-D extents and 2-D tile grids.

Two ways to cut an extent of ``n`` units (samples, pixels) into pieces:

* :func:`partition_by_count` – exactly ``count`` contiguous pieces whose
  lengths differ by at most one.  The first ``extent % count`` pieces are the
  longer ones, which keeps output names stable across runs.
* :func:`partition_by_size` – pieces of exactly ``size`` units; the last one
  stops at the extent and may be shorter.  Padding it back up to ``size`` is
  the caller's business (see :mod:`rush.audio.split`).

:func:`plan_tiles` combines two count partitions into a row-major grid.

Usage::

    >>> partition_by_count(10, 3)
    [Range(start=0, end=4), Range(start=4, end=7), Range(start=7, end=10)]
"""
from __future__ import annotations

from dataclasses import dataclass
from itertools import accumulate
from typing import List, Optional, Tuple

from rush.errors import InvalidArgumentError


@dataclass(frozen=True)
class Range:
    """Half-open interval ``[start, end)`` of integer indices."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise InvalidArgumentError(
                f"Invalid range [{self.start}, {self.end})"
            )

    @property
    def length(self) -> int:
        return self.end - self.start

    def __len__(self) -> int:
        return self.length

    def as_slice(self) -> slice:
        return slice(self.start, self.end)


@dataclass(frozen=True)
class Tile:
    """One rectangular region of a grid: a vertical × horizontal range pair.

    ``index`` is the row-major position, ``v_idx * n_horizontal + h_idx``.
    """

    index: int
    vertical: Range
    horizontal: Range

    @property
    def width(self) -> int:
        return self.horizontal.length

    @property
    def height(self) -> int:
        return self.vertical.length

    @property
    def box(self) -> Tuple[int, int, int, int]:
        """``(left, upper, right, lower)`` crop box as used by Pillow."""
        return (
            self.horizontal.start,
            self.vertical.start,
            self.horizontal.end,
            self.vertical.end,
        )


def _check_extent(extent: int) -> None:
    if extent < 0:
        raise InvalidArgumentError(f"Extent must be >= 0, got {extent}")


def _ranges_from_lengths(lengths: List[int]) -> List[Range]:
    bounds = [0, *accumulate(lengths)]
    return [Range(s, e) for s, e in zip(bounds, bounds[1:])]


def partition_by_count(extent: int, count: int) -> List[Range]:
    """Split ``[0, extent)`` into exactly *count* contiguous ranges.

    Parameters
    ----------
    extent:
        Total number of units, ``>= 0``.
    count:
        Number of pieces, ``>= 1``.

    Returns
    -------
    list[Range]
        *count* ranges covering ``[0, extent)``.  The first
        ``extent % count`` ranges have length ``extent // count + 1``, the
        rest ``extent // count``.  When ``count > extent`` the trailing
        ranges are empty.

    Raises
    ------
    InvalidArgumentError
        If *count* < 1 or *extent* < 0.
    """
    _check_extent(extent)
    if count < 1:
        raise InvalidArgumentError(f"Piece count must be >= 1, got {count}")

    base, remainder = divmod(extent, count)
    lengths = [base + 1 if i < remainder else base for i in range(count)]
    return _ranges_from_lengths(lengths)


def partition_by_size(extent: int, size: int) -> List[Range]:
    """Split ``[0, extent)`` into ranges of *size* units.

    All ranges but the last have length *size*; the last one ends at
    *extent*.  An empty extent yields no ranges.

    Raises
    ------
    InvalidArgumentError
        If *size* < 1 or *extent* < 0.
    """
    _check_extent(extent)
    if size < 1:
        raise InvalidArgumentError(f"Piece size must be >= 1, got {size}")

    return [Range(start, min(start + size, extent)) for start in range(0, extent, size)]


def partition(
    extent: int, *, count: Optional[int] = None, size: Optional[int] = None
) -> List[Range]:
    """Dispatch to :func:`partition_by_count` or :func:`partition_by_size`.

    Exactly one of *count* / *size* must be given.
    """
    if (count is None) == (size is None):
        raise InvalidArgumentError("Specify exactly one of 'count' or 'size'")
    if count is not None:
        return partition_by_count(extent, count)
    return partition_by_size(extent, size)  # type: ignore[arg-type]


def plan_tiles(
    height: int, width: int, n_vertical: int, n_horizontal: int
) -> List[Tile]:
    """Return the ``n_vertical * n_horizontal`` tiles of a *height* × *width* grid.

    Rows are enumerated in the outer loop and columns in the inner loop, so
    tile ``i`` sits at row ``i // n_horizontal`` and column
    ``i % n_horizontal``.
    """
    vertical = partition_by_count(height, n_vertical)
    horizontal = partition_by_count(width, n_horizontal)
    return [
        Tile(index=v_idx * n_horizontal + h_idx, vertical=v, horizontal=h)
        for v_idx, v in enumerate(vertical)
        for h_idx, h in enumerate(horizontal)
    ]
