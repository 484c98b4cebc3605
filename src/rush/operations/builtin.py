"""Registers the built-in operations in :class:`OperationRegistry`."""
from __future__ import annotations

from functools import partial

from rush.audio.resample import ResampleOperation
from rush.audio.split import SplitOperation
from rush.audio.trim import TrimOperation
from rush.image.orient import OrientOperation
from rush.image.resize import ResizeOperation
from rush.image.tessellate import TessellateOperation
from rush.operations.registry import OperationRegistry


def _register_builtins() -> None:
    OperationRegistry.register("audio.split", SplitOperation)
    OperationRegistry.register("audio.resample", ResampleOperation)
    OperationRegistry.register("audio.trim", TrimOperation)
    OperationRegistry.register("image.tessellate", TessellateOperation)
    OperationRegistry.register("image.resize", ResizeOperation)
    OperationRegistry.register("image.to_landscape", partial(OrientOperation, "landscape"))
    OperationRegistry.register("image.to_portrait", partial(OrientOperation, "portrait"))


_register_builtins()
