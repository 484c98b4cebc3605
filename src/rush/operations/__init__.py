"""rush.operations – batch operation infrastructure.

* :mod:`rush.operations.base` – :class:`BaseOperation` abstract base class
* :mod:`rush.operations.registry` – :class:`OperationRegistry`
* :mod:`rush.operations.builtin` – registers the built-in operations; import
  it before calling :meth:`OperationRegistry.build`
"""
from __future__ import annotations

from rush.operations.base import BaseOperation  # noqa: F401
from rush.operations.registry import OperationRegistry  # noqa: F401

__all__ = ["BaseOperation", "OperationRegistry"]
