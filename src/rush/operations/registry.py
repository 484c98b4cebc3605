"""Operation registry: maps dotted operation names to factories.

Usage::

    from rush.operations.registry import OperationRegistry

    op = OperationRegistry.build("image.tessellate", {"n_vertical": 2, "n_horizontal": 2})

Job files pass ``params`` straight from YAML, so :meth:`OperationRegistry.build`
turns a parameter mismatch into :exc:`InvalidArgumentError` naming the
operation instead of a bare ``TypeError`` from the constructor.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, List

from rush.errors import InvalidArgumentError


class OperationRegistry:
    """Built-in operations are registered in :mod:`rush.operations.builtin`."""

    _factories: Dict[str, Callable[..., Any]] = {}

    @classmethod
    def register(cls, name: str, factory: Callable[..., Any]) -> None:
        """Register *factory* under *name*.

        Names look like ``"<domain>.<verb>"`` and can only be taken once.
        """
        domain, _, verb = name.partition(".")
        if not domain or not verb:
            raise ValueError(f"Operation names must look like 'domain.verb', got {name!r}")
        if name in cls._factories:
            raise ValueError(f"Operation {name!r} is already registered")
        cls._factories[name] = factory

    @classmethod
    def build(cls, name: str, params: Dict[str, Any] | None = None) -> Any:
        """Instantiate and return the operation registered under *name*.

        Raises
        ------
        ValueError
            If *name* is not registered.
        InvalidArgumentError
            If *params* do not match the operation's arguments.
        """
        if name not in cls._factories:
            known = ", ".join(sorted(cls._factories)) or "(none registered)"
            raise ValueError(f"Unknown operation {name!r}. Known operations: {known}")
        try:
            return cls._factories[name](**(params or {}))
        except TypeError as exc:
            raise InvalidArgumentError(f"Bad parameters for {name}: {exc}") from exc

    @classmethod
    def names(cls) -> List[str]:
        return sorted(cls._factories)
