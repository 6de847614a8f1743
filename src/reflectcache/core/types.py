"""Core type definitions for reflectcache."""

from collections.abc import Callable
from typing import Any

type Getter[R] = Callable[[Any], R]
"""Compiled read accessor: ``getter(target) -> value``.

Static members ignore the target, so ``None`` is accepted there.
"""

type Setter[V] = Callable[[Any, V], None]
"""Compiled write accessor: ``setter(target, value)``."""

type Factory[T] = Callable[[], T]
"""Cached no-argument constructor."""


class InvalidArgumentError(ValueError):
    """Raised for invalid usage: missing type, empty name, illegal conversion, no match."""

    pass
