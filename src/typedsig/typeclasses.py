"""Type-class constraints.

A type class is a named predicate attached to a type variable in a
signature, e.g. `Semigroup a => a -> a -> a`. Membership is decided by the
predicate alone; there is no instance resolution.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Set
from dataclasses import dataclass, field
from numbers import Number
from typing import Any


@dataclass(frozen=True)
class TypeClass:
    """Named value predicate usable as a constraint on a type variable."""

    name: str
    url: str = ""
    test: Callable[[Any], bool] = field(
        default=lambda _value: True, compare=False, repr=False
    )

    def __str__(self) -> str:
        return self.name


def _is_semigroup(value: Any) -> bool:
    if isinstance(value, (str, bytes, list, tuple)):
        return True
    return callable(getattr(value, "concat", None))


def _is_ord(value: Any) -> bool:
    # Mappings and sets define `<` without being totally ordered.
    if value is None or isinstance(value, (complex, Mapping, Set)):
        return False
    return type(value).__lt__(value, value) is not NotImplemented


def _is_functor(value: Any) -> bool:
    if isinstance(value, (list, dict)):
        return True
    return not isinstance(value, Number) and callable(getattr(value, "map", None))


Semigroup = TypeClass("Semigroup", "", _is_semigroup)
Ord = TypeClass("Ord", "", _is_ord)
Functor = TypeClass("Functor", "", _is_functor)
