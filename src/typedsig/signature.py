"""Declared function signatures."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field

from typedsig.errors import ArityLimitError, ConstructionError
from typedsig.show import show
from typedsig.typeclasses import TypeClass
from typedsig.types import Kind, Type

# Largest number of parameters a declared function may take
MAX_ARITY = 10

_ARITY_WORDS = (
    "zero",
    "one",
    "two",
    "three",
    "four",
    "five",
    "six",
    "seven",
    "eight",
    "nine",
    "ten",
)


def num_args(n: int) -> str:
    """Spell out an argument count, e.g. ``num_args(2) == "two arguments"``."""
    word = _ARITY_WORDS[n] if 0 <= n < len(_ARITY_WORDS) else str(n)
    return f"{word} argument" if n == 1 else f"{word} arguments"


@dataclass(frozen=True)
class Signature:
    """Name, type-class constraints and positional types of a function.

    The last entry of `types` is the return type; the others are the
    parameters, in declaration order.
    """

    name: str
    constraints: Mapping[str, tuple[TypeClass, ...]] = field(default_factory=dict)
    types: tuple[Type, ...] = ()

    @classmethod
    def declare(
        cls,
        name: str,
        constraints: Mapping[str, TypeClass | Iterable[TypeClass]],
        types: Sequence[Type],
    ) -> Signature:
        """Validate a declaration and build its signature.

        Raises:
            ConstructionError: If a component is malformed.
            ArityLimitError: If more than `MAX_ARITY` parameters are declared.
        """
        if not isinstance(name, str):
            msg = f"Invalid function name: {show(name)} (expected str)"
            raise ConstructionError(msg)
        if not isinstance(constraints, Mapping):
            msg = f"Invalid constraints for ‘{name}’: expected a mapping"
            raise ConstructionError(msg)
        normalized: dict[str, tuple[TypeClass, ...]] = {}
        for var, classes in constraints.items():
            group = (classes,) if isinstance(classes, TypeClass) else tuple(classes)
            if not all(isinstance(tc, TypeClass) for tc in group):
                msg = f"Invalid constraint on ‘{var}’ in ‘{name}’: expected TypeClass"
                raise ConstructionError(msg)
            normalized[var] = group
        declared = tuple(types)
        if not declared or not all(isinstance(t, Type) for t in declared):
            msg = f"‘{name}’ must declare a sequence of types ending in the return type"
            raise ConstructionError(msg)
        if len(declared) - 1 > MAX_ARITY:
            msg = (
                "‘define’ cannot define a function with arity greater than "
                f"{_ARITY_WORDS[MAX_ARITY]}"
            )
            raise ArityLimitError(msg)
        return cls(name, normalized, declared)

    @property
    def arity(self) -> int:
        return len(self.types) - 1

    @property
    def params(self) -> tuple[Type, ...]:
        return self.types[:-1]

    @property
    def returns(self) -> Type:
        return self.types[-1]

    def show_position(self, index: int) -> str:
        """Render the type at one position as it appears in the signature."""
        t = self.types[index]
        return f"({t})" if t.kind is Kind.FUNCTION else str(t)

    def __str__(self) -> str:
        from typedsig.checker.diagnostics import type_signature  # noqa: PLC0415

        return type_signature(self)
