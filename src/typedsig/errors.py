"""Error types raised while declaring and checking signatures.

Every checking failure is a `CheckError` (itself a `TypeError`). The
structured failures keep the data needed to explain themselves and render
their report lazily through `str()`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from typedsig.checker.bindings import PathKey
    from typedsig.signature import Signature
    from typedsig.typeclasses import TypeClass
    from typedsig.types import Type

type Path = tuple[str, ...]


class CheckError(TypeError):
    """Base class for signature checking failures."""

    kind: ClassVar[str] = "CheckError"


class ConstructionError(CheckError):
    """A type or signature declaration is malformed."""

    kind: ClassVar[str] = "ConstructionError"


class ArityLimitError(ValueError):
    """A signature declares more parameters than a function may take."""

    kind: ClassVar[str] = "ArityLimitError"


@dataclass(eq=False)
class InvalidValue(CheckError):
    """A value at a concrete position is not a member of the expected type."""

    kind: ClassVar[str] = "InvalidValue"

    env: tuple[Type, ...] = field(repr=False)
    signature: Signature
    index: int
    path: Path
    value: Any

    def __str__(self) -> str:
        from typedsig.checker.diagnostics import render_invalid_value  # noqa: PLC0415

        return render_invalid_value(self)


@dataclass(eq=False)
class TypeVariableViolation(CheckError):
    """The values observed for one type variable share no common type.

    `values_by_path` holds only the positions that conflict with the
    position at which the violation was detected, plus that position.
    """

    kind: ClassVar[str] = "TypeVariableViolation"

    env: tuple[Type, ...] = field(repr=False)
    signature: Signature
    index: int
    path: Path
    values_by_path: dict[PathKey, tuple[Any, ...]]

    def __str__(self) -> str:
        from typedsig.checker.diagnostics import (  # noqa: PLC0415
            render_type_variable_violation,
        )

        return render_type_variable_violation(self)


@dataclass(eq=False)
class UnrecognizedValue(CheckError):
    """A value bound to a type variable belongs to no type in the environment."""

    kind: ClassVar[str] = "UnrecognizedValue"

    env: tuple[Type, ...] = field(repr=False)
    signature: Signature
    index: int
    path: Path
    value: Any

    def __str__(self) -> str:
        from typedsig.checker.diagnostics import (  # noqa: PLC0415
            render_unrecognized_value,
        )

        return render_unrecognized_value(self)


@dataclass(eq=False)
class TypeClassViolation(CheckError):
    """A value does not satisfy a type-class constraint on its variable."""

    kind: ClassVar[str] = "TypeClassViolation"

    env: tuple[Type, ...] = field(repr=False)
    signature: Signature
    type_class: TypeClass
    variable: str
    index: int
    path: Path
    value: Any

    def __str__(self) -> str:
        from typedsig.checker.diagnostics import (  # noqa: PLC0415
            render_type_class_violation,
        )

        return render_type_class_violation(self)


@dataclass(eq=False)
class ArityViolation(CheckError):
    """A function was applied to the wrong number of arguments.

    `index` is None for the declared function itself, or the position of a
    function-typed argument whose wrapped value was misapplied.
    """

    kind: ClassVar[str] = "ArityViolation"

    signature: Signature
    index: int | None
    expected: int
    received: tuple[Any, ...]

    def __str__(self) -> str:
        from typedsig.checker.diagnostics import (  # noqa: PLC0415
            render_arity_violation,
        )

        return render_arity_violation(self)
