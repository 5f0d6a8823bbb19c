"""Rendering of checking failures as human-readable reports.

Every report points into the signature: the signature line is followed by
a caret line underlining the offending type(s) and a line of numeric labels
centred under each underlined span. The numbered value blocks below refer
to those labels::

    Type-variable constraint violation

    a00 :: a -> a -> a
           ^    ^
           1    2

    1)  1 :: Number

    2)  "a" :: String

    Since there is no type of which all the above values are members, the
    type-variable constraint has been violated.
"""

from __future__ import annotations

import itertools
import re
from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from typedsig.checker.classify import determine_types_loose
from typedsig.show import show
from typedsig.signature import num_args
from typedsig.types import Kind, Type

if TYPE_CHECKING:
    from typedsig.checker.bindings import PathKey
    from typedsig.errors import (
        ArityViolation,
        InvalidValue,
        Path,
        TypeClassViolation,
        TypeVariableViolation,
        UnrecognizedValue,
    )
    from typedsig.signature import Signature
    from typedsig.typeclasses import TypeClass

type Formatter = Callable[[str], str]
# Chooses the formatter for the type found at a path within one position
type Decorate = Callable[[Type, Path], Formatter]
type RenderPosition = Callable[[int, Formatter], str]
type ConstraintFilter = Callable[[TypeClass, str], bool]

_VIOLATION_EXPLANATION = (
    "Since there is no type of which all the above values are members, "
    "the type-variable constraint has been violated.\n"
)


def _identity(s: str) -> str:
    return s


def _blank(s: str) -> str:
    return " " * len(s)


def _carets(s: str) -> str:
    return "^" * len(s)


def _label(text: str) -> Formatter:
    def centred(s: str) -> str:
        delta = len(s) - len(text)
        return " " * (delta // 2) + text + " " * (delta - delta // 2)

    return centred


def _trim_trailing_spaces(s: str) -> str:
    return re.sub(r" +$", "", s, flags=re.MULTILINE)


def _no_constraint(_type_class: TypeClass, _variable: str) -> bool:
    return False


# =============================================================================
# Signatures
# =============================================================================


def _format_constraints(
    signature: Signature,
    outer: Formatter,
    decorate: Callable[[TypeClass, str], Formatter],
) -> str:
    reprs = [
        decorate(type_class, variable)(f"{type_class.name} {variable}")
        for variable in sorted(signature.constraints)
        for type_class in signature.constraints[variable]
    ]
    if not reprs:
        return ""
    if len(reprs) == 1:
        return reprs[0] + outer(" => ")
    return outer("(") + outer(", ").join(reprs) + outer(") => ")


def type_signature(signature: Signature) -> str:
    """Render e.g. ``concat :: Semigroup a => a -> a -> a``."""
    constraints = _format_constraints(
        signature, _identity, lambda _tc, _var: _identity
    )
    positions = " -> ".join(
        signature.show_position(i) for i in range(len(signature.types))
    )
    return f"{signature.name} :: {constraints}{positions}"


def _underline_type(t: Type, path: Path, decorate: Decorate, *, top: bool) -> str:
    def inner(key: str) -> Formatter:
        child = t.param(key).type
        return lambda _s: _underline_type(child, (*path, key), decorate, top=False)

    s = t.format(_blank, inner)
    if top and t.kind is Kind.FUNCTION:
        s = _blank("(") + s + _blank(")")
    return decorate(t, path)(s)


def _line(
    signature: Signature,
    f: Formatter,
    underline_constraint: ConstraintFilter,
    render_position: RenderPosition,
) -> str:
    head = _blank(f"{signature.name} :: ")
    constraints = _format_constraints(
        signature,
        _blank,
        lambda tc, var: f if underline_constraint(tc, var) else _blank,
    )
    positions = _blank(" -> ").join(
        render_position(i, f) for i in range(len(signature.types))
    )
    return head + constraints + positions


def _underline(
    signature: Signature,
    underline_constraint: ConstraintFilter,
    render_position: RenderPosition,
) -> str:
    counter = itertools.count(1)

    def number(s: str) -> str:
        return _label(str(next(counter)))(s)

    carets = _line(signature, _carets, underline_constraint, render_position)
    numbers = _line(signature, number, _no_constraint, render_position)
    return f"{type_signature(signature)}\n{carets}\n{numbers}\n"


def _positions(
    signature: Signature, decorate_for: Callable[[int, Formatter], Decorate]
) -> RenderPosition:
    def render(index: int, f: Formatter) -> str:
        return _underline_type(
            signature.types[index], (), decorate_for(index, f), top=True
        )

    return render


def _target(index: int, path: Path) -> Callable[[int, Formatter], Decorate]:
    """Underline exactly the type at `index`/`path`."""
    target: PathKey = (index, *path)

    def decorate_for(i: int, f: Formatter) -> Decorate:
        def decorate(_t: Type, p: Path) -> Formatter:
            current: PathKey = (i, *p)
            if current == target:
                return f
            if target[: len(current)] == current:
                return _identity
            return _blank

        return decorate

    return decorate_for


def _type_variables(
    values_by_path: Mapping[PathKey, Sequence[Any]],
) -> Callable[[int, Formatter], Decorate]:
    """Underline each type variable at a path that has observed values."""
    observed = {key for key, values in values_by_path.items() if values}

    def decorate_for(i: int, f: Formatter) -> Decorate:
        def decorate(t: Type, p: Path) -> Formatter:
            current: PathKey = (i, *p)
            if t.kind is Kind.VARIABLE and current in observed:
                return f
            if any(key[: len(current)] == current for key in observed):
                return _identity
            return _blank

        return decorate

    return decorate_for


def visible_path(t: Type, path: Path) -> Path:
    """Longest prefix of `path` whose types appear in the rendering of `t`.

    A named record renders as its name only, so a path into its fields
    stops at the record.
    """
    visible: list[str] = []
    for key in path:
        if (t.kind is Kind.RECORD and t.name) or key not in t.keys:
            break
        visible.append(key)
        t = t.param(key).type
    return tuple(visible)


def type_at(t: Type, path: Path) -> Type:
    for key in path:
        if key not in t.keys:
            break
        t = t.param(key).type
    return t


# =============================================================================
# Values
# =============================================================================


def _show_types(env: Sequence[Type], value: Any) -> str:
    types = determine_types_loose(env, [value])
    return ", ".join(map(str, types)) or "(no types)"


def _show_values_and_types(
    env: Sequence[Type], values: Sequence[Any], number: int
) -> str:
    lines = [f"{show(value)} :: {_show_types(env, value)}" for value in values]
    return f"{number})  " + "\n    ".join(lines)


def _see(url: str, name: str, what: str) -> str:
    if not url:
        return ""
    return f"\nSee {url} for information about the {name} {what}.\n"


# =============================================================================
# Reports
# =============================================================================


def render_invalid_value(error: InvalidValue) -> str:
    signature = error.signature
    declared = signature.types[error.index]
    path = visible_path(declared, error.path)
    expected = type_at(declared, error.path)
    return _trim_trailing_spaces(
        "Invalid value\n\n"
        + _underline(
            signature, _no_constraint, _positions(signature, _target(error.index, path))
        )
        + "\n"
        + _show_values_and_types(error.env, [error.value], 1)
        + "\n\n"
        + f"The value at position 1 is not a member of ‘{expected}’.\n"
        + _see(expected.url, expected.name or str(expected), "type")
    )


def render_type_variable_violation(error: TypeVariableViolation) -> str:
    signature = error.signature
    text = "Type-variable constraint violation\n\n" + _underline(
        signature,
        _no_constraint,
        _positions(signature, _type_variables(error.values_by_path)),
    )
    blocks = [values for values in error.values_by_path.values() if values]
    for number, values in enumerate(blocks, start=1):
        text += "\n" + _show_values_and_types(error.env, values, number) + "\n"
    return _trim_trailing_spaces(text + "\n" + _VIOLATION_EXPLANATION)


def render_unrecognized_value(error: UnrecognizedValue) -> str:
    signature = error.signature
    observed = {(error.index, *error.path): (error.value,)}
    text = (
        "Unrecognized value\n\n"
        + _underline(
            signature, _no_constraint, _positions(signature, _type_variables(observed))
        )
        + "\n"
        + f"1)  {show(error.value)} :: (no types)\n\n"
    )
    if not error.env:
        text += (
            "The environment is empty! "
            "Polymorphic functions require a non-empty environment.\n"
        )
    else:
        text += (
            "The value at position 1 is not a member of any type in the "
            "environment.\n\n"
            "The environment contains the following types:\n\n"
            + "".join(f"  - {t}\n" for t in error.env)
        )
    return _trim_trailing_spaces(text)


def render_type_class_violation(error: TypeClassViolation) -> str:
    signature = error.signature
    type_class = error.type_class

    def violated(tc: TypeClass, variable: str) -> bool:
        return tc == type_class and variable == error.variable

    return _trim_trailing_spaces(
        "Type-class constraint violation\n\n"
        + _underline(
            signature, violated, _positions(signature, _target(error.index, error.path))
        )
        + "\n"
        + _show_values_and_types(error.env, [error.value], 1)
        + "\n\n"
        + f"‘{signature.name}’ requires ‘{error.variable}’ to satisfy the "
        + f"{type_class.name} type-class constraint; "
        + "the value at position 1 does not.\n"
        + _see(type_class.url, type_class.name, "type class")
    )


def render_arity_violation(error: ArityViolation) -> str:
    signature = error.signature
    if error.index is None:
        return (
            f"‘{signature.name}’ requires {num_args(error.expected)}; "
            f"received {num_args(len(error.received))}"
        )
    index = error.index
    declared = signature.types[index]

    def render(i: int, f: Formatter) -> str:
        shown = signature.show_position(i)
        if i != index:
            return _blank(shown)
        arguments = declared.format_arguments()
        return _blank("(") + f(arguments) + _blank(shown[1 + len(arguments) :])

    received = error.received
    listing = (
        ":\n\n" + "".join(f"  - {show(value)}\n" for value in received)
        if received
        else ".\n"
    )
    return _trim_trailing_spaces(
        f"‘{signature.name}’ applied ‘{declared}’ to the wrong number of arguments\n\n"
        + _underline(signature, _no_constraint, render)
        + "\n"
        + f"Expected {num_args(error.expected)} but received "
        + num_args(len(received))
        + listing
    )
