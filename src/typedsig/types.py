"""Runtime type descriptors.

A `Type` is an immutable, structurally comparable description of a set of
runtime values. Every descriptor carries a `Kind` tag, and behaviour is
driven by matching on that tag; the membership predicate and the parameter
extractors are plain callables stored on the descriptor.

Parametric descriptors are applied by calling them::

    Array = unary_type("Array", "", [], lambda x: isinstance(x, list), list)
    Array(String)            # Array String
    Array                    # Array ???, usable directly in an environment
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from typedsig.errors import ConstructionError
from typedsig.show import show

type Predicate = Callable[[Any], bool]
type Extractor = Callable[[Any], Iterable[Any]]
type Formatter = Callable[[str], str]

# Class attribute holding a stable identifier for foreign types
TYPE_TAG = "typedsig_type"


class Kind(StrEnum):
    """Closed set of descriptor variants."""

    NULLARY = "NULLARY"
    UNARY = "UNARY"
    BINARY = "BINARY"
    VARIABLE = "VARIABLE"
    ENUM = "ENUM"
    RECORD = "RECORD"
    FUNCTION = "FUNCTION"
    UNKNOWN = "UNKNOWN"
    INCONSISTENT = "INCONSISTENT"
    NO_ARGUMENTS = "NO_ARGUMENTS"


class _Missing:
    """Marker for a record field that is absent from the checked value."""

    def __repr__(self) -> str:
        return "<missing>"


MISSING: Any = _Missing()


def _identity(s: str) -> str:
    return s


def _always(_value: Any) -> bool:
    return True


def _never(_value: Any) -> bool:
    return False


def _no_children(_value: Any) -> list[Any]:
    return []


def _default_inner(_key: str) -> Formatter:
    return _identity


@dataclass(frozen=True)
class Param:
    """One parameter slot of a descriptor: `$1`, `$2` or a record field."""

    key: str
    type: Type
    extract: Extractor = field(default=_no_children, compare=False, repr=False)


@dataclass(frozen=True)
class Type:
    """Runtime type descriptor.

    Equality is structural over kind, name, parameters and enum members.
    The predicate, extractors, url and supertypes do not take part.
    """

    kind: Kind
    name: str = ""
    params: tuple[Param, ...] = ()
    members: tuple[str, ...] = ()
    url: str = field(default="", compare=False, repr=False)
    supertypes: tuple[Type, ...] = field(default=(), compare=False, repr=False)
    predicate: Predicate = field(default=_always, compare=False, repr=False)

    def __call__(self, *types: Type) -> Type:
        """Apply a parametric descriptor to concrete parameter types."""
        if self.kind not in (Kind.UNARY, Kind.BINARY, Kind.VARIABLE) or len(
            types
        ) != len(self.params):
            msg = (
                f"‘{self}’ expects {len(self.params)} type parameter(s); "
                f"received {len(types)}"
            )
            raise ConstructionError(msg)
        _require_types(types, "type parameters")
        return dataclasses.replace(
            self,
            params=tuple(
                dataclasses.replace(p, type=t)
                for p, t in zip(self.params, types, strict=True)
            ),
        )

    def __str__(self) -> str:
        return self.format()

    @property
    def keys(self) -> tuple[str, ...]:
        return tuple(p.key for p in self.params)

    @property
    def types(self) -> tuple[Type, ...]:
        return tuple(p.type for p in self.params)

    @property
    def arity(self) -> int:
        """Number of extractable parameters (0, 1 or 2)."""
        match self.kind:
            case Kind.UNARY:
                return 1
            case Kind.BINARY:
                return 2
            case Kind.VARIABLE:
                return len(self.params)
            case _:
                return 0

    @property
    def needs_parens(self) -> bool:
        """Whether this type must be parenthesized when nested."""
        return self.kind is Kind.FUNCTION or (
            self.kind in (Kind.UNARY, Kind.BINARY, Kind.VARIABLE) and self.arity > 0
        )

    def param(self, key: str) -> Param:
        for p in self.params:
            if p.key == key:
                return p
        msg = f"‘{self}’ has no parameter {key!r}"
        raise KeyError(msg)

    def test(self, value: Any) -> bool:
        """Run this type's own predicate, ignoring supertypes and children."""
        return bool(self.predicate(value))

    def extract(self, key: str, value: Any) -> list[Any]:
        """Return the child values of `value` for parameter `key`."""
        return list(self.param(key).extract(value))

    def format(
        self,
        outer: Formatter = _identity,
        inner: Callable[[str], Formatter] = _default_inner,
    ) -> str:
        """Render the type.

        Args:
            outer: Applied to every literal fragment the type writes itself.
            inner: Called with a parameter key; the result is applied to the
                plain rendering of that parameter's type.

        Returns:
            The rendered type. Nested parametric types are parenthesized.
        """
        match self.kind:
            case Kind.UNKNOWN | Kind.INCONSISTENT:
                return outer("???")
            case Kind.NO_ARGUMENTS:
                return outer("()")
            case Kind.NULLARY:
                return outer(self.name)
            case Kind.ENUM:
                if self.name:
                    return outer(self.name)
                return outer("(" + " | ".join(self.members) + ")")
            case Kind.UNARY | Kind.BINARY | Kind.VARIABLE:
                parts = [outer(self.name)]
                for p in self.params:
                    parts.append(outer(" "))
                    parts.append(_format_child(p, outer, inner, nested=True))
                return "".join(parts)
            case Kind.RECORD:
                if self.name:
                    return outer(self.name)
                return _format_fields(self, outer, inner)
            case Kind.FUNCTION:
                output = self.params[-1]
                return (
                    self.format_arguments(outer, inner)
                    + outer(" -> ")
                    + _format_child(output, outer, inner, nested=False)
                )

    def format_arguments(
        self,
        outer: Formatter = _identity,
        inner: Callable[[str], Formatter] = _default_inner,
    ) -> str:
        """Render the parameter list of a function signature."""
        args = self.params[:-1]
        if not args:
            return outer("()")
        if len(args) == 1:
            return _format_child(args[0], outer, inner, nested=False)
        rendered = outer(", ").join(
            _format_child(p, outer, inner, nested=False) for p in args
        )
        return outer("(") + rendered + outer(")")


def _format_child(
    p: Param,
    outer: Formatter,
    inner: Callable[[str], Formatter],
    *,
    nested: bool,
) -> str:
    s = inner(p.key)(str(p.type))
    parens = p.type.needs_parens if nested else p.type.kind is Kind.FUNCTION
    return outer("(") + s + outer(")") if parens else s


def _format_fields(
    t: Type, outer: Formatter, inner: Callable[[str], Formatter]
) -> str:
    if not t.params:
        return outer("{}")
    reprs = [
        outer(" ")
        + outer(p.key if p.key.isidentifier() else show(p.key))
        + outer(" :: ")
        + inner(p.key)(str(p.type))
        for p in t.params
    ]
    return outer("{") + outer(",").join(reprs) + outer(" }")


# =============================================================================
# Field access and foreign tags
# =============================================================================


def has_field(value: Any, key: str) -> bool:
    if isinstance(value, Mapping):
        return key in value
    return hasattr(value, key)


def get_field(value: Any, key: str) -> Any:
    if isinstance(value, Mapping):
        return value[key]
    return getattr(value, key)


def type_tag(value: Any) -> str | None:
    """Return the explicit foreign type identifier of `value`, if any."""
    tag = getattr(type(value), TYPE_TAG, None)
    return tag if isinstance(tag, str) else None


def type_eq(tag: str) -> Predicate:
    """Build a predicate matching values whose foreign tag equals `tag`."""
    return lambda value: type_tag(value) == tag


# =============================================================================
# Constructors
# =============================================================================


def _require_types(items: Iterable[Any], what: str) -> None:
    bad = [x for x in items if not isinstance(x, Type)]
    if bad:
        msg = f"Invalid {what}: {', '.join(show(x) for x in bad)} (expected Type)"
        raise ConstructionError(msg)


def _require_callable(fn: Any, what: str) -> None:
    if not callable(fn):
        msg = f"Invalid {what}: {show(fn)} is not callable"
        raise ConstructionError(msg)


def _require_name(name: Any) -> None:
    if not isinstance(name, str):
        msg = f"Invalid type name: {show(name)} (expected str)"
        raise ConstructionError(msg)


def nullary_type(
    name: str, url: str, supertypes: Sequence[Type], test: Predicate
) -> Type:
    """Type with no parameters, e.g. `Number`."""
    _require_name(name)
    _require_types(supertypes, "supertypes")
    _require_callable(test, "predicate")
    return Type(
        kind=Kind.NULLARY,
        name=name,
        url=url,
        supertypes=tuple(supertypes),
        predicate=test,
    )


def unary_type(
    name: str,
    url: str,
    supertypes: Sequence[Type],
    test: Predicate,
    extract: Extractor,
) -> Type:
    """Type with one parameter, e.g. `Array a`. Returned applied to `Unknown`."""
    _require_name(name)
    _require_types(supertypes, "supertypes")
    _require_callable(test, "predicate")
    _require_callable(extract, "extractor for $1")
    return Type(
        kind=Kind.UNARY,
        name=name,
        params=(Param("$1", UNKNOWN, extract),),
        url=url,
        supertypes=tuple(supertypes),
        predicate=test,
    )


def binary_type(  # noqa: PLR0913
    name: str,
    url: str,
    supertypes: Sequence[Type],
    test: Predicate,
    extract1: Extractor,
    extract2: Extractor,
) -> Type:
    """Type with two parameters, e.g. `Pair a b`. Returned applied to `Unknown`."""
    _require_name(name)
    _require_types(supertypes, "supertypes")
    _require_callable(test, "predicate")
    _require_callable(extract1, "extractor for $1")
    _require_callable(extract2, "extractor for $2")
    return Type(
        kind=Kind.BINARY,
        name=name,
        params=(Param("$1", UNKNOWN, extract1), Param("$2", UNKNOWN, extract2)),
        url=url,
        supertypes=tuple(supertypes),
        predicate=test,
    )


def enum_type(name: str, url: str, members: Iterable[Any]) -> Type:
    """Type whose members are listed explicitly and compared by rendering."""
    _require_name(name)
    reprs = tuple(dict.fromkeys(show(m) for m in members))
    return Type(
        kind=Kind.ENUM,
        name=name,
        members=reprs,
        url=url,
        predicate=lambda value: show(value) in reprs,
    )


def _field_extractor(key: str) -> Extractor:
    return lambda value: [get_field(value, key)] if has_field(value, key) else []


def _record_params(fields: Any, ctor: str) -> tuple[Param, ...]:
    if not isinstance(fields, Mapping):
        msg = f"The argument to ‘{ctor}’ must be a mapping from field name to type."
        raise ConstructionError(msg)
    invalid = sorted(
        (
            (k, v)
            for k, v in fields.items()
            if not isinstance(k, str) or not isinstance(v, Type)
        ),
        key=lambda kv: show(kv[0]),
    )
    if invalid:
        lines = "".join(f"  - {show(k)}: {show(v)}\n" for k, v in invalid)
        msg = (
            "Invalid values\n\n"
            f"The argument to ‘{ctor}’ must be a mapping from field name to type.\n\n"
            f"The following mappings are invalid:\n\n{lines}"
        )
        raise ConstructionError(msg)
    return tuple(Param(k, fields[k], _field_extractor(k)) for k in sorted(fields))


def _is_present(value: Any) -> bool:
    return value is not None


def record_type(fields: Mapping[str, Type]) -> Type:
    """Structural record type, e.g. `{ x :: Number, y :: Number }`."""
    return Type(
        kind=Kind.RECORD,
        params=_record_params(fields, "record_type"),
        predicate=_is_present,
    )


def named_record_type(
    name: str, url: str, supertypes: Sequence[Type], fields: Mapping[str, Type]
) -> Type:
    """Record type displayed by name instead of by its fields."""
    _require_name(name)
    _require_types(supertypes, "supertypes")
    return Type(
        kind=Kind.RECORD,
        name=name,
        params=_record_params(fields, "named_record_type"),
        url=url,
        supertypes=tuple(supertypes),
        predicate=_is_present,
    )


def type_variable(name: str) -> Type:
    """Nullary type variable, e.g. `a`."""
    _require_name(name)
    return Type(kind=Kind.VARIABLE, name=name)


def unary_type_variable(name: str) -> Type:
    """Type variable with one parameter, e.g. `f a`."""
    _require_name(name)
    return Type(kind=Kind.VARIABLE, name=name, params=(Param("$1", UNKNOWN),))


def binary_type_variable(name: str) -> Type:
    """Type variable with two parameters, e.g. `p a b`."""
    _require_name(name)
    return Type(
        kind=Kind.VARIABLE,
        name=name,
        params=(Param("$1", UNKNOWN), Param("$2", UNKNOWN)),
    )


def function_type(types: Sequence[Type]) -> Type:
    """Function signature; the last type is the return type.

    `function_type([NO_ARGUMENTS, t])` and `function_type([t])` both describe
    a function taking no arguments.
    """
    _require_types(types, "function signature types")
    items = list(types)
    if len(items) == 2 and items[0].kind is Kind.NO_ARGUMENTS:  # noqa: PLR2004
        items = items[1:]
    if not items or any(t.kind is Kind.NO_ARGUMENTS for t in items):
        msg = "A function signature needs a return type and no stray ‘()’"
        raise ConstructionError(msg)
    return Type(
        kind=Kind.FUNCTION,
        params=tuple(Param(f"${i}", t) for i, t in enumerate(items, start=1)),
        predicate=callable,
    )


# =============================================================================
# Sentinels
# =============================================================================

UNKNOWN = Type(kind=Kind.UNKNOWN)
INCONSISTENT = Type(kind=Kind.INCONSISTENT, predicate=_never)
NO_ARGUMENTS = Type(kind=Kind.NO_ARGUMENTS, predicate=_never)
ANY = Type(kind=Kind.NULLARY, name="Any")
