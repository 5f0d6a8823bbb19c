"""Membership checking of a single value against a single type."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from typedsig.types import MISSING, Kind, has_field

if TYPE_CHECKING:
    from typedsig.errors import Path
    from typedsig.types import Type


@dataclass(frozen=True)
class Mismatch:
    """First value found not to belong, and the path leading to it."""

    value: Any
    path: Path = ()


def validate(t: Type, value: Any) -> Mismatch | None:
    """Check `value` against `t` and every ancestor of `t`.

    Ancestors are checked first and report the whole value. Then the type's
    own predicate, then record field presence, then the children of each
    parameter in key order. Type variables and `Unknown` accept anything.

    Returns:
        None when `value` is a member, otherwise the first mismatch.
    """
    for supertype in t.supertypes:
        if validate(supertype, value) is not None:
            return Mismatch(value)
    if not t.test(value):
        return Mismatch(value)
    if t.kind is Kind.RECORD:
        for key in t.keys:
            if not has_field(value, key):
                return Mismatch(MISSING, (key,))
    for p in t.params:
        for child in p.extract(value):
            if (mismatch := validate(p.type, child)) is not None:
                return Mismatch(mismatch.value, (p.key, *mismatch.path))
    return None


def is_member(t: Type, value: Any) -> bool:
    return validate(t, value) is None


def is_consistent(t: Type) -> bool:
    """Whether `t` contains no `Inconsistent` anywhere in its parameters."""
    if t.kind is Kind.INCONSISTENT:
        return False
    if t.kind in (Kind.UNARY, Kind.BINARY):
        return all(is_consistent(p) for p in t.types)
    return True


def is_settled(t: Type) -> bool:
    """Whether `t` contains no `Unknown` anywhere in its parameters."""
    if t.kind is Kind.UNKNOWN:
        return False
    if t.kind in (Kind.UNARY, Kind.BINARY):
        return all(is_settled(p) for p in t.types)
    return True
