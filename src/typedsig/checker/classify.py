"""Classification of runtime values against an environment of types.

Given a group of values, find every environment type of which all of them
are members, refining the parameters of unary and binary types from the
children the values contain. `Array` applied to ``[[1], [2]]`` classifies
as `Array (Array Number)` rather than `Array ???`.
"""

from __future__ import annotations

import itertools
from typing import TYPE_CHECKING, Any

from typedsig.checker.validate import is_consistent, is_member, is_settled
from typedsig.types import (
    INCONSISTENT,
    UNKNOWN,
    Kind,
    Param,
    Type,
    nullary_type,
    type_eq,
    type_tag,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

_ATOMS = (type(None), bool, int, float, complex, str, bytes)


def determine_types(
    env: Sequence[Type], seen: frozenset[int], values: Sequence[Any]
) -> list[Type]:
    """Return the environment types shared by all `values`.

    Args:
        env: Candidate types, in environment order.
        seen: Identities of the containers on the current traversal path.
        values: Values to classify.

    Returns:
        ``[UNKNOWN]`` for no values, the shared types when there are some,
        an ad-hoc type when the values share only an explicit foreign tag,
        and ``[INCONSISTENT]`` otherwise.
    """
    if not values:
        return [UNKNOWN]
    types: list[Type] = list(env)
    for value in values:
        types = _refine(env, seen, types, value)
    if types:
        return _distinct(types)
    if (foreign := _foreign_type(values)) is not None:
        return [foreign]
    return [INCONSISTENT]


def determine_types_strict(env: Sequence[Type], values: Sequence[Any]) -> list[Type]:
    """Shared types, dropping any that are inconsistent at any depth."""
    return [
        t
        for t in determine_types(env, frozenset(), values)
        if t.kind is not Kind.UNKNOWN and is_consistent(t)
    ]


def determine_types_loose(env: Sequence[Type], values: Sequence[Any]) -> list[Type]:
    """Shared types, dropping only a bare `Inconsistent` or `Unknown` result."""
    return [
        t
        for t in determine_types(env, frozenset(), values)
        if t.kind not in (Kind.UNKNOWN, Kind.INCONSISTENT)
    ]


def expand_unknown(
    env: Sequence[Type], seen: frozenset[int], value: Any, p: Param
) -> list[Type]:
    """Candidate types for one parameter of a type `value` belongs to.

    A parameter with `Unknown` anywhere in it is filled in from the
    classification of the children extracted from `value`, so
    `Array ???` and `Array (Array ???)` both narrow on later evidence. A
    fully known parameter is kept.
    """
    if is_settled(p.type):
        return [p.type]
    found = determine_types(env, seen, list(p.extract(value)))
    merged = [m for t in found if (m := merge_shapes(p.type, t)) is not None]
    return _distinct(merged) or [p.type]


def merge_shapes(partial: Type, actual: Type) -> Type | None:
    """Fill the `Unknown` leaves of `partial` from `actual`.

    Returns None when the two disagree on a part `partial` already knows.
    """
    if partial.kind is Kind.UNKNOWN or actual.kind is Kind.INCONSISTENT:
        return actual
    if actual.kind is Kind.UNKNOWN or partial == actual:
        return partial
    if (
        partial.kind not in (Kind.UNARY, Kind.BINARY)
        or partial.kind is not actual.kind
        or partial.name != actual.name
    ):
        return None
    params = [
        merge_shapes(p, a) for p, a in zip(partial.types, actual.types, strict=True)
    ]
    if any(p is None for p in params):
        return None
    return partial(*params)


def apply_candidates(
    t: Type, candidates: Sequence[Iterable[Type]]
) -> list[Type]:
    """Re-apply `t` to every combination of candidate parameter types."""
    return [t(*combo) for combo in itertools.product(*candidates)]


def _refine(
    env: Sequence[Type], seen: frozenset[int], types: list[Type], value: Any
) -> list[Type]:
    if not isinstance(value, _ATOMS):
        if id(value) in seen:
            return []
        seen = seen | {id(value)}
    refined: list[Type] = []
    for t in types:
        if not is_member(t, value):
            continue
        if t.kind in (Kind.UNARY, Kind.BINARY):
            candidates = [expand_unknown(env, seen, value, p) for p in t.params]
            refined.extend(apply_candidates(t, candidates))
        else:
            refined.append(t)
    return refined


def _distinct(types: Iterable[Type]) -> list[Type]:
    return list(dict.fromkeys(types))


def _foreign_type(values: Sequence[Any]) -> Type | None:
    tags = {type_tag(value) for value in values}
    if len(tags) != 1:
        return None
    (tag,) = tags
    if tag is None:
        return None
    return nullary_type(tag, "", [], type_eq(tag))
