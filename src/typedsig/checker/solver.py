"""Constraint resolution for type variables across the positions of a call.

`satisfactory_types` checks a group of values against an expected type.
Concrete parts are checked by membership; each type variable met along the
way narrows its binding to the types every value seen so far belongs to.
Failures raise the structured errors of `typedsig.errors`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from typedsig.checker.bindings import Binding, BindingTable
from typedsig.checker.classify import (
    apply_candidates,
    determine_types_loose,
    determine_types_strict,
    expand_unknown,
)
from typedsig.checker.validate import is_consistent, is_member, validate
from typedsig.errors import (
    CheckError,
    InvalidValue,
    TypeClassViolation,
    TypeVariableViolation,
    UnrecognizedValue,
)
from typedsig.signature import Signature
from typedsig.types import Kind, Param, Type

if TYPE_CHECKING:
    from collections.abc import Sequence

    from typedsig.checker.bindings import PathKey
    from typedsig.errors import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    """Successful check: the updated table and the types the values satisfy."""

    bindings: BindingTable
    types: tuple[Type, ...]


def satisfactory_types(  # noqa: PLR0913
    env: Sequence[Type],
    signature: Signature,
    bindings: BindingTable,
    expected: Type,
    index: int,
    path: Path,
    values: Sequence[Any],
) -> Resolution:
    """Check `values`, found at `index`/`path`, against `expected`.

    Args:
        env: Environment used to bind type variables.
        signature: Signature being checked, for error reports.
        bindings: Bindings accumulated by earlier checks of the same call.
        expected: Type declared at this position and path.
        index: Position in the signature.
        path: Parameter keys leading from the position to `expected`.
        values: Values observed there.

    Returns:
        The updated bindings and the types the values were found to satisfy.

    Raises:
        InvalidValue: A value fails a concrete part of `expected`.
        TypeClassViolation: A value fails a variable's type-class constraint.
        TypeVariableViolation: A variable's observations share no type.
        UnrecognizedValue: A variable-bound value belongs to no type at all.
    """
    env = tuple(env)
    for value in values:
        if (mismatch := validate(expected, value)) is not None:
            raise InvalidValue(
                env, signature, index, (*path, *mismatch.path), mismatch.value
            )

    match expected.kind:
        case Kind.VARIABLE:
            return _satisfy_variable(
                env, signature, bindings, expected, index, path, values
            )
        case Kind.UNARY | Kind.BINARY:
            candidates: list[tuple[Type, ...]] = []
            for p in expected.params:
                resolution = satisfactory_types(
                    env,
                    signature,
                    bindings,
                    p.type,
                    index,
                    (*path, p.key),
                    _children(p, values),
                )
                bindings = resolution.bindings
                candidates.append(resolution.types or (p.type,))
            return Resolution(bindings, tuple(apply_candidates(expected, candidates)))
        case Kind.RECORD:
            for p in expected.params:
                bindings = satisfactory_types(
                    env,
                    signature,
                    bindings,
                    p.type,
                    index,
                    (*path, p.key),
                    _children(p, values),
                ).bindings
            return Resolution(bindings, (expected,))
        case _:
            return Resolution(bindings, (expected,))


def _children(p: Param, values: Sequence[Any]) -> list[Any]:
    return [child for value in values for child in p.extract(value)]


def _satisfy_variable(  # noqa: PLR0913
    env: tuple[Type, ...],
    signature: Signature,
    bindings: BindingTable,
    variable: Type,
    index: int,
    path: Path,
    values: Sequence[Any],
) -> Resolution:
    for value in values:
        for type_class in signature.constraints.get(variable.name, ()):
            if not type_class.test(value):
                raise TypeClassViolation(
                    env, signature, type_class, variable.name, index, path, value
                )

    bindings = update_bindings(env, bindings, variable, index, path, values)
    binding = bindings[variable.name]
    if not binding.types:
        if not values:
            return Resolution(bindings, ())
        raise variable_failure(env, signature, index, path, binding)

    # The trailing parameters of each admissible type line up with the
    # variable's own parameters: `f a` matched against `Pair x y` checks `a`
    # against the children extracted for `y`.
    for t in binding.types:
        trailing = t.params[len(t.params) - len(variable.params) :]
        for var_param, t_param in zip(variable.params, trailing, strict=True):
            bindings = satisfactory_types(
                env,
                signature,
                bindings,
                var_param.type,
                index,
                (*path, var_param.key),
                _children(t_param, values),
            ).bindings
    return Resolution(bindings, binding.types)


def update_bindings(  # noqa: PLR0913
    env: Sequence[Type],
    bindings: BindingTable,
    variable: Type,
    index: int,
    path: Path,
    values: Sequence[Any],
) -> BindingTable:
    """Narrow `variable`'s binding by `values` observed at `index`/`path`.

    A variable seen for the first time starts from every environment type
    with at least as many parameters as the variable. Nullary variables
    resolve `Unknown` parameters from the values' children; parametric
    variables keep the bare shapes.

    Returns:
        A new table; `bindings` is left untouched.
    """
    binding = bindings.get(variable.name)
    if binding is None:
        binding = Binding(tuple(t for t in env if t.arity >= variable.arity))
    key: PathKey = (index, *path)
    binding = binding.observe(key, tuple(values))

    types = binding.types
    for value in values:
        narrowed: list[Type] = []
        for t in types:
            if not is_member(t, value):
                continue
            if variable.arity == 0 and t.kind in (Kind.UNARY, Kind.BINARY):
                candidates = [_expand_strict(env, value, p) for p in t.params]
                narrowed.extend(apply_candidates(t, candidates))
            else:
                narrowed.append(t)
        types = tuple(dict.fromkeys(narrowed))

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "‘%s’ narrowed to [%s] at %s",
            variable.name,
            ", ".join(map(str, types)),
            key,
        )
    return bindings.bind(variable.name, binding.narrow(types))


def _expand_strict(env: Sequence[Type], value: Any, p: Param) -> list[Type]:
    return [t for t in expand_unknown(env, frozenset(), value, p) if is_consistent(t)]


def variable_failure(
    env: tuple[Type, ...],
    signature: Signature,
    index: int,
    path: Path,
    binding: Binding,
) -> CheckError:
    """Build the error for a variable whose admissible types ran out.

    Positions whose values are still compatible with those at the failing
    position are left out of the report.
    """
    key: PathKey = (index, *path)
    values = binding.values_by_path[key]
    if len(values) == 1 and not determine_types_loose(env, values):
        error: CheckError = UnrecognizedValue(env, signature, index, path, values[0])
    else:
        conflicting = {
            k: vs
            for k, vs in sorted(
                binding.values_by_path.items(),
                key=lambda kv: _path_order(signature, kv[0]),
            )
            if k == key or not determine_types_strict(env, [*values, *vs])
        }
        error = TypeVariableViolation(env, signature, index, path, conflicting)
    logger.debug("%s check failed with %s at %s", signature.name, error.kind, key)
    return error


def _path_order(signature: Signature, key: PathKey) -> tuple[int, ...]:
    # Keys in declaration order, so `$2` comes before `$10`.
    index, *path = key
    t = signature.types[int(index)]
    order = [int(index)]
    for k in path:
        if k not in t.keys:
            order.append(len(t.keys))
            continue
        order.append(t.keys.index(str(k)))
        t = t.param(str(k)).type
    return tuple(order)


def test(env: Sequence[Type], t: Type, value: Any) -> bool:
    """Whether `value` is a member of `t`, type variables included.

    Type variables inside `t` must be bound consistently: ``Array a``
    accepts ``[1, 2]`` but not ``[1, "x"]``.
    """
    signature = Signature("test", {}, (t,))
    try:
        satisfactory_types(env, signature, BindingTable(), t, 0, (), [value])
    except CheckError:
        return False
    return True
