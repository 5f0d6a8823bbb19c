"""Checking one call of a declared function, position by position."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from typedsig.checker.bindings import BindingTable
from typedsig.checker.solver import satisfactory_types
from typedsig.errors import ArityViolation
from typedsig.types import Kind

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from typedsig.signature import Signature
    from typedsig.types import Type


@dataclass
class CheckSession:
    """Mutable state of one in-flight call chain.

    The bindings start empty (or from a partial application's snapshot) and
    are replaced as each argument, callback call and return value is
    checked.
    """

    signature: Signature
    env: tuple[Type, ...]
    bindings: BindingTable = field(default_factory=BindingTable)

    def check_argument(self, index: int, value: Any) -> BindingTable:
        """Check the value at one position and record what it binds."""
        return self.check_at(index, (), self.signature.types[index], value)

    def check_return(self, value: Any) -> Any:
        """Check the implementation's result; returns it, wrapped if callable."""
        index = self.signature.arity
        returns = self.signature.returns
        self.check_at(index, (), returns, value)
        return self._wrap(index, returns, value)

    def wrap_functions(self, values: Sequence[Any]) -> list[Any]:
        """Wrap each function-typed argument so its calls are checked too."""
        return [
            self._wrap(index, t, value)
            for index, (t, value) in enumerate(
                zip(self.signature.params, values, strict=True)
            )
        ]

    def _wrap(self, index: int, t: Type, value: Any) -> Any:
        if t.kind is Kind.FUNCTION:
            return CheckedCallback(self, index, value)
        return value

    def check_at(
        self, index: int, path: tuple[str, ...], t: Type, value: Any
    ) -> BindingTable:
        """Check `value` against `t`, found at `index` and `path`."""
        self.bindings = satisfactory_types(
            self.env, self.signature, self.bindings, t, index, path, [value]
        ).bindings
        return self.bindings


class CheckedCallback:
    """A function passed at a function-typed position, checked on every call.

    Arguments and result are checked against the position's declared
    signature using the owning session's live bindings, so a callback's
    result can fix a type variable the outer return type depends on.
    """

    def __init__(
        self, session: CheckSession, index: int, fn: Callable[..., Any]
    ) -> None:
        self._session = session
        self._index = index
        self._fn = fn
        self._type = session.signature.types[index]
        self.__wrapped__ = fn

    def __call__(self, *args: Any) -> Any:
        *params, output = self._type.params
        if len(args) != len(params):
            raise ArityViolation(
                self._session.signature, self._index, len(params), args
            )
        for p, arg in zip(params, args, strict=True):
            self._session.check_at(self._index, (p.key,), p.type, arg)
        result = self._fn(*args)
        self._session.check_at(self._index, (output.key,), output.type, result)
        return result

    def __repr__(self) -> str:
        return f"<checked {self._session.signature.show_position(self._index)}>"


def begin_check(signature: Signature, env: Sequence[Type]) -> CheckSession:
    """Start checking a call of `signature` against `env`."""
    return CheckSession(signature, tuple(env))


def check_argument(session: CheckSession, index: int, value: Any) -> BindingTable:
    """Check `value` at position `index` of the session's signature."""
    return session.check_argument(index, value)


def check_return(session: CheckSession, value: Any) -> Any:
    """Check the return value of the session's call."""
    return session.check_return(value)
