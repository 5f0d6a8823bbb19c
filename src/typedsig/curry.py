"""Declaring functions with checked, curried signatures.

    >>> from typedsig import define
    >>> from typedsig.env import Number
    >>> add = define("add", {}, [Number, Number, Number], lambda x, y: x + y)
    >>> add(1)(2)
    3

`define` also works as a decorator when the implementation is omitted.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

from typedsig.checker.bindings import BindingTable
from typedsig.checker.session import begin_check
from typedsig.config import Options
from typedsig.errors import ArityViolation, ConstructionError
from typedsig.show import show
from typedsig.signature import Signature
from typedsig.typeclasses import TypeClass
from typedsig.types import Type

logger = logging.getLogger(__name__)

type Constraints = Mapping[str, TypeClass | Iterable[TypeClass]]
type Define = Callable[..., Any]


class _Placeholder:
    def __repr__(self) -> str:
        return "__"


# Stands for an argument to be supplied later: f(__, 2)(1) == f(1, 2)
PLACEHOLDER: Any = _Placeholder()
__ = PLACEHOLDER


class CurriedFunction:
    """A declared function, possibly partially applied.

    Holds the signature, the implementation, the arguments collected so far
    (`PLACEHOLDER` where a position is still open) and the bindings they
    produced. Applying it returns a new `CurriedFunction` until every
    position is filled, then runs the implementation.
    """

    def __init__(
        self,
        signature: Signature,
        impl: Callable[..., Any],
        options: Options,
        values: tuple[Any, ...] | None = None,
        bindings: BindingTable | None = None,
    ) -> None:
        self.signature = signature
        self.options = options
        self._impl = impl
        self._values = (
            values if values is not None else (PLACEHOLDER,) * signature.arity
        )
        self._bindings = bindings if bindings is not None else BindingTable()
        self.__name__ = signature.name
        self.__qualname__ = signature.name
        self.__doc__ = impl.__doc__
        self.__wrapped__ = impl

    @property
    def arity(self) -> int:
        """Number of positions still open."""
        return sum(1 for v in self._values if v is PLACEHOLDER)

    def __call__(self, *args: Any) -> Any:
        check_types = self.options.check_types
        remaining = [i for i, v in enumerate(self._values) if v is PLACEHOLDER]
        if check_types and len(args) > len(remaining):
            received = tuple(v for v in self._values if v is not PLACEHOLDER)
            raise ArityViolation(
                self.signature, None, self.signature.arity, received + args
            )

        session = begin_check(self.signature, self.options.env)
        session.bindings = self._bindings
        values = list(self._values)
        for index, arg in zip(remaining, args, strict=False):
            if arg is PLACEHOLDER:
                continue
            values[index] = arg
            if check_types:
                session.check_argument(index, arg)

        if any(v is PLACEHOLDER for v in values):
            return CurriedFunction(
                self.signature,
                self._impl,
                self.options,
                tuple(values),
                session.bindings,
            )
        if not check_types:
            return self._impl(*values)
        result = self._impl(*session.wrap_functions(values))
        return session.check_return(result)

    def __repr__(self) -> str:
        return f"<function {self.signature}>"


def create(options: Options | None = None) -> Define:
    """Return a `define` function bound to `options`.

    Args:
        options: Checking switch and environment; defaults to `Options()`.

    Returns:
        ``define(name, constraints, types, impl=None)``. With `impl` it
        returns the curried function; without, a decorator producing it.

    Raises:
        ConstructionError: From `define`, for a malformed declaration.
        ArityLimitError: From `define`, for more than ten parameters.
    """
    options = Options() if options is None else options

    def define(
        name: str,
        constraints: Constraints,
        types: Sequence[Type],
        impl: Callable[..., Any] | None = None,
    ) -> Any:
        signature = Signature.declare(name, constraints, types)

        def build(fn: Callable[..., Any]) -> CurriedFunction:
            if not callable(fn):
                msg = f"Implementation of ‘{name}’ is not callable: {show(fn)}"
                raise ConstructionError(msg)
            logger.debug("declared %s", signature)
            return CurriedFunction(signature, fn, options)

        return build if impl is None else build(impl)

    return define


define = create(Options.from_environ())
