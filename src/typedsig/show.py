"""Deterministic rendering of runtime values for diagnostics."""

from __future__ import annotations

import json
import types
from collections.abc import Mapping
from typing import Any

_ATOMS = (type(None), bool, int, float, complex, bytes)
_FUNCTIONS = (
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
)


def show(value: Any) -> str:
    """Render `value`; containers met again on the current path print `<Circular>`."""
    return _show(value, frozenset())


def _show(value: Any, seen: frozenset[int]) -> str:  # noqa: PLR0911
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, _ATOMS):
        return repr(value)
    if isinstance(value, _FUNCTIONS):
        return f"<function {getattr(value, '__qualname__', value.__name__)}>"
    if id(value) in seen:
        return "<Circular>"
    seen = seen | {id(value)}

    def recur(x: Any) -> str:
        return _show(x, seen)

    match value:
        case list():
            return "[" + ", ".join(map(recur, value)) + "]"
        case tuple() if type(value) is tuple:
            items = list(map(recur, value))
            if len(items) == 1:
                return "(" + items[0] + ",)"
            return "(" + ", ".join(items) + ")"
        case dict() if type(value).__repr__ is dict.__repr__:
            entries = sorted(f"{recur(k)}: {recur(v)}" for k, v in value.items())
            return "{" + ", ".join(entries) + "}"
        case set() | frozenset() if not value:
            return f"{type(value).__name__}()"
        case set():
            return "{" + ", ".join(sorted(map(recur, value))) + "}"
        case frozenset():
            return "frozenset({" + ", ".join(sorted(map(recur, value))) + "})"
        case Mapping():
            entries = sorted(f"{recur(k)}: {recur(v)}" for k, v in value.items())
            return f"{type(value).__name__}({{{', '.join(entries)}}})"
    if type(value).__repr__ is not object.__repr__:
        return repr(value)
    attrs = getattr(value, "__dict__", None)
    if attrs is None:
        return f"<{type(value).__name__}>"
    fields = ", ".join(f"{k}={recur(v)}" for k, v in sorted(attrs.items()))
    return f"{type(value).__name__}({fields})"
