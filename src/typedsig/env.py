"""Built-in types and the default environment."""

from __future__ import annotations

import datetime
import math
import re
from collections.abc import Sized
from typing import Any

from typedsig.types import binary_type, enum_type, nullary_type, unary_type


def _is_number(x: Any) -> bool:
    return isinstance(x, (int, float)) and not isinstance(x, bool)


def _is_str_map(x: Any) -> bool:
    return isinstance(x, dict) and all(isinstance(k, str) for k in x)


def _str_map_values(x: dict[str, Any]) -> list[Any]:
    return [x[k] for k in sorted(x)]


def _is_pair(x: Any) -> bool:
    return isinstance(x, tuple) and len(x) == 2  # noqa: PLR2004


def _nullable_children(x: Any) -> list[Any]:
    return [] if x is None else [x]


AnyFunction = nullary_type("Function", "", [], callable)
Boolean = nullary_type("Boolean", "", [], lambda x: isinstance(x, bool))
Date = nullary_type("Date", "", [], lambda x: isinstance(x, datetime.date))
Error = nullary_type("Error", "", [], lambda x: isinstance(x, BaseException))
Null = nullary_type("Null", "", [], lambda x: x is None)
Number = nullary_type("Number", "", [], _is_number)
Object = nullary_type("Object", "", [], lambda x: isinstance(x, dict))
RegExp = nullary_type("RegExp", "", [], lambda x: isinstance(x, re.Pattern))
String = nullary_type("String", "", [], lambda x: isinstance(x, str))

# Every datetime.date is a valid calendar date
ValidDate = nullary_type("ValidDate", "", [Date], lambda _x: True)

# Numeric refinements
ValidNumber = nullary_type("ValidNumber", "", [Number], lambda x: not math.isnan(x))
FiniteNumber = nullary_type("FiniteNumber", "", [ValidNumber], math.isfinite)
PositiveNumber = nullary_type("PositiveNumber", "", [ValidNumber], lambda x: x > 0)
NegativeNumber = nullary_type("NegativeNumber", "", [ValidNumber], lambda x: x < 0)
NonZeroValidNumber = nullary_type(
    "NonZeroValidNumber", "", [ValidNumber], lambda x: x != 0
)
PositiveFiniteNumber = nullary_type(
    "PositiveFiniteNumber", "", [FiniteNumber], lambda x: x > 0
)
NegativeFiniteNumber = nullary_type(
    "NegativeFiniteNumber", "", [FiniteNumber], lambda x: x < 0
)
NonZeroFiniteNumber = nullary_type(
    "NonZeroFiniteNumber", "", [FiniteNumber], lambda x: x != 0
)
Integer = nullary_type(
    "Integer", "", [FiniteNumber], lambda x: isinstance(x, int) or x.is_integer()
)
PositiveInteger = nullary_type("PositiveInteger", "", [Integer], lambda x: x > 0)
NegativeInteger = nullary_type("NegativeInteger", "", [Integer], lambda x: x < 0)
NonZeroInteger = nullary_type("NonZeroInteger", "", [Integer], lambda x: x != 0)

# Inline flag letters accepted by `(?...)` groups
RegexFlags = enum_type(
    "RegexFlags", "", ["", "i", "m", "s", "im", "is", "ms", "ims"]
)

Array = unary_type("Array", "", [], lambda x: isinstance(x, list), list)
StrMap = unary_type("StrMap", "", [], _is_str_map, _str_map_values)
Nullable = unary_type("Nullable", "", [], lambda _x: True, _nullable_children)
NonEmpty = unary_type(
    "NonEmpty",
    "",
    [],
    lambda x: isinstance(x, Sized) and len(x) > 0,
    lambda x: [x],
)

Pair = binary_type("Pair", "", [], _is_pair, lambda x: [x[0]], lambda x: [x[1]])

DEFAULT_ENV = (
    AnyFunction,
    Array,
    Boolean,
    Date,
    Error,
    Null,
    Number,
    Object,
    RegExp,
    StrMap,
    String,
)
