"""typedsig - Run-time checked, curried function signatures for Python 3.12+."""

from typedsig import env
from typedsig.checker import (
    BindingTable,
    CheckSession,
    begin_check,
    check_argument,
    check_return,
    determine_types,
    test,
    validate,
)
from typedsig.config import (
    CHECK_TYPES_VAR,
    Options,
)
from typedsig.curry import (
    PLACEHOLDER,
    CurriedFunction,
    __,
    create,
    define,
)
from typedsig.errors import (
    ArityLimitError,
    ArityViolation,
    CheckError,
    ConstructionError,
    InvalidValue,
    TypeClassViolation,
    TypeVariableViolation,
    UnrecognizedValue,
)
from typedsig.show import show
from typedsig.signature import (
    MAX_ARITY,
    Signature,
)
from typedsig.typeclasses import (
    Functor,
    Ord,
    Semigroup,
    TypeClass,
)
from typedsig.types import (
    ANY,
    INCONSISTENT,
    NO_ARGUMENTS,
    UNKNOWN,
    Kind,
    Type,
    binary_type,
    binary_type_variable,
    enum_type,
    function_type,
    named_record_type,
    nullary_type,
    record_type,
    type_eq,
    type_tag,
    type_variable,
    unary_type,
    unary_type_variable,
)

__all__ = [
    # Type descriptors
    "ANY",
    # Configuration
    "CHECK_TYPES_VAR",
    # Errors
    "INCONSISTENT",
    "MAX_ARITY",
    "NO_ARGUMENTS",
    # Declaring functions
    "PLACEHOLDER",
    "UNKNOWN",
    "ArityLimitError",
    "ArityViolation",
    # Checking
    "BindingTable",
    "CheckError",
    "CheckSession",
    "ConstructionError",
    "CurriedFunction",
    # Type classes
    "Functor",
    "InvalidValue",
    "Kind",
    "Options",
    "Ord",
    "Semigroup",
    "Signature",
    "Type",
    "TypeClass",
    "TypeClassViolation",
    "TypeVariableViolation",
    "UnrecognizedValue",
    "__",
    "begin_check",
    "binary_type",
    "binary_type_variable",
    "check_argument",
    "check_return",
    "create",
    "define",
    "determine_types",
    "enum_type",
    "env",
    "function_type",
    "named_record_type",
    "nullary_type",
    "record_type",
    "show",
    "test",
    "type_eq",
    "type_tag",
    "type_variable",
    "unary_type",
    "unary_type_variable",
    "validate",
]
