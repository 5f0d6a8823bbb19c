"""Run-time checking of values against declared signatures.

The checker works in three layers:

1. Membership (`validate`): is one value a member of one type, ancestors
   and children included?
2. Classification (`determine_types`): which environment types do a group
   of values share? Used to bind type variables and to describe values in
   reports.
3. Resolution (`satisfactory_types`): check every value of a call against
   its declared position, narrowing type-variable bindings as it goes.

A `CheckSession` drives one call through these layers:

    session = begin_check(signature, env)
    check_argument(session, 0, x)
    check_argument(session, 1, y)
    result = check_return(session, impl(x, y))

Failures are raised as the structured errors of `typedsig.errors`;
`str(error)` renders the report.
"""

from typedsig.checker.bindings import Binding, BindingTable, PathKey
from typedsig.checker.classify import (
    determine_types,
    determine_types_loose,
    determine_types_strict,
)
from typedsig.checker.session import (
    CheckedCallback,
    CheckSession,
    begin_check,
    check_argument,
    check_return,
)
from typedsig.checker.solver import (
    Resolution,
    satisfactory_types,
    test,
    update_bindings,
)
from typedsig.checker.validate import Mismatch, is_consistent, validate

__all__ = [
    "Binding",
    "BindingTable",
    "CheckSession",
    "CheckedCallback",
    "Mismatch",
    "PathKey",
    "Resolution",
    "begin_check",
    "check_argument",
    "check_return",
    "determine_types",
    "determine_types_loose",
    "determine_types_strict",
    "is_consistent",
    "satisfactory_types",
    "test",
    "update_bindings",
    "validate",
]
