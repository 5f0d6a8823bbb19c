"""Checker options."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

from typedsig.env import DEFAULT_ENV
from typedsig.errors import ConstructionError
from typedsig.show import show
from typedsig.types import Type

logger = logging.getLogger(__name__)

# Environment variable switching run-time checking on or off
CHECK_TYPES_VAR = "TYPEDSIG_CHECK_TYPES"

_FALSY = frozenset({"0", "false", "no", "off"})


@dataclass(frozen=True)
class Options:
    """How functions produced by `create` behave.

    Attributes:
        check_types: When false, declared functions only curry; arguments,
            callbacks and results are not checked.
        env: Types used to bind type variables, in reporting order.
    """

    check_types: bool = True
    env: tuple[Type, ...] = DEFAULT_ENV

    def __post_init__(self) -> None:
        if not isinstance(self.check_types, bool):
            msg = f"Invalid value for ‘check_types’: {show(self.check_types)}"
            raise ConstructionError(msg)
        env = tuple(self.env)
        invalid = [t for t in env if not isinstance(t, Type)]
        if invalid:
            msg = (
                "Invalid environment: every member must be a Type; received "
                + ", ".join(show(t) for t in invalid)
            )
            raise ConstructionError(msg)
        object.__setattr__(self, "env", env)

    @classmethod
    def from_environ(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        env: tuple[Type, ...] = DEFAULT_ENV,
    ) -> Options:
        """Build options, reading `TYPEDSIG_CHECK_TYPES` from the environment."""
        environ = os.environ if environ is None else environ
        raw = environ.get(CHECK_TYPES_VAR, "").strip().lower()
        check_types = raw not in _FALSY
        if not check_types:
            logger.info("%s=%s: run-time type checking disabled", CHECK_TYPES_VAR, raw)
        return cls(check_types=check_types, env=env)
