"""Per-call record of what each type variable has been bound to."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from typedsig.types import Type

# (position, *path), e.g. (0,) or (1, "$1", "x")
type PathKey = tuple[int | str, ...]


@dataclass(frozen=True)
class Binding:
    """Admissible types of one variable and the values that constrained it."""

    types: tuple[Type, ...]
    values_by_path: Mapping[PathKey, tuple[Any, ...]] = field(default_factory=dict)

    def observe(self, key: PathKey, values: tuple[Any, ...]) -> Binding:
        """Record `values` as seen at `key`, keeping observation order."""
        merged = dict(self.values_by_path)
        merged[key] = (*merged.get(key, ()), *values)
        return Binding(self.types, merged)

    def narrow(self, types: tuple[Type, ...]) -> Binding:
        return Binding(types, self.values_by_path)


@dataclass(frozen=True)
class BindingTable(Mapping[str, Binding]):
    """Immutable mapping from type-variable name to its binding.

    `bind` returns a new table, so a partially applied function can hand
    its table to several continuations without them seeing each other.
    """

    entries: Mapping[str, Binding] = field(default_factory=dict)

    def __getitem__(self, name: str) -> Binding:
        return self.entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def bind(self, name: str, binding: Binding) -> BindingTable:
        return BindingTable({**self.entries, name: binding})
