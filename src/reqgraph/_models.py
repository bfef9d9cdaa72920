from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ._expr import count_subexpressions, iter_operands

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ._expr import DependencyExpr


@dataclass(slots=True, frozen=True)
class Requirement:
    """A requirement and the boolean combination of requirements it depends on."""

    id: str
    text: str
    priority: int
    dependency: DependencyExpr = field(default=(), repr=False)

    @property
    def has_dependency(self) -> bool:
        return len(self.dependency) > 0

    def iter_dependency_ids(self) -> Iterable[str]:
        """Iterate over the requirement ids referenced by the dependency expression."""
        return iter_operands(self.dependency)

    @property
    def num_subexpressions(self) -> int:
        return count_subexpressions(self.dependency)
