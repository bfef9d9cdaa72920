from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any, TypeAlias

from ._errors import MalformedExpressionError

if TYPE_CHECKING:
    from collections.abc import Generator


class BoolOp(StrEnum):
    AND = "AND"
    OR = "OR"
    NOT = "NOT"


class ElementBase:
    pass


@dataclass(slots=True, frozen=True)
class Operand(ElementBase):
    id: str


@dataclass(slots=True, frozen=True)
class Operator(ElementBase):
    op: BoolOp


@dataclass(slots=True, frozen=True)
class SubExpr(ElementBase):
    elements: tuple[ElementBase, ...]


DependencyExpr: TypeAlias = tuple[ElementBase, ...]


def parse_dependency(raw: Any) -> DependencyExpr:
    """Convert a nested list of strings into a dependency expression.

    Strings naming a boolean operator become `Operator` elements, any other
    string becomes an `Operand`, and nested lists become `SubExpr` elements.
    """
    if isinstance(raw, str) or not isinstance(raw, list | tuple):
        msg = f"Dependency must be a list, got: {raw!r}"
        raise MalformedExpressionError(msg)

    elements: list[ElementBase] = []
    for item in raw:
        match item:
            case str() if item in BoolOp.__members__:
                elements.append(Operator(BoolOp(item)))
            case str():
                if not item.strip():
                    msg = "Dependency operand must not be empty."
                    raise MalformedExpressionError(msg)
                elements.append(Operand(item))
            case list() | tuple():
                elements.append(SubExpr(parse_dependency(item)))
            case _:
                msg = f"Unexpected dependency element: {item!r}"
                raise MalformedExpressionError(msg)
    return tuple(elements)


def iter_operands(expr: DependencyExpr) -> Generator[str]:
    """Yield every operand id in the expression, depth first."""
    for element in expr:
        match element:
            case Operand(id_):
                yield id_
            case SubExpr(elements):
                yield from iter_operands(elements)
            case Operator():
                pass
            case _:
                msg = f"Unknown element type: {type(element)}"
                raise TypeError(msg)


def count_subexpressions(expr: DependencyExpr) -> int:
    return sum(
        1 + count_subexpressions(element.elements) for element in expr if isinstance(element, SubExpr)
    )


def format_dependency(expr: DependencyExpr) -> str:
    parts: list[str] = []
    for element in expr:
        match element:
            case Operand(id_):
                parts.append(id_)
            case Operator(op):
                parts.append(op.value)
            case SubExpr(elements):
                parts.append(format_dependency(elements))
            case _:
                msg = f"Unknown element type: {type(element)}"
                raise TypeError(msg)
    return "[" + ", ".join(parts) + "]"
