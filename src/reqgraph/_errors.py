from dataclasses import dataclass
from enum import StrEnum
from typing import Self


class ReqGraphError(Exception):
    """Base class for errors raised by reqgraph."""


class MalformedExpressionError(ReqGraphError, ValueError):
    """An expression does not follow the ``lhs = rhs`` grammar."""


class UnknownOperandError(ReqGraphError, KeyError):
    """An operand references a variable or requirement that does not exist."""

    def __str__(self) -> str:
        # KeyError quotes its message by default
        return str(self.args[0]) if self.args else ""


class PriorityOutOfRangeError(ReqGraphError, IndexError):
    """A priority has no entry in the style lookup table."""


class IssueKind(StrEnum):
    MALFORMED_EXPRESSION = "malformed_expression"
    UNKNOWN_OPERAND = "unknown_operand"
    PRIORITY_OUT_OF_RANGE = "priority_out_of_range"
    DUPLICATE_EDGE = "duplicate_edge"
    DUPLICATE_REQUIREMENT = "duplicate_requirement"


_ISSUE_KINDS: dict[type[ReqGraphError], IssueKind] = {
    MalformedExpressionError: IssueKind.MALFORMED_EXPRESSION,
    UnknownOperandError: IssueKind.UNKNOWN_OPERAND,
    PriorityOutOfRangeError: IssueKind.PRIORITY_OUT_OF_RANGE,
}


@dataclass(slots=True, frozen=True)
class Issue:
    """A recoverable problem with a single item of the input."""

    kind: IssueKind
    item: str
    message: str

    @classmethod
    def from_error(cls, item: str, error: ReqGraphError) -> Self:
        for error_type, kind in _ISSUE_KINDS.items():
            if isinstance(error, error_type):
                return cls(kind=kind, item=item, message=str(error))
        msg = f"No issue kind for error type: {type(error).__name__}"
        raise TypeError(msg)

    def __str__(self) -> str:
        return f"[{self.kind}] {self.item}: {self.message}"
