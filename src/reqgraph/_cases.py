"""Exhaustive truth-table generation for simple boolean expressions.

Expressions have the form ``<var> = <term> (AND|OR <term>)*`` or
``<var> = NOT <term>``. Mixed ``AND``/``OR`` chains are folded strictly from
left to right, so ``A AND B OR C`` means ``(A AND B) OR C`` and
``A OR B AND C`` means ``(A OR B) AND C``.
"""

import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Self

from ._errors import Issue, MalformedExpressionError, ReqGraphError, UnknownOperandError
from ._expr import BoolOp

logger = logging.getLogger(__name__)

MAX_VARIABLES = 20


def _split_assignment(expression: str) -> tuple[str, str]:
    lhs, sep, rhs = expression.partition("=")
    lhs, rhs = lhs.strip(), rhs.strip()
    if not sep or not lhs or not rhs:
        msg = f"Expression must have the form '<var> = <rhs>'. Got: {expression!r}"
        raise MalformedExpressionError(msg)
    return lhs, rhs


@dataclass(slots=True, frozen=True)
class CatalogExpr:
    """A named boolean expression, e.g. ``Y = A AND B``.

    An entry read from user input that does not have the ``<var> = <rhs>``
    shape keeps its raw text as `output_variable` and the parse failure in
    `error`; evaluating it raises `MalformedExpressionError`.
    """

    output_variable: str
    rhs: str
    error: str | None = None

    @classmethod
    def parse(cls, text: str) -> Self:
        output_variable, rhs = _split_assignment(text)
        return cls(output_variable=output_variable, rhs=rhs)

    @classmethod
    def from_text(cls, text: str) -> Self:
        """Parse `text`, recording a malformed shape instead of raising."""
        try:
            return cls.parse(text)
        except MalformedExpressionError as e:
            logger.warning(str(e))
            return cls(output_variable=text.strip(), rhs="", error=str(e))

    def __str__(self) -> str:
        if self.error is not None:
            return self.output_variable
        return f"{self.output_variable} = {self.rhs}"


@dataclass(slots=True)
class TestCase:
    """One row of the truth table.

    A `None` output marks a catalog expression that could not be evaluated;
    `errors` holds the reason under the same output variable.
    """

    __test__ = False  # not a pytest class

    input_values: dict[str, bool]
    case_output: dict[str, bool | None] = field(default_factory=dict)
    errors: dict[str, Issue] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


def extract_variables(expression: str) -> list[str]:
    """Return the free variables of the right-hand side in order of first appearance."""
    _, rhs = _split_assignment(expression)
    variables: list[str] = []
    for token in rhs.split():
        if token in BoolOp.__members__ or token in variables:
            continue
        variables.append(token)
    return variables


def iter_assignments(variables: Sequence[str]) -> Iterator[dict[str, bool]]:
    """Enumerate all assignments in binary-counter order.

    Assignment ``i`` sets ``variables[j]`` to bit ``j`` of ``i``, so the first
    variable toggles fastest.
    """
    if len(variables) > MAX_VARIABLES:
        msg = f"Too many variables ({len(variables)}); at most {MAX_VARIABLES} are supported."
        raise ValueError(msg)
    for i in range(2 ** len(variables)):
        yield {var: bool((i >> j) & 1) for j, var in enumerate(variables)}


def _lookup(operand: str, assignment: Mapping[str, bool]) -> bool:
    try:
        return assignment[operand]
    except KeyError:
        msg = f"Operand '{operand}' is not among the input variables."
        raise UnknownOperandError(msg) from None


def evaluate(expr: CatalogExpr, assignment: Mapping[str, bool]) -> bool:
    """Evaluate a catalog expression under one assignment."""
    if expr.error is not None:
        raise MalformedExpressionError(expr.error)

    tokens = expr.rhs.split()

    if BoolOp.NOT in tokens:
        last_not = len(tokens) - 1 - tokens[::-1].index(BoolOp.NOT)
        trailing = tokens[last_not + 1 :]
        if len(trailing) != 1:
            msg = f"NOT must be followed by exactly one operand in '{expr}'."
            raise MalformedExpressionError(msg)
        return not _lookup(trailing[0], assignment)

    if len(tokens) % 2 == 0:
        msg = f"Expected 'operand (AND|OR operand)*' in '{expr}'."
        raise MalformedExpressionError(msg)

    value = _lookup(tokens[0], assignment)
    for op, operand in zip(tokens[1::2], tokens[2::2], strict=True):
        # no short-circuit: every operand must resolve
        operand_value = _lookup(operand, assignment)
        match op:
            case BoolOp.AND:
                value = value and operand_value
            case BoolOp.OR:
                value = value or operand_value
            case _:
                msg = f"Unrecognized operator '{op}' in '{expr}'."
                raise MalformedExpressionError(msg)
    return value


def generate_test_cases(
    target_expression: str,
    catalog: Iterable[CatalogExpr] | None = None,
) -> list[TestCase]:
    """Generate one test case per assignment of the target expression's variables.

    Every catalog expression is evaluated for every assignment, in catalog
    order. If no catalog is given the target expression is evaluated alone.
    """
    variables = extract_variables(target_expression)
    catalog = [CatalogExpr.parse(target_expression)] if catalog is None else list(catalog)
    logger.debug(f"Variables of {target_expression!r}: {variables}")

    cases: list[TestCase] = []
    for assignment in iter_assignments(variables):
        case = TestCase(input_values=assignment)
        for expr in catalog:
            try:
                value: bool | None = evaluate(expr, assignment)
            except ReqGraphError as e:
                case.errors[expr.output_variable] = Issue.from_error(str(expr), e)
                value = None
            else:
                # a later entry for the same variable replaces an earlier failure
                case.errors.pop(expr.output_variable, None)
            case.case_output[expr.output_variable] = value
        cases.append(case)

    num_failed = sum(1 for case in cases if not case.ok)
    if num_failed:
        logger.warning(f"{num_failed} of {len(cases)} test cases have unevaluated outputs")
    return cases
