from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import tomli_w

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ._build import DependencyGraph
    from ._cases import TestCase
    from ._errors import Issue

logger = logging.getLogger(__name__)


def _issue_to_dict(issue: Issue) -> dict[str, str]:
    return {"kind": issue.kind.value, "item": issue.item, "message": issue.message}


def _test_case_to_dict(case: TestCase) -> dict[str, Any]:
    # TOML has no null, so missing outputs are left out and explained under `errors`
    data: dict[str, Any] = {
        "inputs": dict(case.input_values),
        "outputs": {var: value for var, value in case.case_output.items() if value is not None},
    }
    if case.errors:
        data["errors"] = {var: issue.message for var, issue in case.errors.items()}
    return data


def _write_toml(data: dict[str, Any], output_path: Path | str) -> Path:
    output_path = Path(output_path)
    with output_path.open("wb") as f:
        tomli_w.dump(data, f)
    return output_path


def export_graph_to_toml(graph: DependencyGraph, output_path: Path | str) -> None:
    """Export the nodes, edges and issues of a compiled graph to a TOML file.

    Args:
        graph: The compiled dependency graph
        output_path: Path to the output TOML file

    """
    toml_data: dict[str, Any] = graph.to_dict()
    if graph.issues:
        toml_data["issues"] = [_issue_to_dict(issue) for issue in graph.issues]
    output_path = _write_toml(toml_data, output_path)
    logger.info(f"Exported graph to {output_path}")


def export_test_cases_to_toml(
    target_expression: str,
    cases: Iterable[TestCase],
    output_path: Path | str,
) -> None:
    """Export generated test cases to a TOML file.

    Args:
        target_expression: The expression the test cases were generated for
        cases: The test cases from generate_test_cases
        output_path: Path to the output TOML file

    """
    toml_data = {
        "expression": target_expression,
        "cases": [_test_case_to_dict(case) for case in cases],
    }
    output_path = _write_toml(toml_data, output_path)
    logger.info(f"Exported test cases to {output_path}")
