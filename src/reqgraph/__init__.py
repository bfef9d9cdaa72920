"""Requirement dependency graphs and boolean truth-table test cases."""

__all__ = [
    "BoolOp",
    "CatalogExpr",
    "DependencyGraph",
    "GraphEdge",
    "GraphNode",
    "IntermediateAllocator",
    "Issue",
    "IssueKind",
    "MalformedExpressionError",
    "NodeKind",
    "Operand",
    "Operator",
    "Palette",
    "PriorityOutOfRangeError",
    "ReqGraphError",
    "Requirement",
    "SubExpr",
    "TestCase",
    "UnknownOperandError",
    "compile_graph",
    "evaluate",
    "export_graph_to_toml",
    "export_test_cases_to_toml",
    "extract_variables",
    "generate_test_cases",
    "iter_assignments",
    "load_input_from_toml",
    "parse_dependency",
]

from ._build import DependencyGraph, GraphEdge, GraphNode, IntermediateAllocator, NodeKind, compile_graph
from ._cases import CatalogExpr, TestCase, evaluate, extract_variables, generate_test_cases, iter_assignments
from ._errors import (
    Issue,
    IssueKind,
    MalformedExpressionError,
    PriorityOutOfRangeError,
    ReqGraphError,
    UnknownOperandError,
)
from ._export import export_graph_to_toml, export_test_cases_to_toml
from ._expr import BoolOp, Operand, Operator, SubExpr, parse_dependency
from ._io import load_input_from_toml
from ._models import Requirement
from ._style import Palette
