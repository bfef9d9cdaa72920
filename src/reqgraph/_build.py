from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from ._errors import Issue, IssueKind, PriorityOutOfRangeError
from ._expr import BoolOp, Operand, Operator, SubExpr, format_dependency
from ._style import Palette, style_for_priority

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ._expr import DependencyExpr
    from ._models import Requirement

logger = logging.getLogger(__name__)


class NodeKind(StrEnum):
    REQUIREMENT = "requirement"
    INTERMEDIATE = "intermediate"


@dataclass(slots=True, frozen=True)
class GraphNode:
    id: str
    label: str
    kind: NodeKind
    priority: int | None = None
    style: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id, "data": {"label": self.label}, "kind": self.kind.value}
        if self.priority is not None:
            data["priority"] = self.priority
        if self.style is not None:
            data["style"] = {"background": self.style}
        return data


@dataclass(slots=True, frozen=True)
class GraphEdge:
    """An edge from a dependency (source) to the node depending on it (target)."""

    source: str
    target: str
    label: BoolOp | None = None

    @property
    def id(self) -> str:
        return f"{self.source}-{self.target}"

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id, "source": self.source, "target": self.target}
        if self.label is not None:
            data["label"] = self.label.value
        return data


@dataclass(slots=True)
class IntermediateAllocator:
    """Hands out intermediate node ids for one compilation run."""

    prefix: str = "I"
    _next: int = 1

    def allocate(self) -> str:
        node_id = f"{self.prefix}{self._next}"
        self._next += 1
        return node_id

    @property
    def num_allocated(self) -> int:
        return self._next - 1


@dataclass(slots=True)
class DependencyGraph:
    nodes: list[GraphNode] = field(default_factory=list)
    edges: list[GraphEdge] = field(default_factory=list)
    issues: list[Issue] = field(default_factory=list)

    @property
    def requirement_nodes(self) -> list[GraphNode]:
        return [node for node in self.nodes if node.kind is NodeKind.REQUIREMENT]

    @property
    def intermediate_nodes(self) -> list[GraphNode]:
        return [node for node in self.nodes if node.kind is NodeKind.INTERMEDIATE]

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        """Convert the graph to plain data for a rendering component."""
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
        }


@dataclass(slots=True)
class _Compilation:
    allocator: IntermediateAllocator
    edges: list[GraphEdge] = field(default_factory=list)
    intermediate_nodes: list[GraphNode] = field(default_factory=list)

    def expand(self, expr: DependencyExpr, child: str) -> None:
        """Emit the edges of `expr` into `child`.

        The current operator starts undefined and is replaced by every operator
        token; it labels all later siblings in the same list.
        """
        current_op: BoolOp | None = None
        for element in expr:
            match element:
                case Operator(op):
                    current_op = op
                case Operand(id_):
                    self.edges.append(GraphEdge(source=id_, target=child, label=current_op))
                case SubExpr(elements):
                    node_id = self.allocator.allocate()
                    logger.debug(f"Allocated intermediate node {node_id} for {child}")
                    self.intermediate_nodes.append(GraphNode(id=node_id, label=node_id, kind=NodeKind.INTERMEDIATE))
                    self.edges.append(GraphEdge(source=node_id, target=child, label=current_op))
                    self.expand(elements, node_id)
                case _:
                    msg = f"Unknown element type: {type(element)}"
                    raise TypeError(msg)


def _requirement_node(requirement: Requirement, palette: Palette, issues: list[Issue]) -> GraphNode:
    try:
        style = style_for_priority(requirement.priority, palette)
    except PriorityOutOfRangeError as e:
        issue = Issue.from_error(requirement.id, e)
        logger.warning(str(issue))
        issues.append(issue)
        style = None
    return GraphNode(
        id=requirement.id,
        label=requirement.text,
        kind=NodeKind.REQUIREMENT,
        priority=requirement.priority,
        style=style,
    )


def _check_graph(graph: DependencyGraph) -> None:
    """Record data-quality issues; the graph itself is left as compiled."""
    node_ids = Counter(node.id for node in graph.nodes)
    for node_id, count in node_ids.items():
        if count > 1:
            graph.issues.append(
                Issue(IssueKind.DUPLICATE_REQUIREMENT, node_id, f"Node id appears {count} times."),
            )

    for edge in graph.edges:
        if edge.source not in node_ids:
            graph.issues.append(
                Issue(IssueKind.UNKNOWN_OPERAND, edge.id, f"Source '{edge.source}' is not a known node."),
            )

    edge_ids = Counter(edge.id for edge in graph.edges)
    for edge_id, count in edge_ids.items():
        if count > 1:
            graph.issues.append(
                Issue(IssueKind.DUPLICATE_EDGE, edge_id, f"Edge id appears {count} times."),
            )

    for issue in graph.issues:
        if issue.kind is not IssueKind.PRIORITY_OUT_OF_RANGE:
            logger.warning(str(issue))


def compile_graph(
    requirements: Iterable[Requirement],
    *,
    palette: Palette = Palette.RED,
    allocator: IntermediateAllocator | None = None,
) -> DependencyGraph:
    """Compile requirements and their dependency expressions into a graph.

    Requirement nodes come first in input order, followed by intermediate
    nodes in creation order. Edges are neither deduplicated nor checked for
    cycles.
    """
    if allocator is None:
        allocator = IntermediateAllocator()

    requirements = list(requirements)
    graph = DependencyGraph()
    graph.nodes.extend(_requirement_node(req, palette, graph.issues) for req in requirements)

    compilation = _Compilation(allocator=allocator)
    for requirement in requirements:
        if not requirement.has_dependency:
            continue
        logger.debug(f"Expanding dependency of {requirement.id}: {format_dependency(requirement.dependency)}")
        compilation.expand(requirement.dependency, requirement.id)

    graph.nodes.extend(compilation.intermediate_nodes)
    graph.edges.extend(compilation.edges)
    _check_graph(graph)

    logger.debug(
        f"Compiled {len(requirements)} requirements into {len(graph.nodes)} nodes and {len(graph.edges)} edges",
    )
    return graph
