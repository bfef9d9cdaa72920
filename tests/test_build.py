import logging

import pytest

import reqgraph as rg


def _req(id_: str, dependency: list | None = None, priority: int = 1) -> rg.Requirement:
    return rg.Requirement(
        id=id_,
        text=f"Requirement {id_}",
        priority=priority,
        dependency=rg.parse_dependency(dependency or []),
    )


def _edges(graph: rg.DependencyGraph) -> list[tuple[str, str, str | None]]:
    return [(edge.source, edge.target, edge.label) for edge in graph.edges]


def test_no_dependencies() -> None:
    requirements = [_req("R1"), _req("R2"), _req("R3")]
    graph = rg.compile_graph(requirements)

    assert graph.edges == []
    assert [node.id for node in graph.nodes] == ["R1", "R2", "R3"]
    assert all(node.kind is rg.NodeKind.REQUIREMENT for node in graph.nodes)
    assert graph.issues == []


def test_flat_dependency() -> None:
    graph = rg.compile_graph([_req("R1", ["R2", "AND", "R3"]), _req("R2"), _req("R3")])

    assert _edges(graph) == [("R2", "R1", "AND"), ("R3", "R1", "AND")]
    assert graph.intermediate_nodes == []


def test_nested_dependency() -> None:
    requirements = [_req("R1", ["R2", "AND", ["R3", "OR", "R4"]]), _req("R2"), _req("R3"), _req("R4")]
    graph = rg.compile_graph(requirements)

    assert _edges(graph) == [
        ("R2", "R1", "AND"),
        ("I1", "R1", "AND"),
        ("R3", "I1", "OR"),
        ("R4", "I1", "OR"),
    ]
    assert graph.intermediate_nodes == [rg.GraphNode(id="I1", label="I1", kind=rg.NodeKind.INTERMEDIATE)]


def test_operator_labels_later_siblings_only() -> None:
    """An operator applies to the siblings after it until the next operator."""
    graph = rg.compile_graph([_req("R1", ["R2", "AND", "R3", "OR", "R4", "R5"])])

    assert _edges(graph) == [
        ("R2", "R1", None),
        ("R3", "R1", "AND"),
        ("R4", "R1", "OR"),
        ("R5", "R1", "OR"),
    ]


def test_operator_state_does_not_leak_into_subexpression() -> None:
    graph = rg.compile_graph([_req("R1", ["OR", ["R2", "AND", "R3"], "R4"])])

    assert _edges(graph) == [
        ("I1", "R1", "OR"),
        ("R2", "I1", None),
        ("R3", "I1", "AND"),
        ("R4", "R1", "OR"),
    ]


def test_operator_only_expression() -> None:
    graph = rg.compile_graph([_req("R1", ["AND", "NOT"])])
    assert graph.edges == []


def test_intermediate_ids_are_global_across_requirements() -> None:
    requirements = [
        _req("R1", [["R2"], "AND", ["R3", ["R4"]]]),
        _req("R2", ["NOT", ["R3"]]),
        _req("R3"),
        _req("R4"),
    ]
    graph = rg.compile_graph(requirements)

    intermediate_ids = [node.id for node in graph.intermediate_nodes]
    assert intermediate_ids == ["I1", "I2", "I3", "I4"]
    assert len(intermediate_ids) == sum(req.num_subexpressions for req in requirements)
    assert [node.id for node in graph.nodes[:4]] == ["R1", "R2", "R3", "R4"]


def test_repeated_compilation_is_deterministic() -> None:
    requirements = [_req("R1", ["R2", "AND", ["R3", "OR", "R4"]])]
    first = rg.compile_graph(requirements)
    second = rg.compile_graph(requirements)

    assert first.to_dict() == second.to_dict()
    assert [node.id for node in second.intermediate_nodes] == ["I1"]


def test_shared_allocator_continues_numbering() -> None:
    allocator = rg.IntermediateAllocator()
    rg.compile_graph([_req("R1", [["R2"]])], allocator=allocator)
    graph = rg.compile_graph([_req("R1", [["R2"]])], allocator=allocator)

    assert [node.id for node in graph.intermediate_nodes] == ["I2"]
    assert allocator.num_allocated == 2


def test_edges_reference_existing_nodes() -> None:
    requirements = [_req("R1", ["R2", "AND", ["R3", "OR", ["R2", "R3"]]]), _req("R2"), _req("R3")]
    graph = rg.compile_graph(requirements)

    node_ids = {node.id for node in graph.nodes}
    for edge in graph.edges:
        assert edge.source in node_ids
        assert edge.target in node_ids


def test_unknown_operand_is_kept_and_reported() -> None:
    graph = rg.compile_graph([_req("R1", ["R9"])])

    assert _edges(graph) == [("R9", "R1", None)]
    assert [(issue.kind, issue.item) for issue in graph.issues] == [(rg.IssueKind.UNKNOWN_OPERAND, "R9-R1")]


def test_duplicate_edges_are_kept_and_reported() -> None:
    graph = rg.compile_graph([_req("R1", ["R2", "OR", "R2"]), _req("R2")])

    assert [edge.id for edge in graph.edges] == ["R2-R1", "R2-R1"]
    assert [issue.kind for issue in graph.issues] == [rg.IssueKind.DUPLICATE_EDGE]


def test_cycles_are_not_rejected() -> None:
    graph = rg.compile_graph([_req("R1", ["R2"]), _req("R2", ["R1"])])
    assert _edges(graph) == [("R2", "R1", None), ("R1", "R2", None)]
    assert graph.issues == []


def test_duplicate_requirement_is_reported() -> None:
    graph = rg.compile_graph([_req("R1"), _req("R1")])
    assert [issue.kind for issue in graph.issues] == [rg.IssueKind.DUPLICATE_REQUIREMENT]


@pytest.mark.parametrize(
    ("palette", "priority", "expected"),
    [
        (rg.Palette.RED, 1, "#FF5733"),
        (rg.Palette.RED, 4, "#FFCCCC"),
        (rg.Palette.BLUE, 2, "#3366FF"),
        (rg.Palette.PASTEL, 3, "#A8E9FF"),
        (rg.Palette.RED, 0, ""),
    ],
)
def test_requirement_node_style(palette: rg.Palette, priority: int, expected: str) -> None:
    graph = rg.compile_graph([_req("R1", priority=priority)], palette=palette)
    assert graph.nodes[0].style == expected
    assert graph.nodes[0].priority == priority


@pytest.mark.parametrize("priority", [-1, 5])
def test_priority_out_of_range(priority: int) -> None:
    graph = rg.compile_graph([_req("R1", priority=priority), _req("R2", ["R1"])])

    assert [node.id for node in graph.nodes] == ["R1", "R2"]
    assert graph.nodes[0].style is None
    assert len(graph.edges) == 1
    assert [(issue.kind, issue.item) for issue in graph.issues] == [(rg.IssueKind.PRIORITY_OUT_OF_RANGE, "R1")]


def test_to_dict() -> None:
    graph = rg.compile_graph([_req("R1", [["R2"]]), _req("R2", priority=2)])

    assert graph.to_dict() == {
        "nodes": [
            {
                "id": "R1",
                "data": {"label": "Requirement R1"},
                "kind": "requirement",
                "priority": 1,
                "style": {"background": "#FF5733"},
            },
            {
                "id": "R2",
                "data": {"label": "Requirement R2"},
                "kind": "requirement",
                "priority": 2,
                "style": {"background": "#FF6F61"},
            },
            {"id": "I1", "data": {"label": "I1"}, "kind": "intermediate"},
        ],
        "edges": [
            {"id": "I1-R1", "source": "I1", "target": "R1"},
            {"id": "R2-I1", "source": "R2", "target": "I1"},
        ],
    }


def test_expansion_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="reqgraph._build"):
        rg.compile_graph([_req("R1", ["R2", "AND", ["R3", "OR", "R4"]])])

    assert "Expanding dependency of R1: [R2, AND, [R3, OR, R4]]" in caplog.text
