import pytest

from fuseflow.graph import Graph, GraphError
from fuseflow.metadata import FunctionMetadata, OutputMetadata
from fuseflow.schema import (
    EdgeCondition,
    EdgeSchema,
    GraphSchema,
    InputMapping,
    InputMappingSource,
    NodeSchema,
    SchemaValidationError,
)


def make_schema(node_ids, edges, name="test graph"):
    edge_schemas = []
    for edge in edges:
        source, target = edge[0], edge[1]
        condition = EdgeCondition(name=edge[2], value=edge[3]) if len(edge) > 2 else None
        edge_schemas.append(
            EdgeSchema(
                id=f"{source}-{target}", from_id=source, to_id=target, conditional=condition
            )
        )
    return GraphSchema(
        id="graph-1",
        name=name,
        nodes=[NodeSchema(id=n, function=f"pkg/{n}") for n in node_ids],
        edges=edge_schemas,
    )


def test_linear_graph_keeps_single_thread():
    graph = Graph(make_schema(["trigger", "a", "b"], [("trigger", "a"), ("a", "b")]))
    assert graph.id() == "graph-1"
    assert graph.trigger().id() == "trigger"
    threads = {graph.find_node(n).thread for n in ["trigger", "a", "b"]}
    assert threads == {graph.trigger().thread}
    assert all(graph.find_node(n).parent_threads == [] for n in ["trigger", "a", "b"])


def test_edges_are_wired_to_nodes():
    graph = Graph(make_schema(["trigger", "a"], [("trigger", "a")]))
    trigger = graph.trigger()
    node_a = graph.find_node("a")
    assert [e.to_node for e in trigger.output_edges] == [node_a]
    assert [e.from_node for e in node_a.input_edges] == [trigger]
    assert trigger.input_edges == []


def test_fork_and_join_threads():
    graph = Graph(
        make_schema(
            ["trigger", "a", "b", "c"],
            [("trigger", "a"), ("trigger", "b"), ("a", "c"), ("b", "c")],
        )
    )
    node_a, node_b, node_c = (graph.find_node(n) for n in "abc")
    trigger_thread = graph.trigger().thread
    assert node_a.thread != node_b.thread
    assert trigger_thread not in (node_a.thread, node_b.thread)
    assert node_c.parent_threads == sorted([node_a.thread, node_b.thread])
    assert node_c.thread not in (trigger_thread, node_a.thread, node_b.thread)


def test_conditional_branches_stay_on_parent_thread():
    graph = Graph(
        make_schema(
            ["trigger", "a", "b"],
            [("trigger", "a", "yes", True), ("trigger", "b", "no", False)],
        )
    )
    trigger_thread = graph.trigger().thread
    assert graph.find_node("a").thread == trigger_thread
    assert graph.find_node("b").thread == trigger_thread


def test_cycle_does_not_recurse_forever():
    graph = Graph(
        make_schema(["trigger", "a", "b"], [("trigger", "a"), ("a", "b"), ("b", "a")])
    )
    node_a = graph.find_node("a")
    assert len(node_a.input_edges) == 2
    assert node_a.thread not in node_a.parent_threads


def test_find_node_missing_raises():
    graph = Graph(make_schema(["trigger", "a"], [("trigger", "a")]))
    with pytest.raises(GraphError, match="node missing not found"):
        graph.find_node("missing")


def test_no_edges_raises():
    with pytest.raises(GraphError, match="no edges found in the graph"):
        Graph(make_schema(["trigger"], []))


def test_no_nodes_raises():
    with pytest.raises(GraphError, match="no trigger node found in the graph"):
        Graph(make_schema([], []))


def test_edge_to_unknown_node_raises():
    with pytest.raises(GraphError, match="node ghost not found"):
        Graph(make_schema(["trigger"], [("trigger", "ghost")]))


def test_invalid_schema_raises_validation_error():
    with pytest.raises(SchemaValidationError):
        Graph(make_schema(["trigger", "a"], [("trigger", "a")], name=""))


def test_schema_returns_independent_copy():
    original = make_schema(["trigger", "a"], [("trigger", "a")])
    graph = Graph(original)
    copy = graph.schema()
    assert copy is not original
    assert [n.id for n in copy.nodes] == ["trigger", "a"]
    assert [e.id for e in copy.edges] == ["trigger-a"]
    copy.nodes[0].id = "changed"
    assert graph.schema().nodes[0].id == "trigger"


def test_update_schema_rebuilds_graph():
    graph = Graph(make_schema(["trigger", "a"], [("trigger", "a")]))
    graph.update_schema(make_schema(["start", "x"], [("start", "x")]))
    assert graph.trigger().id() == "start"
    assert graph.find_node("x").function_id() == "pkg/x"
    with pytest.raises(GraphError):
        graph.find_node("a")


def test_update_schema_invalid_keeps_graph():
    graph = Graph(make_schema(["trigger", "a"], [("trigger", "a")]))
    with pytest.raises(SchemaValidationError):
        graph.update_schema(make_schema(["trigger", "a"], [("trigger", "a")], name=""))
    assert graph.find_node("a").id() == "a"


def test_node_ids():
    graph = Graph(make_schema(["trigger", "a"], [("trigger", "a")]))
    node_a = graph.find_node("a")
    assert node_a.function_id() == "pkg/a"
    assert node_a.full_id() == "pkg/a/a"


def test_edge_accessors():
    schema = make_schema(["trigger", "a"], [("trigger", "a", "yes", True)])
    mapping = InputMapping(source=InputMappingSource.SCHEMA, value=1, map_to="x")
    schema.edges[0].input = [mapping]
    graph = Graph(schema)
    edge = graph.trigger().output_edges[0]
    assert edge.id == "trigger-a"
    assert edge.is_conditional() is True
    assert edge.condition().name == "yes"
    assert edge.input() == [mapping]


def test_node_metadata():
    graph = Graph(make_schema(["trigger", "a"], [("trigger", "a")]))
    assert graph.is_nodes_metadata_populated() is False
    metadata = FunctionMetadata(output=OutputMetadata(conditional_output=True))
    graph.update_node_metadata("trigger", metadata)
    graph.update_node_metadata("a", FunctionMetadata())
    assert graph.is_nodes_metadata_populated() is True
    assert graph.trigger().is_conditional() is True
    assert graph.find_node("a").is_conditional() is False
    with pytest.raises(GraphError):
        graph.update_node_metadata("missing", metadata)


def test_mermaid_flowchart_lists_nodes_and_links():
    graph = Graph(
        make_schema(
            ["trigger", "a", "b"],
            [("trigger", "a", "yes", True), ("trigger", "b", "no", False)],
        )
    )
    chart = graph.mermaid_flowchart()
    assert chart.count("-->") == 2
    assert "id: trigger" in chart
    assert "Function: pkg/a" in chart
    assert "(cond: yes)" in chart
    assert "(cond: no)" in chart
    assert f"diagramPadding: 30" in chart