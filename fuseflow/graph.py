"""Workflow graphs built from graph schemas, with thread assignment."""

from __future__ import annotations

from typing import Dict, List, Optional, Set

from .metadata import FunctionMetadata
from .schema import EdgeCondition, EdgeSchema, GraphSchema, InputMapping, NodeSchema

_THREAD_MASK = 0xFFFF
_DIAGRAM_PADDING = 30


class GraphError(ValueError):
    """Raised when a graph cannot be built or a node cannot be found."""


class Edge:
    """A directed edge between two nodes of a graph."""

    def __init__(self, id: str, from_node: "Node", to_node: "Node", schema: EdgeSchema) -> None:
        self.id = id
        self.schema = schema
        self.from_node = from_node
        self.to_node = to_node

    def is_conditional(self) -> bool:
        """Return whether the edge carries a condition."""
        return self.schema.conditional is not None

    def condition(self) -> Optional[EdgeCondition]:
        """Return the edge's condition, or None."""
        return self.schema.conditional

    def input(self) -> List[InputMapping]:
        """Return the edge's input mappings."""
        return self.schema.input

    def __repr__(self) -> str:
        return f"Edge({self.id!r}, {self.from_node.id()!r} -> {self.to_node.id()!r})"


class Node:
    """A node of a graph, with its thread and its connecting edges."""

    def __init__(self, schema: NodeSchema) -> None:
        self.schema = schema
        self.function_metadata: Optional[FunctionMetadata] = None
        self.thread = 0
        self.parent_threads: List[int] = []
        self.input_edges: List[Edge] = []
        self.output_edges: List[Edge] = []

    def id(self) -> str:
        """Return the node ID."""
        return self.schema.id

    def full_id(self) -> str:
        """Return the node ID namespaced by its function ID."""
        return f"{self.schema.function}/{self.schema.id}"

    def function_id(self) -> str:
        """Return the ID of the function the node runs."""
        return self.schema.function

    def is_conditional(self) -> bool:
        """Return whether the node's function has conditional output."""
        if self.function_metadata is None:
            raise GraphError(f"node {self.id()} has no function metadata")
        return self.function_metadata.output.conditional_output

    def add_input_edge(self, edge: Edge) -> None:
        """Append an incoming edge."""
        self.input_edges.append(edge)

    def add_output_edge(self, edge: Edge) -> None:
        """Append an outgoing edge."""
        self.output_edges.append(edge)

    def __repr__(self) -> str:
        return f"Node({self.id()!r}, thread={self.thread})"


def _build(schema: GraphSchema) -> "tuple[Node, Dict[str, Node], Dict[str, Edge]]":
    trigger: Optional[Node] = None
    nodes: Dict[str, Node] = {}
    for node_schema in schema.nodes or []:
        if node_schema is None:
            raise GraphError("graph holds an empty node")
        node = Node(node_schema)
        nodes[node.id()] = node
        if trigger is None:
            trigger = node
    if trigger is None:
        raise GraphError("no trigger node found in the graph")
    if not nodes:
        raise GraphError("no nodes found in the graph")

    def find(node_id: str) -> Node:
        if trigger.id() == node_id:
            return trigger
        try:
            return nodes[node_id]
        except KeyError:
            raise GraphError(f"node {node_id} not found") from None

    edges: Dict[str, Edge] = {}
    for edge_schema in schema.edges or []:
        if edge_schema is None:
            raise GraphError("graph holds an empty edge")
        from_node = find(edge_schema.from_id)
        to_node = find(edge_schema.to_id)
        edge = Edge(edge_schema.id, from_node, to_node, edge_schema)
        edges[edge.id] = edge
        from_node.add_output_edge(edge)
        to_node.add_input_edge(edge)
    if not edges:
        raise GraphError("no edges found in the graph")
    return trigger, nodes, edges


def _calculate_threads(trigger: Node, nodes: Dict[str, Node]) -> None:
    """Assign thread IDs to every node and parent threads to join nodes.

    A depth-first walk issues a new thread for each branch of a fork and for
    each join reached by more than one thread. A second pass recomputes the
    parent threads of every join from the final threads of its parents.
    """
    visited: Dict[str, Set[str]] = {}
    counter = 0

    def new_thread_id() -> int:
        nonlocal counter
        counter = (counter + 1) & _THREAD_MASK
        return counter

    def walk(node: Node, thread: int, parent_threads: List[int], in_path: Set[str]) -> None:
        node_id = node.id()
        visit_key = f"{thread}|{','.join(str(t) for t in sorted(parent_threads))}"
        seen = visited.setdefault(node_id, set())
        if visit_key in seen:
            return
        seen.add(visit_key)

        if node_id in in_path:
            return
        in_path.add(node_id)

        node.thread = thread
        node.parent_threads = list(parent_threads) if len(parent_threads) > 1 else []

        if len(node.input_edges) > 1:
            parents = {
                edge.from_node.thread
                for edge in node.input_edges
                if edge.from_node.thread != 0 or edge.from_node is trigger
            }
            if len(parents) > 1:
                thread = new_thread_id()
                node.thread = thread
                node.parent_threads = sorted(parents)

        groups: Dict[str, List[Edge]] = {}
        for edge in node.output_edges:
            condition = edge.condition()
            groups.setdefault(condition.name if condition is not None else "", []).append(edge)
        for group in groups.values():
            if len(group) == 1:
                walk(group[0].to_node, thread, [], in_path)
            else:
                for edge in group:
                    walk(edge.to_node, new_thread_id(), [], in_path)

        in_path.discard(node_id)

    walk(trigger, 0, [0], set())

    for node in nodes.values():
        if len(node.input_edges) > 1:
            parents = {edge.from_node.thread for edge in node.input_edges}
            parents.discard(node.thread)
            node.parent_threads = sorted(parents) if len(parents) > 1 else []
        else:
            node.parent_threads = []


def _mermaid_label(text: str) -> str:
    return '"' + text.replace('"', "#quot;") + '"'


class Graph:
    """A workflow graph computed from a validated graph schema."""

    def __init__(self, schema: GraphSchema) -> None:
        schema.validate()
        self._schema = schema
        self._trigger, self._nodes, self._edges = _build(schema)
        _calculate_threads(self._trigger, self._nodes)

    def id(self) -> str:
        """Return the schema ID of the graph."""
        return self._schema.id

    def trigger(self) -> Node:
        """Return the root node where the workflow starts."""
        return self._trigger

    def find_node(self, node_id: str) -> Node:
        """Return the node with ``node_id``; raise GraphError when there is none."""
        if self._trigger.id() == node_id:
            return self._trigger
        try:
            return self._nodes[node_id]
        except KeyError:
            raise GraphError(f"node {node_id} not found") from None

    def nodes(self) -> List[Node]:
        """Return every node of the graph."""
        return list(self._nodes.values())

    def edges(self) -> List[Edge]:
        """Return every edge of the graph."""
        return list(self._edges.values())

    def mermaid_flowchart(self) -> str:
        """Render the graph as a Mermaid flowchart."""
        lines = [
            "---",
            "config:",
            "  flowchart:",
            f"    diagramPadding: {_DIAGRAM_PADDING}",
            "---",
            "flowchart TB",
        ]
        keys: Dict[int, str] = {}

        def key_for(node: Node) -> str:
            key = f"N{len(keys)}"
            keys[id(node)] = key
            return key

        trigger = self._trigger
        label = (
            f"id: {trigger.id()}\\nFunction: {trigger.function_id()}\\nThread: {trigger.thread}"
        )
        lines.append(f"    {key_for(trigger)}(({_mermaid_label(label)}))")

        for node in self._nodes.values():
            if node is trigger:
                continue
            parents = "[" + " ".join(str(t) for t in node.parent_threads) + "]"
            label = (
                f"id: {node.id()}\\nFunction: {node.function_id()}\\n"
                f"Thread: {node.thread}\\nParentThreads: {parents}"
            )
            if node.input_edges and node.input_edges[0].is_conditional():
                label = f"{label}\\n(cond: {node.input_edges[0].condition().name})"
            key = key_for(node)
            if any(edge.is_conditional() for edge in node.output_edges):
                lines.append(f"    {key}{{{_mermaid_label(label)}}}")
            else:
                lines.append(f"    {key}[{_mermaid_label(label)}]")

        for node in self._nodes.values():
            source = keys.get(id(node))
            if source is None:
                continue
            for edge in node.output_edges:
                target = keys.get(id(edge.to_node))
                if target is not None:
                    lines.append(f"    {source} --> {target}")

        return "\n".join(lines) + "\n"

    def update_schema(self, schema: GraphSchema) -> None:
        """Validate ``schema`` and rebuild the graph from it."""
        schema.validate()
        trigger, nodes, edges = _build(schema)
        _calculate_threads(trigger, nodes)
        self._schema = schema
        self._trigger, self._nodes, self._edges = trigger, nodes, edges

    def update_node_metadata(self, node_id: str, metadata: Optional[FunctionMetadata]) -> None:
        """Attach function metadata to the node with ``node_id``."""
        self.find_node(node_id).function_metadata = metadata

    def is_nodes_metadata_populated(self) -> bool:
        """Return whether every node has function metadata."""
        return all(node.function_metadata is not None for node in self._nodes.values())

    def schema(self) -> GraphSchema:
        """Return a deep copy of the graph's schema."""
        return self._schema.clone()