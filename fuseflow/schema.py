"""Schemas describing workflow graphs: nodes, edges and input mappings."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

ERR_INVALID_FUNCTION_FORMAT = (
    "invalid function format: must contain '/' to separate package and function"
)
ERR_GRAPH_ID_IS_EMPTY = "ID is empty"

_MAX_NAME_LENGTH = 100


class SchemaValidationError(ValueError):
    """Raised when a graph schema is malformed or fails validation.

    ``errors`` lists every individual problem that was found.
    """

    def __init__(self, message: str, errors: Optional[List[str]] = None) -> None:
        super().__init__(message)
        self.errors: List[str] = list(errors) if errors else [message]


class InputMappingSource(str, Enum):
    """Where the data of an input mapping comes from."""

    SCHEMA = "schema"
    FLOW = "flow"

    def __str__(self) -> str:
        return self.value


def _object(value: Any, owner: str) -> Mapping[str, Any]:
    if not isinstance(value, dict):
        raise SchemaValidationError(
            f"json: cannot unmarshal {type(value).__name__} into Go value of type {owner}"
        )
    return value


def _list(value: Any, owner: str) -> Optional[list]:
    if value is None:
        return None
    if not isinstance(value, list):
        raise SchemaValidationError(
            f"json: cannot unmarshal {type(value).__name__} into field {owner} of type list"
        )
    return value


def _text(data: Mapping[str, Any], key: str, owner: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise SchemaValidationError(
            f"json: cannot unmarshal {type(value).__name__} into field {owner}.{key} of type string"
        )
    return value


def _text_map(data: Mapping[str, Any], key: str, owner: str) -> Optional[Dict[str, str]]:
    value = data.get(key)
    if value is None:
        return None
    mapping = _object(value, f"{owner}.{key}")
    result: Dict[str, str] = {}
    for name, item in mapping.items():
        if not isinstance(item, str):
            raise SchemaValidationError(
                f"json: cannot unmarshal {type(item).__name__} into field {owner}.{key} of type string"
            )
        result[name] = item
    return result


def _has_value(value: Any) -> bool:
    """Tell whether a required value is present (zero scalars count as absent)."""
    if value is None:
        return False
    if isinstance(value, (bool, int, float, complex, str)):
        return bool(value)
    return True


@dataclass
class EdgeCondition:
    """Condition under which an edge is followed."""

    name: str = ""
    value: Any = None

    def clone(self) -> "EdgeCondition":
        """Return a copy of this condition."""
        return EdgeCondition(name=self.name, value=self.value)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "value": self.value}

    @classmethod
    def from_dict(cls, data: Any) -> "EdgeCondition":
        data = _object(data, "EdgeCondition")
        return cls(name=_text(data, "name", "EdgeCondition"), value=data.get("value"))


@dataclass
class InputMapping:
    """Maps a value from the schema or from the flow onto a node input."""

    source: Union[InputMappingSource, str] = ""
    variable: str = ""
    value: Any = None
    map_to: str = ""

    def clone(self) -> "InputMapping":
        """Return a copy of this mapping."""
        return InputMapping(
            source=self.source, variable=self.variable, value=self.value, map_to=self.map_to
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"source": str(self.source)}
        if self.variable:
            result["variable"] = self.variable
        if self.value is not None:
            result["value"] = self.value
        result["mapTo"] = self.map_to
        return result

    @classmethod
    def from_dict(cls, data: Any) -> "InputMapping":
        if data is None:
            return cls()
        data = _object(data, "InputMapping")
        source: Union[InputMappingSource, str] = _text(data, "source", "InputMapping")
        try:
            source = InputMappingSource(source)
        except ValueError:
            pass
        return cls(
            source=source,
            variable=_text(data, "variable", "InputMapping"),
            value=data.get("value"),
            map_to=_text(data, "mapTo", "InputMapping"),
        )


@dataclass
class EdgeSchema:
    """An edge between two nodes, with an optional condition and input mappings."""

    id: str = ""
    from_id: str = ""
    to_id: str = ""
    conditional: Optional[EdgeCondition] = None
    input: List[InputMapping] = field(default_factory=list)

    def clone(self) -> "EdgeSchema":
        """Return a deep copy of this edge schema."""
        return EdgeSchema(
            id=self.id,
            from_id=self.from_id,
            to_id=self.to_id,
            conditional=self.conditional.clone() if self.conditional is not None else None,
            input=[mapping.clone() for mapping in self.input or []],
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"id": self.id, "from": self.from_id, "to": self.to_id}
        if self.conditional is not None:
            result["conditional"] = self.conditional.to_dict()
        if self.input:
            result["input"] = [mapping.to_dict() for mapping in self.input]
        return result

    @classmethod
    def from_dict(cls, data: Any) -> "EdgeSchema":
        data = _object(data, "EdgeSchema")
        conditional = data.get("conditional")
        inputs = _list(data.get("input"), "EdgeSchema.input") or []
        return cls(
            id=_text(data, "id", "EdgeSchema"),
            from_id=_text(data, "from", "EdgeSchema"),
            to_id=_text(data, "to", "EdgeSchema"),
            conditional=EdgeCondition.from_dict(conditional) if conditional is not None else None,
            input=[InputMapping.from_dict(item) for item in inputs],
        )


@dataclass
class NodeConfig:
    """Configuration of a node; it holds no settings yet."""

    def to_dict(self) -> Dict[str, Any]:
        return {}


@dataclass
class NodeSchema:
    """A node of the graph, running the function named by ``function``."""

    id: str = ""
    function: str = ""
    config: Optional[NodeConfig] = None

    def clone(self) -> "NodeSchema":
        """Return a copy of this node schema, always with a fresh config."""
        return NodeSchema(id=self.id, function=self.function, config=NodeConfig())

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"id": self.id, "function": self.function}
        if self.config is not None:
            result["config"] = self.config.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: Any) -> "NodeSchema":
        data = _object(data, "NodeSchema")
        config = data.get("config")
        if config is not None:
            _object(config, "NodeConfig")
        return cls(
            id=_text(data, "id", "NodeSchema"),
            function=_text(data, "function", "NodeSchema"),
            config=NodeConfig() if config is not None else None,
        )


@dataclass
class GraphSchema:
    """A workflow graph: its nodes, edges and descriptive data."""

    id: str = ""
    name: str = ""
    nodes: Optional[List[Optional[NodeSchema]]] = field(default_factory=list)
    edges: Optional[List[Optional[EdgeSchema]]] = field(default_factory=list)
    metadata: Optional[Dict[str, str]] = None
    tags: Optional[Dict[str, str]] = None

    def clone(self) -> "GraphSchema":
        """Return a deep copy of this graph schema."""
        return GraphSchema(
            id=self.id,
            name=self.name,
            nodes=[node.clone() for node in self.nodes or []],
            edges=[edge.clone() for edge in self.edges or []],
            metadata=dict(self.metadata) if self.metadata is not None else None,
            tags=dict(self.tags) if self.tags is not None else None,
        )

    def validate(self) -> None:
        """Raise SchemaValidationError listing every missing or invalid field."""
        errors: List[str] = []

        def fail(namespace: str, name: str, tag: str) -> None:
            errors.append(
                f"Key: 'GraphSchema.{namespace}' Error:Field validation for "
                f"'{name}' failed on the '{tag}' tag"
            )

        def require(namespace: str, name: str, value: Any) -> bool:
            if not _has_value(value):
                fail(namespace, name, "required")
                return False
            return True

        require("ID", "ID", self.id)
        if require("Name", "Name", self.name) and len(self.name) > _MAX_NAME_LENGTH:
            fail("Name", "Name", "lte")

        if self.nodes is None:
            fail("Nodes", "Nodes", "required")
        else:
            for index, node in enumerate(self.nodes):
                if node is None:
                    continue
                prefix = f"Nodes[{index}]"
                require(f"{prefix}.ID", "ID", node.id)
                require(f"{prefix}.Function", "Function", node.function)

        if self.edges is None:
            fail("Edges", "Edges", "required")
        else:
            for index, edge in enumerate(self.edges):
                if edge is None:
                    continue
                prefix = f"Edges[{index}]"
                require(f"{prefix}.ID", "ID", edge.id)
                require(f"{prefix}.From", "From", edge.from_id)
                require(f"{prefix}.To", "To", edge.to_id)
                if edge.conditional is not None:
                    require(f"{prefix}.Conditional.Name", "Name", edge.conditional.name)
                    require(f"{prefix}.Conditional.Value", "Value", edge.conditional.value)

        if errors:
            raise SchemaValidationError("\n".join(errors), errors)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "nodes": None
            if self.nodes is None
            else [node.to_dict() if node is not None else None for node in self.nodes],
            "edges": None
            if self.edges is None
            else [edge.to_dict() if edge is not None else None for edge in self.edges],
        }
        if self.metadata:
            result["metadata"] = dict(self.metadata)
        if self.tags:
            result["tags"] = dict(self.tags)
        return result

    @classmethod
    def from_dict(cls, data: Any) -> "GraphSchema":
        data = _object(data, "GraphSchema")
        nodes = _list(data.get("nodes"), "GraphSchema.nodes")
        edges = _list(data.get("edges"), "GraphSchema.edges")
        return cls(
            id=_text(data, "id", "GraphSchema"),
            name=_text(data, "name", "GraphSchema"),
            nodes=None
            if nodes is None
            else [NodeSchema.from_dict(item) if item is not None else None for item in nodes],
            edges=None
            if edges is None
            else [EdgeSchema.from_dict(item) if item is not None else None for item in edges],
            metadata=_text_map(data, "metadata", "GraphSchema"),
            tags=_text_map(data, "tags", "GraphSchema"),
        )

    @classmethod
    def from_json(cls, data: Union[str, bytes, bytearray]) -> Optional["GraphSchema"]:
        """Parse a graph schema from JSON; a JSON ``null`` gives None."""
        try:
            raw = json.loads(data)
        except (ValueError, UnicodeDecodeError) as exc:
            raise SchemaValidationError(f"invalid graph schema JSON: {exc}") from exc
        if raw is None:
            return None
        return cls.from_dict(raw)