"""Function metadata, transports and function packages."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

from .results import Function


class TransportType(str, Enum):
    """Transport used between the core and package providers."""

    HTTP = "http"
    GRPC = "grpc"

    def __str__(self) -> str:
        return self.value


class PackageValidationError(ValueError):
    """Raised when a package or packaged function is invalid."""


@dataclass
class ParameterSchema:
    """Schema of one input or output parameter."""

    name: str = ""
    type: str = ""
    required: bool = False
    validations: List[str] = field(default_factory=list)
    description: str = ""
    default: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "required": self.required,
            "validations": list(self.validations),
            "description": self.description,
            "default": self.default,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ParameterSchema":
        return cls(
            name=data.get("name", ""),
            type=data.get("type", ""),
            required=bool(data.get("required", False)),
            validations=list(data.get("validations") or []),
            description=data.get("description", ""),
            default=data.get("default"),
        )


def _params_from(data: Mapping[str, Any]) -> List[ParameterSchema]:
    return [ParameterSchema.from_dict(item) for item in data.get("parameters") or []]


def _params_to(params: List[ParameterSchema]) -> List[Dict[str, Any]]:
    return [param.to_dict() for param in params]


@dataclass
class InputEdgeMetadata:
    """Input edge configuration of a function."""

    count: int = 0
    parameters: List[ParameterSchema] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"count": self.count, "parameters": _params_to(self.parameters)}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "InputEdgeMetadata":
        return cls(count=int(data.get("count", 0)), parameters=_params_from(data))


@dataclass
class InputMetadata:
    """Input description of a function.

    ``custom_parameters`` allows schemaless parameters that are mapped
    straight from the raw input.
    """

    custom_parameters: bool = False
    parameters: List[ParameterSchema] = field(default_factory=list)
    edges: InputEdgeMetadata = field(default_factory=InputEdgeMetadata)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "customParameters": self.custom_parameters,
            "parameters": _params_to(self.parameters),
            "edges": self.edges.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "InputMetadata":
        return cls(
            custom_parameters=bool(data.get("customParameters", False)),
            parameters=_params_from(data),
            edges=InputEdgeMetadata.from_dict(data.get("edges") or {}),
        )


@dataclass
class ConditionalEdgeMetadata:
    """Value that selects a conditional edge."""

    value: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ConditionalEdgeMetadata":
        return cls(value=data.get("value"))


@dataclass
class OutputEdgeMetadata:
    """Output edge configuration of a function."""

    name: str = ""
    conditional_edge: ConditionalEdgeMetadata = field(default_factory=ConditionalEdgeMetadata)
    count: int = 0
    parameters: List[ParameterSchema] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "conditionalEdge": self.conditional_edge.to_dict(),
            "count": self.count,
            "parameters": _params_to(self.parameters),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "OutputEdgeMetadata":
        return cls(
            name=data.get("name", ""),
            conditional_edge=ConditionalEdgeMetadata.from_dict(data.get("conditionalEdge") or {}),
            count=int(data.get("count", 0)),
            parameters=_params_from(data),
        )


@dataclass
class OutputMetadata:
    """Output description of a function."""

    parameters: List[ParameterSchema] = field(default_factory=list)
    conditional_output: bool = False
    conditional_output_field: str = ""
    edges: List[OutputEdgeMetadata] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "parameters": _params_to(self.parameters),
            "conditionalOutput": self.conditional_output,
            "conditionalOutputField": self.conditional_output_field,
            "edges": [edge.to_dict() for edge in self.edges],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "OutputMetadata":
        return cls(
            parameters=_params_from(data),
            conditional_output=bool(data.get("conditionalOutput", False)),
            conditional_output_field=data.get("conditionalOutputField", ""),
            edges=[OutputEdgeMetadata.from_dict(item) for item in data.get("edges") or []],
        )


@dataclass
class FunctionMetadata:
    """Metadata describing a function's transport, input and output."""

    transport: Optional[Union[TransportType, str]] = None
    input: InputMetadata = field(default_factory=InputMetadata)
    output: OutputMetadata = field(default_factory=OutputMetadata)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "transport": str(self.transport) if self.transport is not None else "",
            "input": self.input.to_dict(),
            "output": self.output.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FunctionMetadata":
        transport = data.get("transport") or None
        if transport is not None:
            try:
                transport = TransportType(transport)
            except ValueError:
                pass
        return cls(
            transport=transport,
            input=InputMetadata.from_dict(data.get("input") or {}),
            output=OutputMetadata.from_dict(data.get("output") or {}),
        )


@dataclass
class PackagedFunction:
    """A function together with its ID and metadata."""

    id: str
    metadata: FunctionMetadata
    function: Optional[Function] = None
    tags: Dict[str, str] = field(default_factory=dict)

    def validate(self) -> None:
        """Raise PackageValidationError unless the ID and metadata are set."""
        if not self.id:
            raise PackageValidationError("PackagedFunction.id is required")
        if self.metadata is None or self.metadata == FunctionMetadata():
            raise PackageValidationError(
                f"PackagedFunction.metadata is required for function {self.id!r}"
            )


@dataclass
class Package:
    """A named collection of packaged functions."""

    id: str
    functions: List[PackagedFunction] = field(default_factory=list)
    tags: Dict[str, str] = field(default_factory=dict)

    def validate(self) -> None:
        """Raise PackageValidationError unless the package and all its functions are valid."""
        if not self.id:
            raise PackageValidationError("Package.id is required")
        if not self.functions:
            raise PackageValidationError(f"Package.functions is required for package {self.id!r}")
        for function in self.functions:
            if function is None:
                raise PackageValidationError(f"package {self.id!r} holds an empty function")
            function.validate()