import pytest

from fuseflow.metadata import (
    ConditionalEdgeMetadata,
    FunctionMetadata,
    InputMetadata,
    OutputEdgeMetadata,
    OutputMetadata,
    Package,
    PackagedFunction,
    PackageValidationError,
    ParameterSchema,
    TransportType,
)
from fuseflow.results import function_result_success


def _metadata() -> FunctionMetadata:
    return FunctionMetadata(
        transport=TransportType.HTTP,
        input=InputMetadata(
            custom_parameters=True,
            parameters=[ParameterSchema(name="values", type="[]int", required=True)],
        ),
        output=OutputMetadata(
            parameters=[ParameterSchema(name="result", type="bool", default=False)],
            conditional_output=True,
            conditional_output_field="result",
            edges=[
                OutputEdgeMetadata(name="true", conditional_edge=ConditionalEdgeMetadata(True)),
                OutputEdgeMetadata(name="false", conditional_edge=ConditionalEdgeMetadata(False)),
            ],
        ),
    )


def test_transport_values():
    assert TransportType("http") is TransportType.HTTP
    assert TransportType("grpc") is TransportType.GRPC


def test_metadata_round_trip():
    metadata = _metadata()
    assert FunctionMetadata.from_dict(metadata.to_dict()) == metadata


def test_metadata_json_keys():
    data = _metadata().to_dict()
    assert data["transport"] == "http"
    assert data["input"]["customParameters"] is True
    assert data["output"]["conditionalOutputField"] == "result"
    assert data["output"]["edges"][0]["conditionalEdge"] == {"value": True}


def test_from_dict_fills_defaults():
    metadata = FunctionMetadata.from_dict({"input": {"parameters": [{"name": "a"}]}})
    assert metadata.transport is None
    assert metadata.input.parameters == [ParameterSchema(name="a")]
    assert metadata.output == OutputMetadata()


def test_valid_package_then_missing_id_fails():
    function = PackagedFunction(
        id="sum", metadata=_metadata(), function=lambda info: function_result_success()
    )
    package = Package(id="math", functions=[function])
    package.validate()
    package.id = ""
    with pytest.raises(PackageValidationError):
        package.validate()


def test_package_without_functions_fails():
    with pytest.raises(PackageValidationError):
        Package(id="math").validate()


def test_function_without_id_fails():
    with pytest.raises(PackageValidationError):
        PackagedFunction(id="", metadata=_metadata()).validate()


def test_function_with_zero_metadata_fails():
    with pytest.raises(PackageValidationError):
        PackagedFunction(id="sum", metadata=FunctionMetadata()).validate()


def test_package_checks_each_function():
    good = PackagedFunction(id="a", metadata=_metadata())
    bad = PackagedFunction(id="b", metadata=FunctionMetadata())
    with pytest.raises(PackageValidationError):
        Package(id="pkg", functions=[good, bad]).validate()