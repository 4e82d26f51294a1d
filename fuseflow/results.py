"""Outputs, results and execution context of workflow functions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

from .function_input import FunctionInput
from .ids import ExecID


class FunctionOutputStatus(str, Enum):
    """Status reported by a function's output."""

    NIL = "nil"
    SUCCESS = "success"
    ERROR = "error"

    def __str__(self) -> str:
        return self.value


@dataclass
class FunctionOutput:
    """Output of a function: a status and the data it produced."""

    status: FunctionOutputStatus
    data: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Return the output as a JSON-ready dict."""
        return {"status": str(self.status), "data": self.data}


@dataclass
class FunctionResult:
    """Result of one function execution.

    ``is_async`` marks a function that finishes later and reports its output
    through the execution's ``finish`` callback.
    """

    output: FunctionOutput
    is_async: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Return the result as a JSON-ready dict."""
        return {"async": self.is_async, "output": self.output.to_dict()}


@dataclass
class ExecutionInfo:
    """Context handed to a function when the workflow executes it."""

    workflow_id: str
    exec_id: ExecID
    input: FunctionInput
    finish: Optional[Callable[[FunctionOutput], None]] = None


Function = Callable[[ExecutionInfo], FunctionResult]
"""An executable workflow function."""


def function_output(
    status: FunctionOutputStatus, data: Optional[Dict[str, Any]]
) -> FunctionOutput:
    """Create a function output with the given status and data."""
    return FunctionOutput(status=FunctionOutputStatus(status), data=data)


def function_success_output(data: Optional[Dict[str, Any]]) -> FunctionOutput:
    """Create a successful function output."""
    return function_output(FunctionOutputStatus.SUCCESS, data)


def function_result(
    status: FunctionOutputStatus, data: Optional[Dict[str, Any]]
) -> FunctionResult:
    """Create the result of a synchronous execution; missing data becomes an empty dict."""
    return FunctionResult(output=function_output(status, data if data is not None else {}))


def function_result_success(data: Optional[Dict[str, Any]] = None) -> FunctionResult:
    """Create a successful synchronous result."""
    return function_result(FunctionOutputStatus.SUCCESS, data)


def function_result_error(error: BaseException) -> FunctionResult:
    """Create an error result whose data holds ``error`` under the key ``error``."""
    return function_result(FunctionOutputStatus.ERROR, {"error": error})


def function_result_async() -> FunctionResult:
    """Create the result of an asynchronous execution."""
    return FunctionResult(
        output=function_output(FunctionOutputStatus.SUCCESS, None), is_async=True
    )