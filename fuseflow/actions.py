"""Actions a workflow asks its runner to carry out."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Protocol

from .ids import ExecID


class ActionType(str, Enum):
    """Kind of an action."""

    NOOP = "noop"
    RUN_FUNCTION = "function:run"
    RUN_PARALLEL_FUNCTIONS = "functions:parallel-run"

    def __str__(self) -> str:
        return self.value


class Action(Protocol):
    """Anything that reports its action type."""

    def type(self) -> ActionType:
        ...


@dataclass
class NoopAction:
    """Nothing to do."""

    def type(self) -> ActionType:
        """Return the action type."""
        return ActionType.NOOP


@dataclass
class RunFunctionAction:
    """Run one workflow function on a thread with the given arguments."""

    thread_id: int
    function_id: str
    function_exec_id: ExecID
    args: Dict[str, Any] = field(default_factory=dict)

    def type(self) -> ActionType:
        """Return the action type."""
        return ActionType.RUN_FUNCTION


@dataclass
class RunParallelFunctionsAction:
    """Run several workflow functions in parallel."""

    actions: List[RunFunctionAction] = field(default_factory=list)

    def type(self) -> ActionType:
        """Return the action type."""
        return ActionType.RUN_PARALLEL_FUNCTIONS