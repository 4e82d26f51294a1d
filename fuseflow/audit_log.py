"""Ordered audit log of the function executions of a workflow."""

from __future__ import annotations

import base64
import json
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional

from .results import FunctionResult


@dataclass
class AuditLogEntry:
    """Record of one function execution: its thread, node, input and result."""

    thread_id: int
    function_node_id: str
    input: Optional[Dict[str, Any]] = None
    result: Optional[FunctionResult] = None

    def to_dict(self) -> Dict[str, Any]:
        """Return the entry as a JSON-ready dict, leaving out empty fields."""
        data: Dict[str, Any] = {
            "thread_id": self.thread_id,
            "function_node_id": self.function_node_id,
        }
        if self.input:
            data["input"] = self.input
        if self.result is not None:
            data["result"] = self.result.to_dict()
        return data


def _json_default(value: Any) -> Any:
    if isinstance(value, BaseException):
        return {}
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    return str(value)


class AuditLog:
    """Audit log entries keyed by execution ID, in the order they were added."""

    def __init__(self) -> None:
        self._log: Dict[str, AuditLogEntry] = {}

    def new_entry(
        self,
        thread_id: int,
        function_node_id: str,
        function_exec_id: str,
        input: Optional[Dict[str, Any]],
    ) -> AuditLogEntry:
        """Create an entry for ``function_exec_id`` and return it.

        An existing entry for the same execution ID is replaced in place.
        """
        entry = AuditLogEntry(
            thread_id=thread_id, function_node_id=function_node_id, input=input
        )
        self._log[str(function_exec_id)] = entry
        return entry

    def get(self, function_exec_id: str) -> Optional[AuditLogEntry]:
        """Return the entry for ``function_exec_id``, or None."""
        return self._log.get(str(function_exec_id))

    def to_json(self) -> str:
        """Serialise the log as a JSON object keyed by execution ID."""
        document = {key: entry.to_dict() for key, entry in self._log.items()}
        return json.dumps(
            document, default=_json_default, separators=(",", ":"), ensure_ascii=False
        )

    def __len__(self) -> int:
        return len(self._log)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._log))

    def __contains__(self, function_exec_id: object) -> bool:
        return str(function_exec_id) in self._log