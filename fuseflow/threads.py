"""Execution threads of a running workflow."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Optional

from .ids import ExecID


class ThreadState(str, Enum):
    """State of a workflow thread."""

    RUNNING = "running"
    FINISHED = "finished"

    def __str__(self) -> str:
        return self.value


@dataclass
class Thread:
    """One thread of a workflow and the execution it is currently at."""

    id: int
    current_exec_id: ExecID
    state: ThreadState = ThreadState.RUNNING


class Threads:
    """Thread-safe registry of workflow threads keyed by thread ID."""

    def __init__(self) -> None:
        self._threads: Dict[int, Thread] = {}
        self._lock = threading.RLock()

    def new(self, thread_id: int, exec_id: ExecID) -> Thread:
        """Create a running thread, replacing any thread with the same ID."""
        created = Thread(id=thread_id, current_exec_id=exec_id)
        with self._lock:
            self._threads[thread_id] = created
        return created

    def get(self, thread_id: int) -> Optional[Thread]:
        """Return the thread with ``thread_id``, or None."""
        with self._lock:
            return self._threads.get(thread_id)

    def are_all_parents_finished_for(self, parent_thread_ids: Optional[Iterable[int]]) -> bool:
        """Return whether every listed thread exists and has finished."""
        for parent_id in parent_thread_ids or ():
            parent = self.get(parent_id)
            if parent is None or parent.state != ThreadState.FINISHED:
                return False
        return True