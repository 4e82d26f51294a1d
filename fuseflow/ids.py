"""Identifiers for workflows and function executions."""

from __future__ import annotations

import secrets
import time
import uuid


class ExecID(str):
    """Identifier of one execution of a workflow node's function.

    It is a version 8 UUID that carries the thread ID in its third group.
    """

    def thread(self) -> int:
        """Return the thread ID embedded in this execution ID."""
        raw = bytes.fromhex(self.replace("-", ""))
        if len(raw) < 8:
            raise ValueError(f"malformed execution ID: {str(self)!r}")
        return ((raw[6] & 0x0F) << 8) | raw[7]


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def uuid_v7() -> str:
    """Generate a new time-ordered UUID (version 7)."""
    value = (_now_ms() & ((1 << 48) - 1)) << 80
    value |= 0x7 << 76
    value |= secrets.randbits(12) << 64
    value |= 0b10 << 62
    value |= secrets.randbits(62)
    return str(uuid.UUID(int=value))


def v8_exec_id(thread: int) -> str:
    """Generate a version 8 UUID with ``thread`` stored in its third group.

    Raises ValueError when the thread does not fit in 12 bits.
    """
    if thread < 0 or thread > 0xFFF:
        raise ValueError("value out of 12-bit range")
    data = bytearray(16)
    data[0:6] = _now_ms().to_bytes(8, "big")[:6]
    data[6] = 0x80 | (thread >> 8)
    data[7] = thread & 0xFF
    data[8:16] = secrets.token_bytes(8)
    data[8] = (data[8] & 0x3F) | 0x80
    return str(uuid.UUID(bytes=bytes(data)))


def new_exec_id(thread: int) -> ExecID:
    """Create an execution ID for ``thread``; empty when the thread is out of range."""
    try:
        return ExecID(v8_exec_id(thread))
    except ValueError:
        return ExecID("")


def new_workflow_id() -> str:
    """Create a new workflow ID."""
    return uuid_v7()