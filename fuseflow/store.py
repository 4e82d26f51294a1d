"""A thread-safe key-value store addressed by dotted, indexable selectors."""

from __future__ import annotations

import re
import threading
from typing import Any, Dict, List, Mapping, Optional

from .strings import _format_value

_ARRAY_ACCESS = re.compile(r"(.+)\[([0-9]+)\]")
_MAP_ACCESS = re.compile(r"([^\[]*)\[([^\]]+)\](.*)")
_INT_TEXT = re.compile(r"[+-]?[0-9]+")
_INT_MIN = -(1 << 63)
_INT_MAX = (1 << 63) - 1
_SEQUENCES = (list, tuple, bytes, bytearray)


def _is_int_text(text: str) -> bool:
    return bool(_INT_TEXT.fullmatch(text)) and _INT_MIN <= int(text) <= _INT_MAX


def _split_key(selector: str) -> "tuple[str, str]":
    """Split a selector into its first key and the rest of the path."""
    this_sel, _, next_sel = selector.partition(".")
    match = _MAP_ACCESS.fullmatch(selector)
    if match and not _is_int_text(match.group(2)):
        this_sel = match.group(1)
        next_sel = "[" + match.group(2) + "]" + match.group(3)
        if this_sel == "":
            this_sel = match.group(2)
            next_sel = match.group(3)
        if next_sel.startswith("."):
            next_sel = next_sel[1:]
    return this_sel, next_sel


def _access(current: Any, selector: str, value: Any, is_set: bool) -> Any:
    """Walk ``selector`` from ``current``, reading or writing the value at its end."""
    this_sel, next_sel = _split_key(selector)

    indexes: List[int] = []
    while "[" in this_sel:
        match = _ARRAY_ACCESS.fullmatch(this_sel)
        if match is None:
            indexes.append(-1)
            break
        indexes.append(int(match.group(2)))
        this_sel = match.group(1)

    if isinstance(current, dict):
        if not next_sel and is_set:
            current[this_sel] = value
            return None
        child = current.get(this_sel)
        if not isinstance(child, dict) and not indexes and is_set:
            child = {}
            current[this_sel] = child
        current = child
    else:
        current = None

    for index in reversed(indexes):
        if isinstance(current, _SEQUENCES):
            if 0 <= index < len(current):
                current = current[index]
            else:
                current = None
                break

    if next_sel:
        current = _access(current, next_sel, value, is_set)
    return current


class KV:
    """Key-value store over a plain dict.

    Keys are selectors: ``a.b.c`` walks nested dicts, ``a[0]`` indexes a
    sequence and ``a[key]`` reads a map key. Setting a dotted key creates
    missing intermediate dicts. All operations are guarded by a lock.
    """

    def __init__(self, data: Optional[Dict[str, Any]] = None) -> None:
        self._data: Dict[str, Any] = data if isinstance(data, dict) else {}
        self._lock = threading.RLock()

    def raw(self) -> Dict[str, Any]:
        """Return the underlying dict itself."""
        return self._data

    def merge_with(self, data: Mapping[str, Any]) -> None:
        """Replace the store with a shallow copy overlaid with ``data``."""
        with self._lock:
            merged = dict(self._data)
            merged.update(data)
            self._data = merged

    def clear(self) -> None:
        """Remove every key."""
        with self._lock:
            self._data = {}

    def has(self, key: str) -> bool:
        """Return whether ``key`` resolves to a value other than None."""
        with self._lock:
            return _access(self._data, key, None, False) is not None

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` at ``key``."""
        with self._lock:
            _access(self._data, key, value, True)

    def get(self, key: str) -> Any:
        """Return the value at ``key``, or None when there is none."""
        with self._lock:
            return _access(self._data, key, None, False)

    def get_str(self, key: str) -> str:
        """Return the value at ``key`` if it is a string, else an empty string."""
        value = self.get(key)
        return value if isinstance(value, str) else ""

    def get_int(self, key: str) -> int:
        """Return the value at ``key`` if it is an int, else 0."""
        value = self.get(key)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        return 0

    def get_bool(self, key: str) -> bool:
        """Return the value at ``key`` if it is a bool, else False."""
        value = self.get(key)
        return value if isinstance(value, bool) else False

    def get_float(self, key: str) -> float:
        """Return the value at ``key`` if it is a float, else 0.0."""
        value = self.get(key)
        return value if isinstance(value, float) else 0.0

    def get_int_slice(self, key: str) -> Optional[List[int]]:
        """Return the value at ``key`` if it is a sequence of ints, else None."""
        value = self.get(key)
        if isinstance(value, (list, tuple)) and all(
            isinstance(item, int) and not isinstance(item, bool) for item in value
        ):
            return list(value)
        return None

    def get_float64_slice(self, key: str) -> Optional[List[float]]:
        """Return the value at ``key`` if it is a sequence of floats, else None."""
        value = self.get(key)
        if isinstance(value, (list, tuple)) and all(isinstance(item, float) for item in value):
            return list(value)
        return None

    def get_map_str(self, key: str) -> Optional[Dict[str, str]]:
        """Return the dict at ``key`` with every value rendered as text, else None."""
        value = self.get(key)
        if isinstance(value, dict):
            return {str(k): _format_value(v) for k, v in value.items()}
        return None