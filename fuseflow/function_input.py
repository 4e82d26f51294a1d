"""Input passed to a workflow function."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .store import KV


class FunctionInput:
    """Arguments of one function execution, addressed by store selectors."""

    def __init__(self, data: Optional[Dict[str, Any]] = None) -> None:
        self._store = KV(data)

    def get(self, key: str) -> Any:
        """Return the value for ``key``, or None."""
        return self._store.get(key)

    def get_str(self, key: str) -> str:
        """Return the value for ``key`` as a string, or an empty string."""
        return self._store.get_str(key)

    def get_int(self, key: str) -> int:
        """Return the value for ``key`` as an int, or 0."""
        return self._store.get_int(key)

    def get_int_slice(self, key: str) -> Optional[List[int]]:
        """Return the value for ``key`` as a list of ints, or None."""
        return self._store.get_int_slice(key)

    def get_int_slice_or_default(self, key: str, default: Optional[List[int]]) -> Optional[List[int]]:
        """Return the value for ``key`` as a list of ints, or ``default``."""
        value = self._store.get_int_slice(key)
        return default if value is None else value

    def get_map_str(self, key: str) -> Optional[Dict[str, str]]:
        """Return the value for ``key`` as a dict of strings, or None."""
        return self._store.get_map_str(key)

    def get_float64_slice_or_default(
        self, key: str, default: Optional[List[float]]
    ) -> Optional[List[float]]:
        """Return the value for ``key`` as a list of floats, or ``default``."""
        value = self._store.get_float64_slice(key)
        return default if value is None else value

    def get_any_slice_or_default(self, key: str, default: Optional[List[Any]]) -> Optional[List[Any]]:
        """Return the value for ``key`` if it is a list, else ``default``."""
        value = self._store.get(key)
        if isinstance(value, list):
            return value
        return default

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` at ``key``."""
        self._store.set(key, value)

    def raw(self) -> Dict[str, Any]:
        """Return the underlying dict of all values."""
        return self._store.raw()