"""Conversion of loosely typed values to the types named in parameter schemas."""

from __future__ import annotations

import json
import math
import re
from typing import Any, Callable, Dict

from .strings import _float_text, _format_value

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_INT_MIN = -(1 << 63)
_INT_MAX = (1 << 63) - 1
_TRUE_STRINGS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_STRINGS = frozenset({"0", "f", "F", "FALSE", "false", "False"})
_INF_LITERALS = frozenset({"inf", "+inf", "-inf", "infinity", "+infinity", "-infinity"})


class TypeSchemaError(ValueError):
    """Raised when a value cannot be converted to the requested type."""


def parse_value(type_str: str, value: Any) -> Any:
    """Convert ``value`` to the type described by ``type_str``.

    Supported types are ``string``, ``int``, ``float64``, ``bool``,
    ``map[string]any`` and ``[]T`` for any supported ``T``. Slices come back
    as lists whose elements have all been converted.
    """
    type_str = type_str.strip()
    if type_str.startswith("[]"):
        return _parse_slice(type_str[2:], value)
    try:
        parser = _PARSERS[type_str]
    except KeyError:
        raise TypeSchemaError(f"unsupported type: {type_str}") from None
    return parser(value)


def _parse_slice(element_type: str, value: Any) -> list:
    if isinstance(value, (list, tuple, bytes, bytearray)):
        items = list(value)
    else:
        items = [value]

    result = []
    for index, item in enumerate(items):
        try:
            result.append(parse_value(element_type, item))
        except TypeSchemaError as exc:
            raise TypeSchemaError(f"invalid element at index {index}: {exc}") from exc

    if not result and element_type not in _EMPTY_SLICE_ELEMENTS:
        raise TypeSchemaError(
            f'cannot determine array element type for "{element_type}"'
        )
    return result


def _parse_string(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _float_text(value, positional=True)
    return _format_value(value)


def _parse_int(value: Any) -> int:
    if isinstance(value, bool):
        raise TypeSchemaError("cannot convert to int")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            raise TypeSchemaError("cannot convert to int")
        return int(value)
    if isinstance(value, str):
        if not _INT_PATTERN.fullmatch(value):
            raise TypeSchemaError(f'parsing "{value}": invalid syntax')
        number = int(value)
        if not _INT_MIN <= number <= _INT_MAX:
            raise TypeSchemaError(f'parsing "{value}": value out of range')
        return number
    raise TypeSchemaError("cannot convert to int")


def _parse_float_text(text: str) -> float:
    if not text or text != text.strip() or "_" in text:
        raise TypeSchemaError(f'parsing "{text}": invalid syntax')
    lowered = text.lower()
    try:
        number = float(text)
    except ValueError:
        if "0x" in lowered and "p" in lowered:
            try:
                number = float.fromhex(text)
            except (ValueError, OverflowError):
                raise TypeSchemaError(f'parsing "{text}": invalid syntax') from None
        else:
            raise TypeSchemaError(f'parsing "{text}": invalid syntax') from None
    if math.isinf(number) and lowered not in _INF_LITERALS:
        raise TypeSchemaError(f'parsing "{text}": value out of range')
    return number


def _parse_float(value: Any) -> float:
    if isinstance(value, bool):
        raise TypeSchemaError("cannot convert to float64")
    if isinstance(value, float):
        return value
    if isinstance(value, int):
        return float(value)
    if isinstance(value, str):
        return _parse_float_text(value)
    raise TypeSchemaError("cannot convert to float64")


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        if value in _TRUE_STRINGS:
            return True
        if value in _FALSE_STRINGS:
            return False
        raise TypeSchemaError(f'parsing "{value}": invalid syntax')
    raise TypeSchemaError("cannot convert to bool")


def _parse_map(value: Any) -> Any:
    type_name = "map[string]any"
    if isinstance(value, dict):
        if all(isinstance(key, str) for key in value):
            return value
        raise TypeSchemaError(f"cannot convert to {type_name}")
    if isinstance(value, (str, bytes, bytearray)):
        try:
            decoded = json.loads(value, parse_int=float)
        except (ValueError, UnicodeDecodeError) as exc:
            raise TypeSchemaError(f"cannot convert to {type_name}, {exc}") from exc
        if decoded is None or isinstance(decoded, dict):
            return decoded
        raise TypeSchemaError(
            f"cannot convert to {type_name}, "
            f"cannot unmarshal {type(decoded).__name__} into a map"
        )
    raise TypeSchemaError(f"cannot convert to {type_name}")


_PARSERS: Dict[str, Callable[[Any], Any]] = {
    "string": _parse_string,
    "int": _parse_int,
    "float64": _parse_float,
    "bool": _parse_bool,
    "map[string]any": _parse_map,
}

_EMPTY_SLICE_ELEMENTS = frozenset({"string", "int", "float64", "bool"})