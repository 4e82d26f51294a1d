"""String helpers shared by workflow components."""

from __future__ import annotations

import math
from decimal import Decimal
from typing import Any, Mapping, Optional


def after_first_dot(text: str) -> str:
    """Return the part of ``text`` after its first dot.

    The text is returned unchanged when it has no dot or the dot is its last
    character.
    """
    idx = text.find(".")
    if idx != -1 and idx + 1 < len(text):
        return text[idx + 1:]
    return text


def serialize_string(text: str) -> str:
    """Lower-case ``text`` and strip surrounding whitespace."""
    if not text:
        return ""
    return text.lower().strip()


def replace_tokens(text: str, values: Optional[Mapping[str, Any]]) -> str:
    """Replace ``{{key}}`` tokens in ``text`` with the matching values.

    Longer keys are replaced first so that a key never clobbers a longer key
    it is a prefix of. Tokens without a value are left as they are.
    """
    if not values:
        return text
    for key in sorted(values, key=len, reverse=True):
        text = text.replace("{{" + key + "}}", _format_value(values[key]))
    return text


def _float_text(value: float, *, positional: bool = False) -> str:
    """Shortest text for a float, in general or plain positional form."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    number = Decimal(repr(value)).normalize()
    exponent = number.adjusted()
    if positional or -4 <= exponent < 6:
        return format(number, "f")
    sign, digits, _ = number.as_tuple()
    mantissa = str(digits[0])
    rest = "".join(str(d) for d in digits[1:])
    if rest:
        mantissa += "." + rest
    exp_sign = "+" if exponent >= 0 else "-"
    return f"{'-' if sign else ''}{mantissa}e{exp_sign}{abs(exponent):02d}"


def _format_value(value: Any) -> str:
    """Render a value the way the workflow engine prints plain values."""
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return _float_text(value)
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple, bytes, bytearray)):
        return "[" + " ".join(_format_value(item) for item in value) + "]"
    if isinstance(value, Mapping):
        pairs = sorted(value.items(), key=lambda pair: str(pair[0]))
        body = " ".join(f"{_format_value(k)}:{_format_value(v)}" for k, v in pairs)
        return "map[" + body + "]"
    return str(value)