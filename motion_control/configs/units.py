"""Value conversion for configuration literals.

Converters take the raw value stored in a configuration source and
return a typed value, raising ``ValueError`` when the literal does not
fit the expected type.  Raw values are strings for INI documents and
may already be native scalars for YAML documents; both are accepted.

Unit factors are *units per mm* for linear quantities and *units per
degree* for angular ones, matching the ``LINEAR_UNITS`` /
``ANGULAR_UNITS`` convention of the machine files.
"""

from __future__ import annotations

import enum
import math
from typing import Any


class JointType(enum.Enum):
    """Kinematic type of a joint."""

    LINEAR = "LINEAR"
    ANGULAR = "ANGULAR"


LINEAR_UNITS: dict[str, float] = {
    "mm": 1.0,
    "metric": 1.0,
    "in": 1 / 25.4,
    "inch": 1 / 25.4,
    "imperial": 1 / 25.4,
}

ANGULAR_UNITS: dict[str, float] = {
    "deg": 1.0,
    "degree": 1.0,
    "grad": 0.9,
    "gon": 0.9,
    "rad": math.pi / 180,
    "radian": math.pi / 180,
}

_TRUE_WORDS = frozenset({"TRUE", "YES", "ON", "1"})
_FALSE_WORDS = frozenset({"FALSE", "NO", "OFF", "0"})


def _text(raw: Any) -> str:
    if not isinstance(raw, str):
        raise ValueError(f"expected a string, got {type(raw).__name__}")
    text = raw.strip()
    if not text:
        raise ValueError("empty value")
    return text


def _number_text(raw: Any) -> str:
    text = _text(raw)
    if "_" in text:
        raise ValueError(f"{text!r} contains digit separators")
    return text


def to_float(raw: Any) -> float:
    """Convert a literal to ``float``."""
    if isinstance(raw, bool):
        raise ValueError("boolean is not a number")
    if isinstance(raw, (int, float)):
        try:
            return float(raw)
        except OverflowError as exc:
            raise ValueError(str(exc)) from exc
    return float(_number_text(raw))


def to_int(raw: Any) -> int:
    """Convert a literal to ``int``.

    Decimal literals and ``0x`` / ``0o`` / ``0b`` prefixed literals are
    accepted.  Fractional values are rejected rather than truncated.
    """
    if isinstance(raw, bool):
        raise ValueError("boolean is not an integer")
    if isinstance(raw, int):
        return raw
    text = _number_text(raw)
    try:
        return int(text, 10)
    except ValueError:
        return int(text, 0)


def to_bool(raw: Any) -> bool:
    """Convert ``TRUE/YES/ON/1`` or ``FALSE/NO/OFF/0`` (any case)."""
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, int) and raw in (0, 1):
        return bool(raw)
    word = _text(raw).upper()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    raise ValueError(f"{raw!r} is not a boolean word")


def to_joint_type(raw: Any) -> JointType:
    """Convert ``LINEAR`` / ``ANGULAR`` (any case)."""
    word = _text(raw).upper()
    try:
        return JointType(word)
    except ValueError:
        raise ValueError(f"{raw!r} is not a joint type") from None


def _to_units(raw: Any, table: dict[str, float]) -> float:
    if isinstance(raw, str):
        factor = table.get(raw.strip().lower())
        if factor is not None:
            return factor
    return to_float(raw)


def to_linear_units(raw: Any) -> float:
    """Convert a linear unit name (``mm``, ``inch``...) or a number."""
    return _to_units(raw, LINEAR_UNITS)


def to_angular_units(raw: Any) -> float:
    """Convert an angular unit name (``deg``, ``rad``...) or a number."""
    return _to_units(raw, ANGULAR_UNITS)
