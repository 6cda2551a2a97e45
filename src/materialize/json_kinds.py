"""JSON node kind classification.

This module maps parsed JSON values onto an explicit node-kind enum.
Integer kinds are split by the width needed to hold the value.
"""

from __future__ import annotations

from enum import Enum

from core.constants import INT32_MAX, INT32_MIN, INT64_MAX, INT64_MIN
from core.errors import StrataMaterializeError


class JsonKind(str, Enum):
    """Node kinds of a parsed JSON value."""

    OBJECT = "object"
    ARRAY = "array"
    INTEGER = "int"
    LONG = "long"
    BIG_INTEGER = "big integer"
    FLOAT = "double"
    BOOLEAN = "boolean"
    BYTES = "bytes"
    TEXT = "string"
    NULL = "null"


CONTAINER_KINDS = frozenset({JsonKind.OBJECT, JsonKind.ARRAY})


def classify_json_value(value: object) -> JsonKind:
    """Classify a parsed JSON value.

    Args:
        value: Value produced by ``json.loads`` or supplied by an SDK caller.

    Returns:
        The value's node kind.

    Raises:
        StrataMaterializeError: If value is not a JSON-compatible type.
    """
    if value is None:
        return JsonKind.NULL
    if isinstance(value, bool):
        return JsonKind.BOOLEAN
    if isinstance(value, int):
        return _classify_integer(value)
    if isinstance(value, float):
        return JsonKind.FLOAT
    if isinstance(value, str):
        return JsonKind.TEXT
    if isinstance(value, (bytes, bytearray)):
        return JsonKind.BYTES
    if isinstance(value, dict):
        return JsonKind.OBJECT
    if isinstance(value, (list, tuple)):
        return JsonKind.ARRAY
    raise StrataMaterializeError(
        f"Unsupported value type {type(value).__name__}: "
        "expected a value produced by a JSON parser."
    )


def _classify_integer(value: int) -> JsonKind:
    if INT32_MIN <= value <= INT32_MAX:
        return JsonKind.INTEGER
    if INT64_MIN <= value <= INT64_MAX:
        return JsonKind.LONG
    return JsonKind.BIG_INTEGER
