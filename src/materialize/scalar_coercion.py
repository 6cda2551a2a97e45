"""Scalar coercion with ordered numeric widening.

This module decides which scalar kind of a target shape receives a JSON
scalar. Candidate kinds are tried in a fixed order per JSON kind and the
first one the shape accepts wins.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Mapping

from core.errors import StrataMaterializeError
from materialize.json_kinds import CONTAINER_KINDS, JsonKind
from schemas.navigator import accepts_kind
from schemas.shapes import Shape, ShapeKind

WIDENING_ORDER: Mapping[JsonKind, tuple[ShapeKind, ...]] = {
    JsonKind.INTEGER: (ShapeKind.INT, ShapeKind.LONG, ShapeKind.FLOAT, ShapeKind.DOUBLE),
    JsonKind.LONG: (ShapeKind.LONG, ShapeKind.FLOAT, ShapeKind.DOUBLE),
    JsonKind.BIG_INTEGER: (),
    JsonKind.FLOAT: (ShapeKind.DOUBLE, ShapeKind.FLOAT),
    JsonKind.BOOLEAN: (ShapeKind.BOOLEAN,),
    JsonKind.BYTES: (ShapeKind.BYTES,),
    JsonKind.TEXT: (ShapeKind.STRING,),
}

_CONVERTERS: Mapping[ShapeKind, Callable[[object], object]] = {
    ShapeKind.INT: int,
    ShapeKind.LONG: int,
    ShapeKind.FLOAT: float,
    ShapeKind.DOUBLE: float,
    ShapeKind.BOOLEAN: bool,
    ShapeKind.BYTES: bytes,
    ShapeKind.STRING: str,
}


@dataclass(frozen=True)
class Coercion:
    """A successful scalar coercion.

    Attributes:
        target_kind: Scalar kind of the shape that accepted the value.
        value: Converted value of that kind.
    """

    target_kind: ShapeKind
    value: object


def accepted_targets(json_kind: JsonKind) -> tuple[ShapeKind, ...]:
    """Return candidate target kinds for a JSON scalar kind, in precedence order.

    Raises:
        StrataMaterializeError: If json_kind is not a scalar kind.
    """
    if json_kind in CONTAINER_KINDS or json_kind is JsonKind.NULL:
        raise StrataMaterializeError(f"{json_kind.value} is not a coercible scalar kind.")
    return WIDENING_ORDER[json_kind]


def coerce_scalar(value: object, json_kind: JsonKind, shape: Shape) -> Coercion | None:
    """Coerce a JSON scalar into the first scalar kind the shape accepts.

    Args:
        value: JSON scalar value.
        json_kind: Classified kind of ``value``.
        shape: Target shape, a scalar or a union of alternatives.

    Returns:
        The coercion, or None on a coercion-miss.

    Raises:
        StrataMaterializeError: If json_kind is not a scalar kind.
    """
    for target_kind in accepted_targets(json_kind):
        if accepts_kind(shape, target_kind):
            return Coercion(target_kind=target_kind, value=_CONVERTERS[target_kind](value))
    return None
