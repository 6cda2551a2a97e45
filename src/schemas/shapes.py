"""Immutable schema shape tree.

This module defines the typed shape nodes walked during materialization.
Shapes are trees shared by reference and never mutated after loading.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ShapeKind(str, Enum):
    """Kinds of schema shape nodes, named after their Avro types."""

    RECORD = "record"
    ARRAY = "array"
    UNION = "union"
    MAP = "map"
    ENUM = "enum"
    FIXED = "fixed"
    NULL = "null"
    BOOLEAN = "boolean"
    INT = "int"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"
    BYTES = "bytes"
    STRING = "string"


SCALAR_KINDS = frozenset(
    {
        ShapeKind.BOOLEAN,
        ShapeKind.INT,
        ShapeKind.LONG,
        ShapeKind.FLOAT,
        ShapeKind.DOUBLE,
        ShapeKind.BYTES,
        ShapeKind.STRING,
    }
)


@dataclass(frozen=True)
class FieldShape:
    """One named record field.

    Attributes:
        name: Field name as declared in the schema.
        shape: Shape of the field value.
    """

    name: str
    shape: Shape


@dataclass(frozen=True)
class Shape:
    """One node of a schema shape tree.

    Attributes:
        kind: Node kind.
        name: Full name for named types (record, enum, fixed).
        fields: Ordered record fields.
        items: Array element shape.
        values: Map value shape.
        branches: Ordered union alternatives.
        symbols: Enum symbols.
        logical_type: Avro logical type annotating a primitive, if any.
    """

    kind: ShapeKind
    name: str | None = None
    fields: tuple[FieldShape, ...] = ()
    items: Shape | None = None
    values: Shape | None = None
    branches: tuple[Shape, ...] = ()
    symbols: tuple[str, ...] = ()
    logical_type: str | None = None

    def field(self, name: str) -> Shape | None:
        """Return the shape of a record field, or None when undeclared."""
        for field_shape in self.fields:
            if field_shape.name == name:
                return field_shape.shape
        return None

    def describe(self) -> str:
        """Render a short human-readable description for diagnostics."""
        if self.kind is ShapeKind.UNION:
            return "[" + ", ".join(branch.describe() for branch in self.branches) + "]"
        if self.kind is ShapeKind.ARRAY and self.items is not None:
            return f"array<{self.items.describe()}>"
        if self.kind is ShapeKind.MAP and self.values is not None:
            return f"map<{self.values.describe()}>"
        if self.name:
            return self.name
        return self.kind.value


def scalar_shape(kind: ShapeKind) -> Shape:
    """Build a scalar or null shape.

    Raises:
        ValueError: If kind is a composite kind.
    """
    if kind not in SCALAR_KINDS and kind is not ShapeKind.NULL:
        raise ValueError(f"{kind.value} is not a scalar shape kind")
    return Shape(kind=kind)


def record_shape(name: str, fields: dict[str, Shape]) -> Shape:
    """Build a record shape from an ordered name-to-shape mapping."""
    return Shape(
        kind=ShapeKind.RECORD,
        name=name,
        fields=tuple(FieldShape(name=key, shape=value) for key, value in fields.items()),
    )


def array_shape(items: Shape) -> Shape:
    """Build an array shape."""
    return Shape(kind=ShapeKind.ARRAY, items=items)


def map_shape(values: Shape) -> Shape:
    """Build a map shape."""
    return Shape(kind=ShapeKind.MAP, values=values)


def union_shape(*branches: Shape) -> Shape:
    """Build a union shape with branches in declaration order."""
    return Shape(kind=ShapeKind.UNION, branches=tuple(branches))
