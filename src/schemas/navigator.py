"""Shape navigation helpers.

This module resolves union wrappers to the branch of a requested kind.
Resolution is one level deep and always picks the first declared match.
"""

from __future__ import annotations

from schemas.shapes import Shape, ShapeKind


def resolve_record_shape(shape: Shape) -> Shape | None:
    """Resolve a shape to its record form.

    Args:
        shape: Candidate shape, possibly a union.

    Returns:
        The shape itself when it is a record, the first record branch
        of a union, or None when neither applies.
    """
    return resolve_kind_shape(shape, ShapeKind.RECORD)


def resolve_array_shape(shape: Shape) -> Shape | None:
    """Resolve a shape to its array form.

    Args:
        shape: Candidate shape, possibly a union.

    Returns:
        The shape itself when it is an array, the first array branch
        of a union, or None when neither applies.
    """
    return resolve_kind_shape(shape, ShapeKind.ARRAY)


def accepts_kind(shape: Shape, kind: ShapeKind) -> bool:
    """Return whether a shape is, or directly unions over, the given kind."""
    return resolve_kind_shape(shape, kind) is not None


def resolve_kind_shape(shape: Shape, kind: ShapeKind) -> Shape | None:
    """Return the shape itself or its first union branch of ``kind``."""
    if shape.kind is kind:
        return shape
    if shape.kind is ShapeKind.UNION:
        for branch in shape.branches:
            if branch.kind is kind:
                return branch
    return None
