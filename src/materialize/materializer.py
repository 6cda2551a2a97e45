"""Record and array materializers.

This module walks a parsed JSON value against a schema shape and builds
the matching record (a dict) or sequence (a list). Records and arrays
recurse into each other directly; scalars go through the coercer.

Field-level problems are reported to the diagnostic sink and the
offending field or element is omitted. Only a top-level shape that does
not resolve to the requested container kind raises.

Values stored under a union shape are pinned to the chosen branch with
fastavro's ``(branch_name, value)`` tuple notation, so the writer never
re-resolves the union by its own rules.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence, cast

from core.errors import StrataSchemaError
from materialize.diagnostics import DiagnosticSink
from materialize.json_kinds import JsonKind, classify_json_value
from materialize.scalar_coercion import coerce_scalar
from schemas.navigator import resolve_array_shape, resolve_kind_shape, resolve_record_shape
from schemas.shapes import SCALAR_KINDS, Shape, ShapeKind

_OMITTED = object()


def materialize_record(
    json_object: Mapping[str, Any],
    shape: Shape,
    container: str,
    sink: DiagnosticSink,
) -> dict[str, object]:
    """Convert a JSON object into a record conforming to ``shape``.

    Args:
        json_object: Parsed JSON object.
        shape: Record shape, or a union with a record branch.
        container: Label naming where the object came from, for diagnostics.
        sink: Receiver of field-level warnings.

    Returns:
        Record dict holding only declared fields, in input order.

    Raises:
        StrataSchemaError: If ``shape`` does not resolve to a record.
    """
    resolved = resolve_record_shape(shape)
    if resolved is None:
        raise StrataSchemaError(
            f"Schema {shape.describe()} does not describe a record. "
            "Use a record schema, or a union with a record branch."
        )
    return _build_record(json_object, resolved, container, sink)


def materialize_array(
    json_array: Sequence[Any],
    shape: Shape,
    container: str,
    sink: DiagnosticSink,
) -> list[object]:
    """Convert a JSON array into a sequence conforming to ``shape``.

    Elements that cannot be materialized are omitted, so the result may
    be shorter than the input.

    Args:
        json_array: Parsed JSON array.
        shape: Array shape, or a union with an array branch.
        container: Label naming where the array came from, for diagnostics.
        sink: Receiver of element-level warnings.

    Returns:
        Materialized elements in input order.

    Raises:
        StrataSchemaError: If ``shape`` does not resolve to an array.
    """
    resolved = resolve_array_shape(shape)
    if resolved is None:
        raise StrataSchemaError(
            f"Schema {shape.describe()} does not describe an array. "
            "Use an array schema, or a union with an array branch."
        )
    return _build_array(json_array, resolved, container, sink)


def materialize_datum(
    value: Any,
    shape: Shape,
    container: str,
    sink: DiagnosticSink,
) -> tuple[bool, object]:
    """Materialize a root value against a shape of any kind.

    Args:
        value: Parsed JSON value.
        shape: Root shape.
        container: Label for diagnostics.
        sink: Receiver of warnings.

    Returns:
        ``(True, datum)`` when a datum was produced, else ``(False, None)``.
    """
    datum = _materialize_value(value, shape, container, container, sink)
    if datum is _OMITTED:
        return False, None
    return True, datum


def tag_union_branch(shape: Shape, branch: Shape, datum: object) -> object:
    """Pin a datum to the union branch it was materialized against.

    Records are tagged with their full name and plain primitives with
    their type name. Arrays need no tag (a union holds at most one), and
    logical-type primitives are left for the writer to resolve.

    Args:
        shape: Declared shape of the value.
        branch: Branch of ``shape`` the datum conforms to.
        datum: Materialized value.

    Returns:
        ``(branch_name, datum)`` when ``shape`` is a union, else ``datum``.
    """
    if shape.kind is not ShapeKind.UNION:
        return datum
    if branch.kind is ShapeKind.RECORD:
        return (branch.name, datum)
    if branch.kind in SCALAR_KINDS and branch.logical_type is None:
        return (branch.kind.value, datum)
    return datum


def _build_record(
    json_object: Mapping[str, Any],
    record: Shape,
    container: str,
    sink: DiagnosticSink,
) -> dict[str, object]:
    result: dict[str, object] = {}
    for name, child in json_object.items():
        field_shape = record.field(name)
        if field_shape is None:
            sink.warning(
                "unmapped_field_skipped",
                field=name,
                container=container,
                detail=f"skipping unmapped field {name} contained in {container}",
            )
            continue
        value = _materialize_value(child, field_shape, name, container, sink)
        if value is not _OMITTED:
            result[name] = value
    return result


def _build_array(
    json_array: Sequence[Any],
    array: Shape,
    container: str,
    sink: DiagnosticSink,
) -> list[object]:
    element_shape = cast(Shape, array.items)
    result: list[object] = []
    for index, child in enumerate(json_array):
        value = _materialize_value(child, element_shape, f"{container}[{index}]", container, sink)
        if value is not _OMITTED:
            result.append(value)
    return result


def _materialize_value(
    value: Any,
    shape: Shape,
    label: str,
    container: str,
    sink: DiagnosticSink,
) -> object:
    """Dispatch one field value or array element on its JSON kind."""
    json_kind = classify_json_value(value)
    if json_kind is JsonKind.NULL:
        return _OMITTED
    if json_kind is JsonKind.OBJECT:
        record = resolve_record_shape(shape)
        if record is None:
            _report_unresolvable(sink, json_kind, shape, label, container)
            return _OMITTED
        return tag_union_branch(shape, record, _build_record(value, record, label, sink))
    if json_kind is JsonKind.ARRAY:
        array = resolve_array_shape(shape)
        if array is None:
            _report_unresolvable(sink, json_kind, shape, label, container)
            return _OMITTED
        return _build_array(value, array, label, sink)
    coercion = coerce_scalar(value, json_kind, shape)
    if coercion is None:
        sink.warning(
            "coercion_miss",
            field=label,
            container=container,
            json_kind=json_kind.value,
            shape=shape.describe(),
            detail=f"Can't store a {json_kind.value} in field {label}",
        )
        return _OMITTED
    branch = cast(Shape, resolve_kind_shape(shape, coercion.target_kind))
    return tag_union_branch(shape, branch, coercion.value)


def _report_unresolvable(
    sink: DiagnosticSink,
    json_kind: JsonKind,
    shape: Shape,
    label: str,
    container: str,
) -> None:
    sink.warning(
        "unresolvable_shape",
        field=label,
        container=container,
        json_kind=json_kind.value,
        shape=shape.describe(),
        detail=f"Can't store a nested {json_kind.value} in field {label}",
    )
