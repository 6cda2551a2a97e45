"""Unit tests for record and array materialization."""

from __future__ import annotations

import pytest

from core.errors import StrataSchemaError
from materialize.diagnostics import CollectingDiagnosticSink
from materialize.materializer import materialize_array, materialize_datum, materialize_record
from schemas.shapes import (
    Shape,
    ShapeKind,
    array_shape,
    record_shape,
    scalar_shape,
    union_shape,
)

_INT = scalar_shape(ShapeKind.INT)
_LONG = scalar_shape(ShapeKind.LONG)
_DOUBLE = scalar_shape(ShapeKind.DOUBLE)
_STRING = scalar_shape(ShapeKind.STRING)
_NULL = scalar_shape(ShapeKind.NULL)


def _test_record():
    return record_shape(
        "TestRecord",
        {"intval": _INT, "strval": union_shape(_STRING, _NULL)},
    )


def test_materialize_record_maps_declared_fields(diagnostics: CollectingDiagnosticSink) -> None:
    """Declared fields are copied with their coerced values."""
    record = materialize_record(
        {"intval": -73, "strval": "hello, there!!"}, _test_record(), "line 1", diagnostics
    )

    assert record == {"intval": -73, "strval": ("string", "hello, there!!")}


def test_materialize_record_keeps_input_field_order(
    diagnostics: CollectingDiagnosticSink,
) -> None:
    """Fields appear in JSON object order."""
    record = materialize_record({"strval": "a", "intval": 1}, _test_record(), "line 1", diagnostics)

    assert list(record) == ["strval", "intval"]


def test_materialize_record_skips_unmapped_field(diagnostics: CollectingDiagnosticSink) -> None:
    """Extra input fields are dropped with a warning, not an error."""
    record = materialize_record({"intval": 12, "extra": True}, _test_record(), "line 1", diagnostics)

    assert record == {"intval": 12}
    assert diagnostics.events() == ["unmapped_field_skipped"]
    assert diagnostics.diagnostics[0].fields["container"] == "line 1"


def test_text_in_nullable_string_union_is_stored(diagnostics: CollectingDiagnosticSink) -> None:
    """Text always takes the string branch of a string/null union."""
    record = materialize_record({"strval": "x"}, _test_record(), "line 1", diagnostics)

    assert record["strval"] == ("string", "x") and not diagnostics.diagnostics


def test_null_value_leaves_field_unset(diagnostics: CollectingDiagnosticSink) -> None:
    """JSON null is skipped silently."""
    record = materialize_record({"strval": None}, _test_record(), "line 1", diagnostics)

    assert record == {} and not diagnostics.diagnostics


def test_integer_widens_to_long_field(diagnostics: CollectingDiagnosticSink) -> None:
    """An integer into a long-only field is stored as an integer."""
    shape = record_shape("Wide", {"value": _LONG})

    record = materialize_record({"value": 5}, shape, "line 1", diagnostics)

    assert record == {"value": 5} and isinstance(record["value"], int)


def test_integer_widens_to_double_field(diagnostics: CollectingDiagnosticSink) -> None:
    """An integer into a double-only field is stored as a float."""
    shape = record_shape("Wide", {"value": _DOUBLE})

    record = materialize_record({"value": 5}, shape, "line 1", diagnostics)

    assert isinstance(record["value"], float)


def test_coercion_miss_leaves_field_unset(diagnostics: CollectingDiagnosticSink) -> None:
    """An integer into a string-only field is omitted with a warning."""
    shape = record_shape("Narrow", {"value": _STRING})

    record = materialize_record({"value": 5}, shape, "line 1", diagnostics)

    assert record == {}
    assert diagnostics.events() == ["coercion_miss"]
    assert diagnostics.diagnostics[0].fields["field"] == "value"


def test_nested_record_uses_field_name_as_container(
    diagnostics: CollectingDiagnosticSink,
) -> None:
    """Nested objects recurse with the field name as their container label."""
    inner = record_shape("Inner", {"x": _INT})
    outer = record_shape("Outer", {"inner": union_shape(_NULL, inner)})

    record = materialize_record({"inner": {"x": 1, "y": 2}}, outer, "line 4", diagnostics)

    assert record == {"inner": ("Inner", {"x": 1})}
    assert diagnostics.diagnostics[0].fields["container"] == "inner"


def test_nested_array_omits_uncoercible_elements(diagnostics: CollectingDiagnosticSink) -> None:
    """Array elements that cannot be coerced are dropped from the sequence."""
    shape = record_shape("Tags", {"counts": array_shape(_INT)})

    record = materialize_record({"counts": [1, "two", 3]}, shape, "line 1", diagnostics)

    assert record == {"counts": [1, 3]}
    assert diagnostics.diagnostics[0].fields["field"] == "counts[1]"


def test_object_in_scalar_field_is_unresolvable(diagnostics: CollectingDiagnosticSink) -> None:
    """A nested object without a record branch is a field-level warning."""
    record = materialize_record({"intval": {"a": 1}}, _test_record(), "line 1", diagnostics)

    assert record == {} and diagnostics.events() == ["unresolvable_shape"]


def test_array_in_scalar_field_is_unresolvable(diagnostics: CollectingDiagnosticSink) -> None:
    """A nested array without an array branch is a field-level warning."""
    record = materialize_record({"intval": [1]}, _test_record(), "line 1", diagnostics)

    assert record == {} and diagnostics.events() == ["unresolvable_shape"]


def test_materialize_record_rejects_non_record_shape(
    diagnostics: CollectingDiagnosticSink,
) -> None:
    """A top-level shape without a record form is fatal."""
    with pytest.raises(StrataSchemaError):
        materialize_record({"a": 1}, _INT, "line 1", diagnostics)


def test_materialize_array_recurses_into_nested_arrays(
    diagnostics: CollectingDiagnosticSink,
) -> None:
    """Arrays of arrays mirror the input nesting."""
    shape = array_shape(array_shape(_LONG))

    result = materialize_array([[1, 2], [], [3]], shape, "line 1", diagnostics)

    assert result == [[1, 2], [], [3]]


def test_materialize_array_builds_records(diagnostics: CollectingDiagnosticSink) -> None:
    """Object elements become records of the element shape."""
    shape = array_shape(_test_record())

    result = materialize_array([{"intval": 1}, {"intval": 2}], shape, "line 1", diagnostics)

    assert result == [{"intval": 1}, {"intval": 2}]


def test_materialize_array_drops_null_elements(diagnostics: CollectingDiagnosticSink) -> None:
    """Null elements are skipped like null fields."""
    result = materialize_array([1, None, 2], array_shape(_INT), "line 1", diagnostics)

    assert result == [1, 2]


def test_materialize_array_rejects_non_array_shape(
    diagnostics: CollectingDiagnosticSink,
) -> None:
    """A top-level shape without an array form is fatal."""
    with pytest.raises(StrataSchemaError):
        materialize_array([1], _test_record(), "line 1", diagnostics)


def test_materialize_datum_coerces_root_scalar(diagnostics: CollectingDiagnosticSink) -> None:
    """Scalar roots are coerced against the root shape."""
    assert materialize_datum(3, _DOUBLE, "line 1", diagnostics) == (True, 3.0)


def test_materialize_datum_reports_root_miss(diagnostics: CollectingDiagnosticSink) -> None:
    """A root scalar that does not fit produces no datum."""
    produced, _ = materialize_datum("text", _INT, "line 1", diagnostics)

    assert produced is False and diagnostics.events() == ["coercion_miss"]


def test_widened_scalar_is_pinned_to_its_union_branch(
    diagnostics: CollectingDiagnosticSink,
) -> None:
    """The branch chosen by the widening table travels with the value."""
    shape = record_shape(
        "Numbers",
        {
            "whole": union_shape(_LONG, _INT),
            "single": union_shape(scalar_shape(ShapeKind.FLOAT), _DOUBLE),
        },
    )

    record = materialize_record({"whole": 3, "single": 3}, shape, "line 1", diagnostics)

    assert record == {"whole": ("int", 3), "single": ("float", 3.0)}


def test_nested_record_is_pinned_to_first_record_branch(
    diagnostics: CollectingDiagnosticSink,
) -> None:
    """With two record branches the first declared one is written."""
    first = record_shape("First", {"x": _INT})
    second = record_shape("Second", {"x": _INT})
    shape = record_shape("Holder", {"item": union_shape(_NULL, first, second)})

    record = materialize_record({"item": {"x": 1}}, shape, "line 1", diagnostics)

    assert record == {"item": ("First", {"x": 1})}


def test_union_free_and_array_branches_are_not_tagged(
    diagnostics: CollectingDiagnosticSink,
) -> None:
    """Plain fields and array branches keep bare values."""
    shape = record_shape("Plain", {"n": _LONG, "xs": union_shape(_NULL, array_shape(_INT))})

    record = materialize_record({"n": 1, "xs": [2]}, shape, "line 1", diagnostics)

    assert record == {"n": 1, "xs": [2]}


def test_logical_type_branch_is_left_untagged(diagnostics: CollectingDiagnosticSink) -> None:
    """Logical-type primitives are resolved by the writer."""
    stamp = Shape(kind=ShapeKind.LONG, logical_type="timestamp-millis")
    shape = union_shape(_NULL, stamp)

    assert materialize_datum(5, shape, "line 1", diagnostics) == (True, 5)


def test_root_scalar_union_is_tagged(diagnostics: CollectingDiagnosticSink) -> None:
    """Root scalar datums are pinned like field values."""
    shape = union_shape(_DOUBLE, _LONG)

    assert materialize_datum(7, shape, "line 1", diagnostics) == (True, ("long", 7))
