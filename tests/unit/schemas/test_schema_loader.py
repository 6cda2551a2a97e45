"""Unit tests for schema loading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from core.errors import StrataSchemaError
from schemas.schema_loader import load_schema, parse_schema_text
from schemas.shapes import ShapeKind

_RECORD_SCHEMA = {
    "type": "record",
    "name": "TestRecord",
    "fields": [
        {"name": "intval", "type": "int"},
        {"name": "strval", "type": ["string", "null"]},
    ],
}


def test_load_schema_parses_inline_record() -> None:
    """Inline record JSON should become a record shape with ordered fields."""
    loaded = load_schema(json.dumps(_RECORD_SCHEMA))

    assert [field.name for field in loaded.shape.fields] == ["intval", "strval"]


def test_load_schema_keeps_union_branch_order() -> None:
    """Union branches keep their declaration order."""
    loaded = load_schema(json.dumps(_RECORD_SCHEMA))
    strval = loaded.shape.field("strval")

    assert strval is not None
    assert [branch.kind for branch in strval.branches] == [ShapeKind.STRING, ShapeKind.NULL]


def test_load_schema_accepts_bare_primitive_name() -> None:
    """A bare primitive name such as int is a valid schema."""
    loaded = load_schema("int")

    assert loaded.shape.kind is ShapeKind.INT


def test_load_schema_reads_schema_file(tmp_path: Path) -> None:
    """A path to an existing schema file should be read from disk."""
    schema_path = tmp_path / "record.avsc"
    schema_path.write_text(json.dumps(_RECORD_SCHEMA), encoding="utf-8")

    loaded = load_schema(str(schema_path))

    assert loaded.shape.name == "TestRecord"


def test_load_schema_parses_array_of_int() -> None:
    """Array schemas carry their element shape."""
    loaded = load_schema('{ "type":"array", "items":"int" }')

    assert loaded.shape.items is not None and loaded.shape.items.kind is ShapeKind.INT


def test_parse_schema_text_raises_for_invalid_json() -> None:
    """Malformed schema JSON should raise a schema error."""
    with pytest.raises(StrataSchemaError):
        parse_schema_text('{"type": "record"')


def test_parse_schema_text_raises_for_unknown_type() -> None:
    """References to undefined types should raise a schema error."""
    with pytest.raises(StrataSchemaError):
        parse_schema_text('"NoSuchType"')


def test_parse_schema_text_rejects_recursive_types() -> None:
    """Self-referencing records cannot form a shape tree."""
    schema = {
        "type": "record",
        "name": "Node",
        "fields": [{"name": "next", "type": ["null", "Node"]}],
    }

    with pytest.raises(StrataSchemaError):
        parse_schema_text(json.dumps(schema))


def test_named_types_are_shared_by_reference() -> None:
    """A named type referenced twice should produce one shared shape."""
    schema = {
        "type": "record",
        "name": "Segment",
        "fields": [
            {
                "name": "start",
                "type": {
                    "type": "record",
                    "name": "Point",
                    "fields": [{"name": "x", "type": "double"}],
                },
            },
            {"name": "end", "type": "Point"},
        ],
    }

    loaded = parse_schema_text(json.dumps(schema))

    assert loaded.shape.field("start") is loaded.shape.field("end")


def test_logical_types_resolve_to_underlying_kind() -> None:
    """Logical types should materialize as their base primitive."""
    schema = {
        "type": "record",
        "name": "Event",
        "fields": [{"name": "at", "type": {"type": "long", "logicalType": "timestamp-millis"}}],
    }

    loaded = parse_schema_text(json.dumps(schema))
    at_shape = loaded.shape.field("at")

    assert at_shape is not None and at_shape.kind is ShapeKind.LONG
    assert at_shape.logical_type == "timestamp-millis"


def test_enum_types_keep_symbols() -> None:
    """Enum shapes keep their symbol list."""
    loaded = parse_schema_text('{"type": "enum", "name": "Color", "symbols": ["RED", "BLUE"]}')

    assert loaded.shape.symbols == ("RED", "BLUE")
