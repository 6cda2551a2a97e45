"""Schema loading for conversion runs.

This module parses Avro schema documents with fastavro and converts the
parsed form into an immutable shape tree for materialization. The parsed
fastavro schema is kept alongside the tree for the container writer.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from fastavro import parse_schema
from fastavro.schema import SchemaParseException

from core.errors import StrataSchemaError
from core.logging_config import get_logger
from schemas.shapes import FieldShape, Shape, ShapeKind

_LOGGER = get_logger(__name__)

_INLINE_SCHEMA_PREFIXES = ("{", "[", '"')
_PRIMITIVE_KINDS = {
    "null": ShapeKind.NULL,
    "boolean": ShapeKind.BOOLEAN,
    "int": ShapeKind.INT,
    "long": ShapeKind.LONG,
    "float": ShapeKind.FLOAT,
    "double": ShapeKind.DOUBLE,
    "bytes": ShapeKind.BYTES,
    "string": ShapeKind.STRING,
}
_RECORD_TYPES = ("record", "error")


@dataclass(frozen=True)
class LoadedSchema:
    """A schema ready for materialization and writing.

    Attributes:
        shape: Shape tree walked by the materializer.
        parsed: fastavro-parsed schema consumed by the container writer.
    """

    shape: Shape
    parsed: Any


def load_schema(schema_source: str) -> LoadedSchema:
    """Load a schema from inline text or a schema file path.

    Inline JSON (object, union array, or quoted name) is parsed directly.
    Otherwise an existing file path is read, and anything else is taken
    as a bare type name such as ``int``.

    Args:
        schema_source: Inline schema text, bare type name, or file path.

    Returns:
        Loaded schema with shape tree and parsed writer schema.

    Raises:
        StrataSchemaError: If the schema cannot be read or parsed.
    """
    stripped_source = schema_source.strip()
    if not stripped_source:
        raise StrataSchemaError("Schema is empty. Provide inline schema JSON or a schema file.")
    if stripped_source.startswith(_INLINE_SCHEMA_PREFIXES):
        return parse_schema_text(stripped_source)
    schema_path = Path(stripped_source).expanduser()
    if schema_path.is_file():
        return load_schema_file(schema_path)
    return parse_schema_text(json.dumps(stripped_source))


def load_schema_file(schema_path: Path) -> LoadedSchema:
    """Load a schema from an ``.avsc`` file.

    Args:
        schema_path: Path to the schema document.

    Returns:
        Loaded schema.

    Raises:
        StrataSchemaError: If the file is unreadable or invalid.
    """
    try:
        schema_text = schema_path.read_text(encoding="utf-8")
    except OSError as error:
        raise StrataSchemaError(
            f"Failed to read schema file {schema_path}: {error}. "
            "Provide a readable schema file."
        ) from error
    loaded = parse_schema_text(schema_text)
    _LOGGER.info("schema_loaded", schema_path=str(schema_path), root_kind=loaded.shape.kind.value)
    return loaded


def parse_schema_text(schema_text: str) -> LoadedSchema:
    """Parse schema JSON text.

    Args:
        schema_text: Avro schema document.

    Returns:
        Loaded schema.

    Raises:
        StrataSchemaError: If the text is not a valid schema.
    """
    try:
        schema_document = json.loads(schema_text)
    except json.JSONDecodeError as error:
        raise StrataSchemaError(
            f"Failed to parse schema JSON: {error.msg} at position {error.pos}. "
            "Fix the schema syntax and retry."
        ) from error
    named_schemas: dict[str, Any] = {}
    try:
        parsed = parse_schema(schema_document, named_schemas=named_schemas)
    except (SchemaParseException, ValueError, KeyError, TypeError) as error:
        raise StrataSchemaError(f"Invalid schema: {error}.") from error
    shape = shape_from_parsed(parsed, named_schemas)
    return LoadedSchema(shape=shape, parsed=parsed)


def shape_from_parsed(parsed: Any, named_schemas: Mapping[str, Any]) -> Shape:
    """Convert a fastavro-parsed schema into a shape tree.

    Args:
        parsed: Parsed schema node.
        named_schemas: Named type table filled by ``fastavro.parse_schema``.

    Returns:
        Root shape of the converted tree.

    Raises:
        StrataSchemaError: If the schema is recursive.
    """
    builder = _ShapeBuilder(named_schemas)
    return builder.build(parsed)


class _ShapeBuilder:
    """Stateful converter that shares named shapes by reference."""

    def __init__(self, named_schemas: Mapping[str, Any]) -> None:
        self._named_schemas = named_schemas
        self._built: dict[str, Shape] = {}
        self._in_progress: set[str] = set()

    def build(self, node: Any) -> Shape:
        if isinstance(node, list):
            return Shape(kind=ShapeKind.UNION, branches=tuple(self.build(branch) for branch in node))
        if isinstance(node, str):
            return self._build_named_reference(node)
        if isinstance(node, dict):
            return self._build_mapping(node)
        raise StrataSchemaError(f"Invalid schema node of type {type(node).__name__}.")

    def _build_named_reference(self, name: str) -> Shape:
        if name in _PRIMITIVE_KINDS:
            return Shape(kind=_PRIMITIVE_KINDS[name])
        if name in self._in_progress:
            raise StrataSchemaError(
                f"Recursive type '{name}' is not supported. "
                "Flatten the schema so named types do not reference themselves."
            )
        if name in self._built:
            return self._built[name]
        if name not in self._named_schemas:
            raise StrataSchemaError(f"Unknown type '{name}' referenced in schema.")
        return self._build_mapping(self._named_schemas[name])

    def _build_mapping(self, node: Mapping[str, Any]) -> Shape:
        type_name = node.get("type")
        if isinstance(type_name, (list, dict)):
            return self.build(type_name)
        if type_name in _PRIMITIVE_KINDS:
            return Shape(kind=_PRIMITIVE_KINDS[type_name], logical_type=node.get("logicalType"))
        if type_name in _RECORD_TYPES:
            return self._build_record(node)
        if type_name == "array":
            return Shape(kind=ShapeKind.ARRAY, items=self.build(node["items"]))
        if type_name == "map":
            return Shape(kind=ShapeKind.MAP, values=self.build(node["values"]))
        if type_name == "enum":
            return self._remember(
                Shape(kind=ShapeKind.ENUM, name=node["name"], symbols=tuple(node["symbols"]))
            )
        if type_name == "fixed":
            return self._remember(Shape(kind=ShapeKind.FIXED, name=node["name"]))
        if isinstance(type_name, str):
            return self._build_named_reference(type_name)
        raise StrataSchemaError(f"Unsupported schema node: {node!r}.")

    def _build_record(self, node: Mapping[str, Any]) -> Shape:
        name = node["name"]
        if name in self._built:
            return self._built[name]
        self._in_progress.add(name)
        try:
            fields = tuple(
                FieldShape(name=field["name"], shape=self.build(field["type"]))
                for field in node["fields"]
            )
        finally:
            self._in_progress.discard(name)
        return self._remember(Shape(kind=ShapeKind.RECORD, name=name, fields=fields))

    def _remember(self, shape: Shape) -> Shape:
        if shape.name:
            self._built[shape.name] = shape
        return shape
