"""Public SDK surface for Strata.

This module provides a stable import path for library users.
It re-exports conversion entry points and typed option models.
"""

from __future__ import annotations

from core.config import StrataConfig
from core.errors import (
    StrataConfigError,
    StrataError,
    StrataIngestError,
    StrataMaterializeError,
    StrataSchemaError,
    StrataStoreError,
)
from core.types import ContainerSummary, ConversionResult, ConvertOptions
from ingest.pipeline import convert_json_to_avro, ingest_json_lines
from materialize.diagnostics import CollectingDiagnosticSink, LoggingDiagnosticSink
from materialize.materializer import materialize_array, materialize_datum, materialize_record
from schemas.schema_loader import LoadedSchema, load_schema
from store.avro_reader import read_container_summary, read_records, read_schema
from store.avro_writer import AvroRecordWriter

__all__ = [
    "AvroRecordWriter",
    "CollectingDiagnosticSink",
    "ContainerSummary",
    "ConversionResult",
    "ConvertOptions",
    "LoadedSchema",
    "LoggingDiagnosticSink",
    "StrataConfig",
    "StrataConfigError",
    "StrataError",
    "StrataIngestError",
    "StrataMaterializeError",
    "StrataSchemaError",
    "StrataStoreError",
    "convert_json_to_avro",
    "ingest_json_lines",
    "load_schema",
    "materialize_array",
    "materialize_datum",
    "materialize_record",
    "read_container_summary",
    "read_records",
    "read_schema",
]
