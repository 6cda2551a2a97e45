"""Line-oriented JSON ingestion into Avro containers.

This module reads input one line at a time, decodes the JSON documents on
each line, materializes them against the root schema, and appends the
resulting records to a container writer in input order.

An unparsable document stops ingestion; records already appended stay
in the container and the result is marked as aborted.
"""

from __future__ import annotations

import json
from typing import Any, Iterable, Iterator, Protocol, TextIO, cast

from core.config import StrataConfig
from core.errors import StrataIngestError
from core.logging_config import get_logger
from core.types import ConversionResult, ConvertOptions
from ingest.json_documents import iter_json_documents
from materialize.diagnostics import CountingDiagnosticSink, DiagnosticSink, LoggingDiagnosticSink
from materialize.json_kinds import JsonKind, classify_json_value
from materialize.materializer import materialize_datum, materialize_record, tag_union_branch
from schemas.navigator import resolve_record_shape
from schemas.schema_loader import load_schema
from schemas.shapes import Shape
from store.avro_writer import AvroRecordWriter
from store.streams import open_input_stream, open_output_stream

_LOGGER = get_logger(__name__)
_MAX_REPORTED_LINE_LENGTH = 200


class RecordAppender(Protocol):
    """Destination for materialized records."""

    def append(self, record: object) -> None:
        """Accept one record."""


class JsonIngestionLoop:
    """Stateful loop that turns JSON text lines into appended records.

    When the root shape resolves to a record, object documents become one
    record each and array documents one record per element. Any other
    root shape takes each document as a single datum.
    """

    def __init__(self, shape: Shape, appender: RecordAppender, sink: DiagnosticSink) -> None:
        self._shape = shape
        self._record_shape = resolve_record_shape(shape)
        self._appender = appender
        self._sink = CountingDiagnosticSink(sink)
        self._lines_read = 0
        self._documents_read = 0
        self._records_written = 0

    def run(self, lines: Iterable[str]) -> ConversionResult:
        """Consume lines until end of input or the first parse failure."""
        aborted = False
        for line in lines:
            self._lines_read += 1
            if not self._ingest_line(line.rstrip("\r\n"), self._lines_read):
                aborted = True
                break
        return ConversionResult(
            lines_read=self._lines_read,
            documents_read=self._documents_read,
            records_written=self._records_written,
            warning_count=self._sink.warning_count,
            aborted=aborted,
        )

    def _ingest_line(self, line: str, line_number: int) -> bool:
        documents = iter_json_documents(line)
        while True:
            try:
                document = next(documents)
            except StopIteration:
                return True
            except json.JSONDecodeError as error:
                self._sink.error(
                    "json_parse_failed",
                    line_number=line_number,
                    line=line[:_MAX_REPORTED_LINE_LENGTH],
                    reason=error.msg,
                    column=error.colno,
                )
                return False
            self._documents_read += 1
            self._ingest_document(document, f"line {line_number}")

    def _ingest_document(self, document: object, container: str) -> None:
        if self._record_shape is None:
            self._ingest_datum(document, container)
            return
        json_kind = classify_json_value(document)
        if json_kind is JsonKind.OBJECT:
            self._emit_record(document, container)
        elif json_kind is JsonKind.ARRAY:
            for index, element in enumerate(document):
                self._ingest_array_element(element, f"{container}[{index}]")
        else:
            self._report_unclassified(json_kind, container)

    def _ingest_array_element(self, element: object, container: str) -> None:
        json_kind = classify_json_value(element)
        if json_kind is not JsonKind.OBJECT:
            self._report_unclassified(json_kind, container)
            return
        self._emit_record(element, container)

    def _emit_record(self, json_object: Any, container: str) -> None:
        record_shape = cast(Shape, self._record_shape)
        record = materialize_record(json_object, record_shape, container, self._sink)
        self._emit(tag_union_branch(self._shape, record_shape, record))

    def _ingest_datum(self, document: object, container: str) -> None:
        produced, datum = materialize_datum(document, self._shape, container, self._sink)
        if produced:
            self._emit(datum)

    def _report_unclassified(self, json_kind: JsonKind, container: str) -> None:
        self._sink.warning(
            "unclassified_root",
            container=container,
            json_kind=json_kind.value,
            detail="no container?",
        )

    def _emit(self, record: object) -> None:
        self._appender.append(record)
        self._records_written += 1


def ingest_json_lines(
    lines: Iterable[str],
    shape: Shape,
    appender: RecordAppender,
    sink: DiagnosticSink | None = None,
) -> ConversionResult:
    """Materialize JSON text lines and append the records.

    Args:
        lines: Input lines, with or without trailing newlines.
        shape: Root schema shape.
        appender: Destination with an ``append(record)`` method.
        sink: Diagnostic sink; logs through the module logger when omitted.

    Returns:
        Counters and abort status for the run.

    Raises:
        StrataStoreError: If the appender rejects a record.
    """
    loop = JsonIngestionLoop(shape, appender, sink or LoggingDiagnosticSink())
    return loop.run(lines)


def convert_json_to_avro(
    options: ConvertOptions,
    config: StrataConfig,
    sink: DiagnosticSink | None = None,
) -> ConversionResult:
    """Convert newline-delimited JSON text into an Avro container.

    Input and output streams are closed, and the container flushed, on
    every path out of this function including parse aborts and errors.

    Args:
        options: Conversion request options.
        config: Runtime configuration.
        sink: Diagnostic sink; logs through the module logger when omitted.

    Returns:
        Counters and abort status for the run.

    Raises:
        StrataSchemaError: If the schema is invalid.
        StrataIngestError: If input cannot be read.
        StrataStoreError: If a record cannot be written.
    """
    loaded_schema = load_schema(options.schema_source)
    with open_input_stream(options.input_uri, config.input_encoding) as input_stream:
        with open_output_stream(options.output_uri) as output_stream:
            with AvroRecordWriter(
                output_stream,
                loaded_schema,
                codec=options.codec,
                compression_level=options.compression_level,
                sync_interval=config.sync_interval,
            ) as writer:
                result = ingest_json_lines(
                    _read_lines(input_stream, options.input_uri),
                    loaded_schema.shape,
                    writer,
                    sink,
                )
    _log_conversion_completion(options, result)
    return result


def _read_lines(stream: TextIO, input_uri: str) -> Iterator[str]:
    """Yield input lines, surfacing decode failures as ingest errors."""
    try:
        yield from stream
    except UnicodeDecodeError as error:
        raise StrataIngestError(
            f"Failed to decode input {input_uri}: {error.reason}. "
            "Set STRATA_INPUT_ENCODING to the input's text encoding."
        ) from error


def _log_conversion_completion(options: ConvertOptions, result: ConversionResult) -> None:
    """Log conversion completion with contextual metadata."""
    log_method = _LOGGER.warning if result.aborted else _LOGGER.info
    log_method(
        "conversion_completed",
        input_uri=options.input_uri,
        output_uri=options.output_uri,
        codec=options.codec,
        lines_read=result.lines_read,
        documents_read=result.documents_read,
        records_written=result.records_written,
        warning_count=result.warning_count,
        aborted=result.aborted,
    )
