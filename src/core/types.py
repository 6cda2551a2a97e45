"""Shared typed models.

This module defines immutable data models used by the ingest, store,
CLI, and SDK layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from core.constants import DEFAULT_CODEC, DEFAULT_COMPRESSION_LEVEL


@dataclass(frozen=True)
class ConvertOptions:
    """JSON-to-container conversion options.

    Attributes:
        input_uri: Input JSON text file path, or ``-`` for stdin.
        output_uri: Output container file path, or ``-`` for stdout.
        schema_source: Inline schema JSON, primitive type name, or schema file path.
        codec: Container block codec name.
        compression_level: Deflate compression level in [1, 9].
    """

    input_uri: str
    output_uri: str
    schema_source: str
    codec: str = DEFAULT_CODEC
    compression_level: int = DEFAULT_COMPRESSION_LEVEL


@dataclass(frozen=True)
class ConversionResult:
    """Outcome of one conversion invocation.

    Attributes:
        lines_read: Number of input lines consumed.
        documents_read: Number of JSON documents decoded.
        records_written: Number of records appended to the container.
        warning_count: Number of diagnostics reported while materializing.
        aborted: Whether ingestion stopped early on unparsable input.
    """

    lines_read: int
    documents_read: int
    records_written: int
    warning_count: int
    aborted: bool


@dataclass(frozen=True)
class ContainerSummary:
    """Header-level description of an existing container file.

    Attributes:
        schema: Writer schema stored in the container header.
        codec: Block codec name recorded in the header.
        record_count: Number of records in the container.
        metadata: Raw header metadata entries.
    """

    schema: object
    codec: str
    record_count: int
    metadata: Mapping[str, str] = field(default_factory=dict)
